"""Seed the ration item catalog when the items table is empty."""

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from relief_hub.db.models.inventory import Item
from relief_hub.models.ration_items import RATION_ITEMS
from relief_hub.utils.logger import get_logger

logger = get_logger("relief_hub.db.seed_data")


def seed_ration_items(session: Session) -> int:
    """Insert catalog rows for codes not yet present. Returns the number inserted."""
    existing = set(session.scalars(select(Item.code)).all())
    inserted = 0
    for meta in RATION_ITEMS:
        if meta.code.value in existing:
            continue
        session.add(Item(code=meta.code.value, name=meta.label, icon=meta.icon))
        inserted += 1
    session.flush()
    logger.info("db.seed.ration_items", inserted=inserted, existing=len(existing))
    return inserted


def catalog_is_empty(session: Session) -> bool:
    return (session.scalar(select(func.count(Item.id))) or 0) == 0

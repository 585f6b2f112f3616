"""ORM models for the item catalog and per-target inventory rows."""

from typing import Optional

from sqlalchemy import Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from relief_hub.db.base import Base, TimestampMixin


class Item(Base, TimestampMixin):
    """Ration item catalog row, seeded from RATION_ITEMS on first init."""

    __tablename__ = "items"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    code: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    icon: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)


class InventoryItem(Base, TimestampMixin):
    """Needed / pending / donated counts for one item code on one help request or camp."""

    __tablename__ = "inventory_items"
    __table_args__ = (
        UniqueConstraint("target_type", "target_id", "item_name", name="uq_inventory_target_item"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    target_type: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    target_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    item_name: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    quantity_needed: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    quantity_donated: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    quantity_pending: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    notes: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

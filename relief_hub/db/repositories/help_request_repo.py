"""Help request repository: create with needs, paginated public listing, owner lookups, update."""

from datetime import datetime, timedelta, timezone
from typing import Any, NamedTuple, Optional

from sqlalchemy import func, select

from relief_hub.config import DEFAULT_PAGE_LIMIT, HELP_REQUEST_WINDOW_DAYS
from relief_hub.db import detach_all, get_session
from relief_hub.db.models.help_request import HelpRequest
from relief_hub.db.repositories import inventory_repo
from relief_hub.domain.inventory import clean_needs
from relief_hub.models.enums import HelpRequestStatus, TargetType


class Bounds(NamedTuple):
    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float

    def is_valid(self) -> bool:
        return self.min_lat < self.max_lat and self.min_lng < self.max_lng


def create(fields: dict[str, Any], ration_items: dict[str, int], user_id: Optional[int]) -> tuple[HelpRequest, list[str]]:
    """Insert a help request and declare one inventory row per positive ration item.

    Returns the detached row and the list of item codes that were declared.
    """
    needs = clean_needs(ration_items)
    with get_session() as session:
        row = HelpRequest(user_id=user_id, status=HelpRequestStatus.OPEN.value, **fields)
        session.add(row)
        session.flush()
        for code, quantity in needs.items():
            inventory_repo.upsert_need(session, TargetType.HELP_REQUEST, row.id, code, quantity)
        session.refresh(row)
        session.expunge(row)
        return row, list(needs.keys())


def get_by_id(help_request_id: int) -> Optional[HelpRequest]:
    with get_session() as session:
        row = session.get(HelpRequest, help_request_id)
        if row is not None:
            session.expunge(row)
        return row


def find_all(
    urgency: Optional[str] = None,
    district: Optional[str] = None,
    bounds: Optional[Bounds] = None,
    page: int = 1,
    limit: int = DEFAULT_PAGE_LIMIT,
    window_days: int = HELP_REQUEST_WINDOW_DAYS,
) -> tuple[list[HelpRequest], int, dict[int, list[str]]]:
    """OPEN requests from the last ``window_days``, newest first.

    Returns (page rows, total matching rows, id -> needed item codes). Bounds are
    ignored unless min < max on both axes.
    """
    since = datetime.now(timezone.utc) - timedelta(days=window_days)
    page = max(page, 1)
    limit = max(limit, 1)
    with get_session() as session:
        q = (
            select(HelpRequest)
            .where(HelpRequest.status == HelpRequestStatus.OPEN.value)
            .where(HelpRequest.created_at >= since)
        )
        if urgency:
            q = q.where(HelpRequest.urgency == urgency)
        if district and district.strip():
            q = q.where(HelpRequest.approx_area.ilike(f"%{district.strip()}%"))
        if bounds is not None and bounds.is_valid():
            q = q.where(HelpRequest.lat.between(bounds.min_lat, bounds.max_lat))
            q = q.where(HelpRequest.lng.between(bounds.min_lng, bounds.max_lng))

        total = session.scalar(select(func.count()).select_from(q.subquery())) or 0
        rows = list(
            session.scalars(
                q.order_by(HelpRequest.created_at.desc(), HelpRequest.id.desc())
                .limit(limit)
                .offset((page - 1) * limit)
            ).all()
        )
        codes = inventory_repo.needed_codes(session, TargetType.HELP_REQUEST, [r.id for r in rows])
        return detach_all(session, rows), total, codes


def find_by_user(user_id: int) -> tuple[list[HelpRequest], dict[int, list[str]]]:
    """Every request the user created, any status and age, newest first."""
    with get_session() as session:
        rows = list(
            session.scalars(
                select(HelpRequest)
                .where(HelpRequest.user_id == user_id)
                .order_by(HelpRequest.created_at.desc(), HelpRequest.id.desc())
            ).all()
        )
        codes = inventory_repo.needed_codes(session, TargetType.HELP_REQUEST, [r.id for r in rows])
        return detach_all(session, rows), codes


def get_many(help_request_ids: list[int]) -> dict[int, HelpRequest]:
    if not help_request_ids:
        return {}
    with get_session() as session:
        rows = list(session.scalars(select(HelpRequest).where(HelpRequest.id.in_(help_request_ids))).all())
        return {r.id: r for r in detach_all(session, rows)}


def needed_codes_for(help_request_ids: list[int]) -> dict[int, list[str]]:
    with get_session() as session:
        return inventory_repo.needed_codes(session, TargetType.HELP_REQUEST, help_request_ids)


def update(
    help_request_id: int,
    fields: dict[str, Any],
    ration_items: Optional[dict[str, int]] = None,
) -> Optional[HelpRequest]:
    """Apply changed fields. When ration_items is given, it becomes the full set of needs."""
    with get_session() as session:
        row = session.get(HelpRequest, help_request_id)
        if row is None:
            return None
        for key, value in fields.items():
            setattr(row, key, value)
        if ration_items is not None:
            needs = clean_needs(ration_items)
            current = inventory_repo.needed_codes(session, TargetType.HELP_REQUEST, [row.id])[row.id]
            for code in current:
                if code not in needs:
                    inventory_repo.clear_need(session, TargetType.HELP_REQUEST, row.id, code)
            for code, quantity in needs.items():
                inventory_repo.upsert_need(session, TargetType.HELP_REQUEST, row.id, code, quantity)
        session.flush()
        session.refresh(row)
        session.expunge(row)
        return row

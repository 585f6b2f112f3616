"""Inventory repository: per-target needed / pending / donated rows and the help request summary.

The session-level helpers (upsert_need, add_pending, move_pending_to_donated) run
inside a caller's transaction so a help request, camp or donation and its
inventory changes commit together. The module-level operations without a
session argument open their own.
"""

from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

from sqlalchemy import case, func, select
from sqlalchemy.orm import Session

from relief_hub.config import HELP_REQUEST_WINDOW_DAYS
from relief_hub.db import detach_all, get_session
from relief_hub.db.models.help_request import HelpRequest
from relief_hub.db.models.inventory import InventoryItem
from relief_hub.domain.inventory import (
    InventoryLine,
    count_item_types,
    remaining,
    split_confirmation,
    summarize_inventory,
)
from relief_hub.models.enums import HelpRequestStatus, TargetType, Urgency
from relief_hub.models.locations import district_for_area
from relief_hub.models.responses import HelpRequestSummary, PeopleSummary, RationItemInventorySummary
from relief_hub.utils.logger import get_logger

logger = get_logger("relief_hub.db.inventory_repo")


def _target(target_type: TargetType | str) -> str:
    return getattr(target_type, "value", target_type)


def find_row(session: Session, target_type: TargetType | str, target_id: int, item_code: str) -> Optional[InventoryItem]:
    return session.scalars(
        select(InventoryItem)
        .where(InventoryItem.target_type == _target(target_type))
        .where(InventoryItem.target_id == target_id)
        .where(InventoryItem.item_name == item_code)
    ).first()


def upsert_need(
    session: Session,
    target_type: TargetType | str,
    target_id: int,
    item_code: str,
    quantity: int,
    notes: Optional[str] = None,
) -> InventoryItem:
    """Set quantity_needed for (target, item). Pending and donated counts are untouched."""
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise ValueError(f"Needed quantity for {item_code!r} must be a positive integer, got {quantity!r}")
    row = find_row(session, target_type, target_id, item_code)
    if row is None:
        row = InventoryItem(
            target_type=_target(target_type),
            target_id=target_id,
            item_name=item_code,
            quantity_needed=quantity,
            quantity_donated=0,
            quantity_pending=0,
            notes=notes,
        )
        session.add(row)
    else:
        row.quantity_needed = quantity
        if notes is not None:
            row.notes = notes
    session.flush()
    return row


def clear_need(session: Session, target_type: TargetType | str, target_id: int, item_code: str) -> None:
    """Zero the need for an item that was dropped from a target. The row stays for history."""
    row = find_row(session, target_type, target_id, item_code)
    if row is not None:
        row.quantity_needed = 0
        session.flush()


def add_pending(
    session: Session,
    target_type: TargetType | str,
    target_id: int,
    item_code: str,
    quantity: int,
) -> InventoryItem:
    """Increase quantity_pending with no cap. Creates a zero-need row when the item was never declared."""
    row = find_row(session, target_type, target_id, item_code)
    if row is None:
        row = InventoryItem(
            target_type=_target(target_type),
            target_id=target_id,
            item_name=item_code,
            quantity_needed=0,
            quantity_donated=0,
            quantity_pending=quantity,
        )
        session.add(row)
        logger.info(
            "inventory.row_auto_created",
            target_type=_target(target_type),
            target_id=target_id,
            item=item_code,
        )
    else:
        # Incremented in SQL so concurrent pledges add up
        row.quantity_pending = InventoryItem.quantity_pending + quantity
    session.flush()
    session.refresh(row)
    return row


def move_pending_to_donated(
    session: Session,
    target_type: TargetType | str,
    target_id: int,
    item_code: str,
    quantity: int,
) -> InventoryItem:
    """Confirm ``quantity``: donated grows by the full amount, pending shrinks by what it held."""
    row = find_row(session, target_type, target_id, item_code)
    if row is None:
        row = add_pending(session, target_type, target_id, item_code, 0)
    moved, _ = split_confirmation(row.quantity_pending, quantity)
    row.quantity_pending = case(
        (InventoryItem.quantity_pending > quantity, InventoryItem.quantity_pending - quantity),
        else_=0,
    )
    row.quantity_donated = InventoryItem.quantity_donated + quantity
    session.flush()
    session.refresh(row)
    if moved < quantity:
        logger.warning(
            "inventory.confirm_exceeds_pending",
            target_type=_target(target_type),
            target_id=target_id,
            item=item_code,
            quantity=quantity,
            moved_from_pending=moved,
        )
    return row


def declare_need(target_type: TargetType | str, target_id: int, item_code: str, quantity: int) -> InventoryItem:
    """Idempotent upsert of the needed quantity."""
    with get_session() as session:
        row = upsert_need(session, target_type, target_id, item_code, quantity)
        session.refresh(row)
        session.expunge(row)
        return row


def record_pending_donation(target_type: TargetType | str, target_id: int, item_code: str, quantity: int) -> InventoryItem:
    with get_session() as session:
        row = add_pending(session, target_type, target_id, item_code, quantity)
        session.refresh(row)
        session.expunge(row)
        return row


def confirm_donation(target_type: TargetType | str, target_id: int, item_code: str, quantity: int) -> InventoryItem:
    with get_session() as session:
        row = move_pending_to_donated(session, target_type, target_id, item_code, quantity)
        session.refresh(row)
        session.expunge(row)
        return row


def remaining_for(target_type: TargetType | str, target_id: int, item_code: str) -> int:
    """max(0, needed - donated - pending); 0 when the item was never declared."""
    with get_session() as session:
        row = find_row(session, target_type, target_id, item_code)
        if row is None:
            return 0
        return remaining(row.quantity_needed, row.quantity_donated, row.quantity_pending)


def list_for_target(target_type: TargetType | str, target_id: int) -> list[InventoryItem]:
    with get_session() as session:
        rows = list(
            session.scalars(
                select(InventoryItem)
                .where(InventoryItem.target_type == _target(target_type))
                .where(InventoryItem.target_id == target_id)
                .order_by(InventoryItem.id)
            ).all()
        )
        return detach_all(session, rows)


def needed_codes(session: Session, target_type: TargetType | str, target_ids: Iterable[int]) -> dict[int, list[str]]:
    """Map target id -> item codes with quantity_needed > 0."""
    ids = list(target_ids)
    result: dict[int, list[str]] = {i: [] for i in ids}
    if not ids:
        return result
    rows = session.execute(
        select(InventoryItem.target_id, InventoryItem.item_name)
        .where(InventoryItem.target_type == _target(target_type))
        .where(InventoryItem.target_id.in_(ids))
        .where(InventoryItem.quantity_needed > 0)
        .order_by(InventoryItem.id)
    ).all()
    for target_id, item_name in rows:
        result[target_id].append(item_name)
    return result


def rows_for_targets(session: Session, target_type: TargetType | str, target_ids: Iterable[int]) -> dict[int, list[InventoryItem]]:
    ids = list(target_ids)
    result: dict[int, list[InventoryItem]] = {i: [] for i in ids}
    if not ids:
        return result
    rows = session.scalars(
        select(InventoryItem)
        .where(InventoryItem.target_type == _target(target_type))
        .where(InventoryItem.target_id.in_(ids))
        .order_by(InventoryItem.id)
    ).all()
    for row in rows:
        result[row.target_id].append(row)
    return result


def summarize(window_days: int = HELP_REQUEST_WINDOW_DAYS) -> HelpRequestSummary:
    """Aggregate help requests created in the last ``window_days`` (every status) and their inventory."""
    since = datetime.now(timezone.utc) - timedelta(days=window_days)
    by_urgency = {u.value: 0 for u in Urgency}
    by_status = {s.value: 0 for s in HelpRequestStatus}
    by_district: dict[str, int] = {}

    with get_session() as session:
        in_window = HelpRequest.created_at >= since
        total = session.scalar(select(func.count(HelpRequest.id)).where(in_window)) or 0

        for urgency, count in session.execute(
            select(HelpRequest.urgency, func.count(HelpRequest.id)).where(in_window).group_by(HelpRequest.urgency)
        ).all():
            if urgency in by_urgency:
                by_urgency[urgency] = count

        for status, count in session.execute(
            select(HelpRequest.status, func.count(HelpRequest.id)).where(in_window).group_by(HelpRequest.status)
        ).all():
            if status in by_status:
                by_status[status] = count

        for area, count in session.execute(
            select(HelpRequest.approx_area, func.count(HelpRequest.id)).where(in_window).group_by(HelpRequest.approx_area)
        ).all():
            if not area:
                continue
            key = district_for_area(area) or area
            by_district[key] = by_district.get(key, 0) + count

        people_row = session.execute(
            select(
                func.coalesce(func.sum(HelpRequest.total_people), 0),
                func.coalesce(func.sum(HelpRequest.elders), 0),
                func.coalesce(func.sum(HelpRequest.children), 0),
                func.coalesce(func.sum(HelpRequest.pets), 0),
            ).where(in_window)
        ).one()

        id_subq = select(HelpRequest.id).where(in_window)
        lines = [
            InventoryLine(
                target_id=r.target_id,
                item_name=r.item_name,
                quantity_needed=r.quantity_needed,
                quantity_donated=r.quantity_donated,
                quantity_pending=r.quantity_pending,
            )
            for r in session.scalars(
                select(InventoryItem)
                .where(InventoryItem.target_type == TargetType.HELP_REQUEST.value)
                .where(InventoryItem.target_id.in_(id_subq))
            ).all()
        ]

    total_people, elders, children, pets = (int(v) for v in people_row)
    items = summarize_inventory(lines)
    return HelpRequestSummary(
        total=total,
        by_urgency=by_urgency,
        by_status=by_status,
        by_district=by_district,
        people=PeopleSummary(
            total_people=total_people,
            elders=elders,
            children=children,
            pets=pets,
            combined_total=total_people + elders + children,
        ),
        ration_items={
            code: RationItemInventorySummary.model_validate(entry) for code, entry in items.items()
        },
        total_ration_item_types=count_item_types(items),
    )

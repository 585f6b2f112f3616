"""Camp repository: camps with their items (inventory rows), drop-off locations and links."""

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from relief_hub.db import detach_all, get_session
from relief_hub.db.models.camp import Camp, CampDonation, CampDropOffLocation, CampHelpRequest
from relief_hub.db.models.inventory import InventoryItem
from relief_hub.db.repositories import inventory_repo
from relief_hub.db.repositories.help_request_repo import Bounds
from relief_hub.models.enums import TargetType


@dataclass
class CampRelations:
    """Everything hanging off one camp, loaded in bulk for responses."""

    items: list[InventoryItem] = field(default_factory=list)
    drop_off_locations: list[CampDropOffLocation] = field(default_factory=list)
    help_request_ids: list[int] = field(default_factory=list)
    donation_ids: list[int] = field(default_factory=list)


def _add_items(session: Session, camp_id: int, items: Iterable[dict[str, Any]]) -> None:
    for item in items:
        inventory_repo.upsert_need(
            session, TargetType.CAMP, camp_id, item["item_type"], item["quantity"], notes=item.get("notes")
        )


def _add_locations(session: Session, camp_id: int, locations: Iterable[dict[str, Any]]) -> None:
    for loc in locations:
        session.add(CampDropOffLocation(camp_id=camp_id, **loc))


def _add_links(session: Session, camp_id: int, help_request_ids: Iterable[int], donation_ids: Iterable[int]) -> None:
    for hr_id in dict.fromkeys(help_request_ids):
        session.add(CampHelpRequest(camp_id=camp_id, help_request_id=hr_id))
    for donation_id in dict.fromkeys(donation_ids):
        session.add(CampDonation(camp_id=camp_id, donation_id=donation_id))


def create(
    volunteer_club_id: int,
    fields: dict[str, Any],
    items: list[dict[str, Any]],
    drop_off_locations: list[dict[str, Any]],
    help_request_ids: list[int],
    donation_ids: list[int],
) -> Camp:
    """Insert the camp; its items become the camp's initial inventory."""
    with get_session() as session:
        camp = Camp(volunteer_club_id=volunteer_club_id, **fields)
        session.add(camp)
        session.flush()
        _add_items(session, camp.id, items)
        _add_locations(session, camp.id, drop_off_locations)
        _add_links(session, camp.id, help_request_ids, donation_ids)
        session.flush()
        session.refresh(camp)
        session.expunge(camp)
        return camp


def get_by_id(camp_id: int) -> Optional[Camp]:
    with get_session() as session:
        row = session.get(Camp, camp_id)
        if row is not None:
            session.expunge(row)
        return row


def get_many(camp_ids: list[int]) -> dict[int, Camp]:
    if not camp_ids:
        return {}
    with get_session() as session:
        rows = list(session.scalars(select(Camp).where(Camp.id.in_(camp_ids))).all())
        return {r.id: r for r in detach_all(session, rows)}


def find_all(
    camp_type: Optional[str] = None,
    needs: Optional[list[str]] = None,
    district: Optional[str] = None,
    bounds: Optional[Bounds] = None,
) -> list[Camp]:
    """Filter camps. ``needs`` matches camps sharing at least one need."""
    with get_session() as session:
        q = select(Camp)
        if camp_type:
            q = q.where(Camp.camp_type == camp_type)
        if district and district.strip():
            q = q.where(Camp.location.ilike(f"%{district.strip()}%"))
        if bounds is not None and bounds.is_valid():
            q = q.where(Camp.lat.between(bounds.min_lat, bounds.max_lat))
            q = q.where(Camp.lng.between(bounds.min_lng, bounds.max_lng))
        rows = list(session.scalars(q.order_by(Camp.created_at.desc(), Camp.id.desc())).all())
        if needs:
            wanted = set(needs)
            rows = [r for r in rows if wanted.intersection(r.needs or [])]
        return detach_all(session, rows)


def load_relations(camp_ids: list[int]) -> dict[int, CampRelations]:
    result = {camp_id: CampRelations() for camp_id in camp_ids}
    if not camp_ids:
        return result
    with get_session() as session:
        for camp_id, rows in inventory_repo.rows_for_targets(session, TargetType.CAMP, camp_ids).items():
            result[camp_id].items = [r for r in rows if r.quantity_needed > 0]
            detach_all(session, rows)
        locations = list(
            session.scalars(
                select(CampDropOffLocation)
                .where(CampDropOffLocation.camp_id.in_(camp_ids))
                .order_by(CampDropOffLocation.id)
            ).all()
        )
        for loc in detach_all(session, locations):
            result[loc.camp_id].drop_off_locations.append(loc)
        for camp_id, hr_id in session.execute(
            select(CampHelpRequest.camp_id, CampHelpRequest.help_request_id)
            .where(CampHelpRequest.camp_id.in_(camp_ids))
            .order_by(CampHelpRequest.id)
        ).all():
            result[camp_id].help_request_ids.append(hr_id)
        for camp_id, donation_id in session.execute(
            select(CampDonation.camp_id, CampDonation.donation_id)
            .where(CampDonation.camp_id.in_(camp_ids))
            .order_by(CampDonation.id)
        ).all():
            result[camp_id].donation_ids.append(donation_id)
    return result


def update(
    camp_id: int,
    fields: dict[str, Any],
    items: Optional[list[dict[str, Any]]] = None,
    drop_off_locations: Optional[list[dict[str, Any]]] = None,
    help_request_ids: Optional[list[int]] = None,
    donation_ids: Optional[list[int]] = None,
) -> Optional[Camp]:
    """Apply changed fields; each list that is not None replaces what is stored.

    Items dropped from the list keep their inventory row with the need set to 0,
    so pending and donated history survives.
    """
    with get_session() as session:
        camp = session.get(Camp, camp_id)
        if camp is None:
            return None
        for key, value in fields.items():
            setattr(camp, key, value)
        if items is not None:
            keep = {item["item_type"] for item in items}
            for code in inventory_repo.needed_codes(session, TargetType.CAMP, [camp_id])[camp_id]:
                if code not in keep:
                    inventory_repo.clear_need(session, TargetType.CAMP, camp_id, code)
            _add_items(session, camp_id, items)
        if drop_off_locations is not None:
            session.execute(delete(CampDropOffLocation).where(CampDropOffLocation.camp_id == camp_id))
            _add_locations(session, camp_id, drop_off_locations)
        if help_request_ids is not None:
            session.execute(delete(CampHelpRequest).where(CampHelpRequest.camp_id == camp_id))
            _add_links(session, camp_id, help_request_ids, [])
        if donation_ids is not None:
            session.execute(delete(CampDonation).where(CampDonation.camp_id == camp_id))
            _add_links(session, camp_id, [], donation_ids)
        session.flush()
        session.refresh(camp)
        session.expunge(camp)
        return camp


def all_drop_off_locations() -> list[tuple[CampDropOffLocation, str]]:
    """Every drop-off location with its camp's name, for the public map."""
    with get_session() as session:
        rows = session.execute(
            select(CampDropOffLocation, Camp.name)
            .join(Camp, Camp.id == CampDropOffLocation.camp_id)
            .order_by(CampDropOffLocation.camp_id, CampDropOffLocation.id)
        ).all()
        locations = detach_all(session, [loc for loc, _ in rows])
        return list(zip(locations, [name for _, name in rows]))


def count_for_club(volunteer_club_id: int) -> int:
    with get_session() as session:
        return session.scalar(
            select(func.count(Camp.id)).where(Camp.volunteer_club_id == volunteer_club_id)
        ) or 0

"""Donation repository: create (pending, optionally confirmed at once), list, progress transitions."""

from typing import NamedTuple, Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from relief_hub.db import detach_all, get_session
from relief_hub.db.models.donation import Donation
from relief_hub.db.repositories import inventory_repo
from relief_hub.domain.donation_lifecycle import Transition, flag_for
from relief_hub.models.enums import TargetType
from relief_hub.utils.logger import get_logger

logger = get_logger("relief_hub.db.donation_repo")


class TransitionResult(NamedTuple):
    donation: Donation
    changed: bool
    confirmed: bool


def target_of(donation: Donation) -> tuple[TargetType, int]:
    if donation.camp_id is not None:
        return TargetType.CAMP, donation.camp_id
    return TargetType.HELP_REQUEST, donation.help_request_id


def _claim_confirmation(session: Session, donation_id: int) -> bool:
    """Mark the donation confirmed if both sides completed it and nobody confirmed it yet."""
    result = session.execute(
        update(Donation)
        .where(
            Donation.id == donation_id,
            Donation.is_confirmed.is_(False),
            Donation.donator_marked_completed.is_(True),
            Donation.owner_marked_completed.is_(True),
        )
        .values(is_confirmed=True)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def _confirm(session: Session, donation: Donation) -> None:
    """Move every pledged quantity from pending to donated. Runs once per donation."""
    target_type, target_id = target_of(donation)
    for code, quantity in (donation.ration_items or {}).items():
        inventory_repo.move_pending_to_donated(session, target_type, target_id, code, int(quantity))
    donation.is_confirmed = True
    logger.info(
        "donations.confirmed",
        donation_id=donation.id,
        target_type=target_type.value,
        target_id=target_id,
    )


def create(
    target_type: TargetType,
    target_id: int,
    donator_id: int,
    donator_name: str,
    donator_mobile_number: str,
    ration_items: dict[str, int],
    auto_confirm: bool = False,
) -> Donation:
    """Insert the donation and add each item to the target's pending quantity.

    With auto_confirm the pledge is moved straight to donated in the same transaction.
    """
    with get_session() as session:
        row = Donation(
            help_request_id=target_id if target_type == TargetType.HELP_REQUEST else None,
            camp_id=target_id if target_type == TargetType.CAMP else None,
            donator_id=donator_id,
            donator_name=donator_name,
            donator_mobile_number=donator_mobile_number,
            ration_items=dict(ration_items),
            donator_marked_scheduled=False,
            donator_marked_completed=False,
            owner_marked_completed=False,
            is_confirmed=False,
        )
        session.add(row)
        session.flush()
        for code, quantity in ration_items.items():
            inventory_repo.add_pending(session, target_type, target_id, code, quantity)
        if auto_confirm:
            _confirm(session, row)
        session.flush()
        session.refresh(row)
        session.expunge(row)
        return row


def get_by_id(donation_id: int) -> Optional[Donation]:
    with get_session() as session:
        row = session.get(Donation, donation_id)
        if row is not None:
            session.expunge(row)
        return row


def list_for_target(target_type: TargetType, target_id: int) -> list[Donation]:
    column = Donation.camp_id if target_type == TargetType.CAMP else Donation.help_request_id
    with get_session() as session:
        rows = list(
            session.scalars(
                select(Donation).where(column == target_id).order_by(Donation.created_at.desc(), Donation.id.desc())
            ).all()
        )
        return detach_all(session, rows)


def list_by_donator(donator_id: int) -> list[Donation]:
    with get_session() as session:
        rows = list(
            session.scalars(
                select(Donation)
                .where(Donation.donator_id == donator_id)
                .order_by(Donation.created_at.desc(), Donation.id.desc())
            ).all()
        )
        return detach_all(session, rows)


def existing_ids(donation_ids: list[int]) -> set[int]:
    if not donation_ids:
        return set()
    with get_session() as session:
        return set(session.scalars(select(Donation.id).where(Donation.id.in_(donation_ids))).all())


def transition(donation_id: int, step: Transition) -> Optional[TransitionResult]:
    """Set one progress flag. Confirms the pledge the first time both completion flags are set.

    Returns None when the donation does not exist. Repeating a transition is a no-op.
    The flag write and the confirmation claim are conditional UPDATEs, so two parties
    completing at the same time still confirm exactly once.
    """
    flag = getattr(Donation, flag_for(step))
    with get_session() as session:
        changed = (
            session.execute(
                update(Donation)
                .where(Donation.id == donation_id, flag.is_(False))
                .values({flag: True})
                .execution_options(synchronize_session=False)
            ).rowcount
            == 1
        )
        confirmed = _claim_confirmation(session, donation_id)
        row = session.get(Donation, donation_id)
        if row is None:
            return None
        if confirmed:
            _confirm(session, row)
        session.flush()
        session.refresh(row)
        session.expunge(row)
        return TransitionResult(row, changed, confirmed)

"""Donation operations for help requests and camps.

Ownership of a target decides two things: who may set the owner-completed flag
and who may read donor contact details. A help request is owned by the user who
posted it. A camp is owned by its club's owner user and, for both purposes, by
any ADMIN or SYSTEM_ADMINISTRATOR.
"""

from typing import NamedTuple, Optional

from relief_hub.db.models.donation import Donation
from relief_hub.db.models.user import User
from relief_hub.db.repositories import camp_repo, donation_repo, help_request_repo, volunteer_club_repo
from relief_hub.domain.donation_lifecycle import (
    Transition,
    TransitionNotAllowed,
    authorize_transition,
    effective_status,
)
from relief_hub.models.enums import TargetType, is_admin_role
from relief_hub.models.requests import CreateDonation
from relief_hub.models.responses import DonationResponse, DonationWithTargetResponse
from relief_hub.services import views
from relief_hub.services.errors import AppError, ForbiddenError, NotFoundError
from relief_hub.utils.logger import get_logger

logger = get_logger("relief_hub.services.donations")


class Target(NamedTuple):
    """A resolved donation target and the users that own it."""

    type: TargetType
    id: int
    owner_ids: frozenset[int]
    club_id: Optional[int] = None

    @property
    def admins_own(self) -> bool:
        return self.type == TargetType.CAMP


def resolve_target(target_type: TargetType, target_id: int) -> Target:
    if target_type == TargetType.CAMP:
        camp = camp_repo.get_by_id(target_id)
        if camp is None:
            raise NotFoundError(f"Camp {target_id} not found")
        club = volunteer_club_repo.get_club(camp.volunteer_club_id)
        owners = frozenset({club.user_id}) if club is not None and club.user_id is not None else frozenset()
        return Target(TargetType.CAMP, target_id, owners, camp.volunteer_club_id)
    row = help_request_repo.get_by_id(target_id)
    if row is None:
        raise NotFoundError(f"Help request {target_id} not found")
    owners = frozenset({row.user_id}) if row.user_id is not None else frozenset()
    return Target(TargetType.HELP_REQUEST, target_id, owners)


def owns_target(target: Target, user: Optional[User]) -> bool:
    if user is None:
        return False
    if user.id in target.owner_ids:
        return True
    return target.admins_own and is_admin_role(user.role)


def to_response(donation: Donation, show_contact: bool) -> DonationResponse:
    return DonationResponse(
        id=donation.id,
        help_request_id=donation.help_request_id,
        camp_id=donation.camp_id,
        donator_id=donation.donator_id,
        donator_name=donation.donator_name if show_contact else None,
        donator_mobile_number=donation.donator_mobile_number if show_contact else None,
        ration_items=dict(donation.ration_items or {}),
        donator_marked_scheduled=donation.donator_marked_scheduled,
        donator_marked_completed=donation.donator_marked_completed,
        owner_marked_completed=donation.owner_marked_completed,
        status=effective_status(donation),
        created_at=donation.created_at,
        updated_at=donation.updated_at,
    )


def can_see_contact(donation: Donation, target: Target, viewer: Optional[User]) -> bool:
    if viewer is None:
        return False
    return viewer.id == donation.donator_id or owns_target(target, viewer)


def list_for_target(target_type: TargetType, target_id: int, viewer: Optional[User]) -> list[DonationResponse]:
    target = resolve_target(target_type, target_id)
    rows = donation_repo.list_for_target(target_type, target_id)
    return [to_response(r, can_see_contact(r, target, viewer)) for r in rows]


def _grant_membership(target: Target, donation: Donation) -> None:
    if target.type != TargetType.CAMP or target.club_id is None:
        return
    membership, changed = volunteer_club_repo.grant_approved(
        donation.donator_id, target.club_id, notes=f"Granted by donation {donation.id}"
    )
    if changed:
        logger.info(
            "memberships.granted_by_donation",
            user_id=donation.donator_id,
            volunteer_club_id=target.club_id,
            membership_id=membership.id,
            donation_id=donation.id,
        )


def create(target_type: TargetType, target_id: int, body: CreateDonation, user: User) -> DonationResponse:
    """Record a pledge. Each item is added to the target's pending quantity without any cap."""
    target = resolve_target(target_type, target_id)
    items = {getattr(code, "value", code): quantity for code, quantity in body.ration_items.items()}
    if not items:
        raise AppError(
            "At least one ration item is required",
            details=[{"field": "rationItems", "constraints": {"isNotEmpty": "At least one ration item is required"}}],
        )
    bad = sorted(code for code, quantity in items.items() if quantity <= 0)
    if bad:
        message = f"Quantities must be positive: {', '.join(bad)}"
        raise AppError(message, details=[{"field": "rationItems", "constraints": {"min": message}}])

    auto_confirm = False
    if body.auto_approve:
        if target.type != TargetType.CAMP or not owns_target(target, user):
            logger.info(
                "donations.auto_approve.denied",
                user_id=user.id,
                target_type=target.type.value,
                target_id=target.id,
            )
            raise ForbiddenError("Only the camp's volunteer club or an administrator can auto-approve donations")
        auto_confirm = True

    donation = donation_repo.create(
        target.type,
        target.id,
        donator_id=user.id,
        donator_name=body.donator_name,
        donator_mobile_number=body.donator_mobile_number,
        ration_items=items,
        auto_confirm=auto_confirm,
    )
    logger.info(
        "donations.create.ok",
        donation_id=donation.id,
        target_type=target.type.value,
        target_id=target.id,
        donator_id=user.id,
        items=len(items),
        auto_approved=auto_confirm,
    )
    if auto_confirm:
        _grant_membership(target, donation)
    return to_response(donation, show_contact=True)


def transition(
    target_type: TargetType,
    target_id: int,
    donation_id: int,
    step: Transition,
    user: User,
) -> DonationResponse:
    """Set one progress flag. Repeating a step is a no-op that still returns the donation."""
    target = resolve_target(target_type, target_id)
    donation = donation_repo.get_by_id(donation_id)
    if donation is None or donation_repo.target_of(donation) != (target.type, target.id):
        raise NotFoundError(f"Donation {donation_id} not found")
    try:
        authorize_transition(
            step,
            actor_id=user.id,
            donator_id=donation.donator_id,
            owner_ids=target.owner_ids,
            actor_is_admin=is_admin_role(user.role),
            admin_may_act_as_owner=target.admins_own,
        )
    except TransitionNotAllowed as e:
        logger.info("donations.transition.denied", donation_id=donation_id, step=step.value, user_id=user.id)
        raise ForbiddenError(str(e)) from e

    result = donation_repo.transition(donation_id, step)
    if result is None:
        raise NotFoundError(f"Donation {donation_id} not found")
    logger.info(
        "donations.transition.ok",
        donation_id=donation_id,
        step=step.value,
        user_id=user.id,
        changed=result.changed,
        confirmed=result.confirmed,
    )
    if result.confirmed:
        _grant_membership(target, result.donation)
    return to_response(result.donation, show_contact=True)


def list_mine(user: User) -> list[DonationWithTargetResponse]:
    """The caller's own donations with the help request or camp each was made to."""
    rows = donation_repo.list_by_donator(user.id)
    hr_ids = sorted({r.help_request_id for r in rows if r.help_request_id is not None})
    camp_ids = sorted({r.camp_id for r in rows if r.camp_id is not None})
    help_requests = help_request_repo.get_many(hr_ids)
    codes = help_request_repo.needed_codes_for(hr_ids) if hr_ids else {}
    camps = camp_repo.get_many(camp_ids)

    result = []
    for row in rows:
        base = to_response(row, show_contact=True)
        hr = help_requests.get(row.help_request_id) if row.help_request_id is not None else None
        camp = camps.get(row.camp_id) if row.camp_id is not None else None
        result.append(
            DonationWithTargetResponse(
                **base.model_dump(),
                help_request=views.help_request(hr, codes.get(hr.id, [])) if hr is not None else None,
                camp=views.camp_summary(camp) if camp is not None else None,
            )
        )
    return result

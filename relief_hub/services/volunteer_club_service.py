"""Volunteer club administration and membership requests."""

from typing import Optional

from relief_hub.db.models.user import User
from relief_hub.db.models.volunteer_club import VolunteerClub
from relief_hub.db.repositories import camp_repo, user_repo, volunteer_club_repo
from relief_hub.models.enums import MembershipStatus, UserRole, is_admin_role
from relief_hub.models.requests import CreateVolunteerClub, ReviewMembership, UpdateVolunteerClub
from relief_hub.models.responses import MembershipResponse, VolunteerClubResponse
from relief_hub.services.errors import ConflictError, ForbiddenError, NotFoundError
from relief_hub.utils.logger import get_logger

logger = get_logger("relief_hub.services.volunteer_clubs")


def require(club_id: int) -> VolunteerClub:
    club = volunteer_club_repo.get_club(club_id)
    if club is None:
        raise NotFoundError(f"Volunteer club {club_id} not found")
    return club


def _assign_owner(user_id: Optional[int], club_id: Optional[int] = None) -> None:
    """Validate the owner account and promote it to VOLUNTEER_CLUB."""
    if user_id is None:
        return
    user = user_repo.get_by_id(user_id)
    if user is None:
        raise NotFoundError(f"User {user_id} not found")
    owned = volunteer_club_repo.get_club_by_user_id(user_id)
    if owned is not None and owned.id != club_id:
        raise ConflictError("User already owns another volunteer club")
    if user.role == UserRole.USER.value:
        user_repo.update(user_id, role=UserRole.VOLUNTEER_CLUB.value)
        logger.info("volunteer_clubs.owner_promoted", user_id=user_id, volunteer_club_id=club_id)


def create(body: CreateVolunteerClub) -> VolunteerClubResponse:
    if volunteer_club_repo.name_exists(body.name):
        raise ConflictError("Volunteer club name already exists")
    _assign_owner(body.user_id)
    club = volunteer_club_repo.create_club(body.model_dump())
    logger.info("volunteer_clubs.create.ok", volunteer_club_id=club.id, user_id=club.user_id)
    return VolunteerClubResponse.from_row(club)


def list_clubs() -> list[VolunteerClubResponse]:
    return [VolunteerClubResponse.from_row(c) for c in volunteer_club_repo.list_clubs()]


def get(club_id: int) -> VolunteerClubResponse:
    return VolunteerClubResponse.from_row(require(club_id))


def get_mine(user: User) -> VolunteerClubResponse:
    club = volunteer_club_repo.get_club_by_user_id(user.id)
    if club is None:
        raise NotFoundError("No volunteer club is linked to this account")
    return VolunteerClubResponse.from_row(club)


def update(club_id: int, body: UpdateVolunteerClub) -> VolunteerClubResponse:
    require(club_id)
    fields = body.model_dump(mode="json", exclude_unset=True, exclude_none=True)
    if "name" in fields and volunteer_club_repo.name_exists(fields["name"], exclude_id=club_id):
        raise ConflictError("Volunteer club name already exists")
    _assign_owner(fields.get("user_id"), club_id)
    club = volunteer_club_repo.update_club(club_id, fields)
    if club is None:
        raise NotFoundError(f"Volunteer club {club_id} not found")
    logger.info("volunteer_clubs.update.ok", volunteer_club_id=club_id, fields=sorted(fields))
    return VolunteerClubResponse.from_row(club)


def delete(club_id: int) -> None:
    require(club_id)
    if camp_repo.count_for_club(club_id) > 0:
        raise ConflictError("Volunteer club still has camps")
    volunteer_club_repo.delete_club(club_id)
    logger.info("volunteer_clubs.delete.ok", volunteer_club_id=club_id)


# --- Memberships ---


def _can_review(club: VolunteerClub, user: User) -> bool:
    return is_admin_role(user.role) or (club.user_id is not None and club.user_id == user.id)


def request_membership(club_id: int, user: User) -> MembershipResponse:
    """A rejected user may ask again; pending or approved requests conflict."""
    require(club_id)
    existing = volunteer_club_repo.find_membership(user.id, club_id)
    if existing is not None:
        if existing.status == MembershipStatus.PENDING.value:
            raise ConflictError("Membership request is already pending")
        if existing.status == MembershipStatus.APPROVED.value:
            raise ConflictError("You are already a member of this volunteer club")
    membership = volunteer_club_repo.request_membership(user.id, club_id)
    logger.info("memberships.request.ok", membership_id=membership.id, user_id=user.id, volunteer_club_id=club_id)
    return MembershipResponse.from_row(membership)


def my_memberships(user: User) -> list[MembershipResponse]:
    return [MembershipResponse.from_row(m) for m in volunteer_club_repo.list_memberships_for_user(user.id)]


def club_memberships(club_id: int, user: User) -> list[MembershipResponse]:
    club = require(club_id)
    if not _can_review(club, user):
        raise ForbiddenError("Only the club owner or an administrator can view memberships")
    return [MembershipResponse.from_row(m) for m in volunteer_club_repo.list_memberships_for_club(club_id)]


def review_membership(membership_id: int, body: ReviewMembership, user: User) -> MembershipResponse:
    membership = volunteer_club_repo.get_membership(membership_id)
    if membership is None:
        raise NotFoundError(f"Membership {membership_id} not found")
    club = require(membership.volunteer_club_id)
    if not _can_review(club, user):
        raise ForbiddenError("Only the club owner or an administrator can review memberships")
    reviewed = volunteer_club_repo.review_membership(membership_id, body.status.value, user.id, body.notes)
    if reviewed is None:
        raise NotFoundError(f"Membership {membership_id} not found")
    logger.info(
        "memberships.review.ok",
        membership_id=membership_id,
        status=reviewed.status,
        reviewer_id=user.id,
    )
    return MembershipResponse.from_row(reviewed)

"""Camp operations. Camps belong to the volunteer club owned by the creating user."""

from typing import Any, Optional

from relief_hub.db.models.camp import Camp
from relief_hub.db.models.user import User
from relief_hub.db.models.volunteer_club import VolunteerClub
from relief_hub.db.repositories import camp_repo, donation_repo, help_request_repo, inventory_repo, volunteer_club_repo
from relief_hub.db.repositories.help_request_repo import Bounds
from relief_hub.models.enums import TargetType, is_admin_role
from relief_hub.models.requests import CampItemInput, CreateCamp, DropOffLocationInput, UpdateCamp
from relief_hub.models.responses import CampResponse, DropOffLocationResponse, InventoryItemResponse
from relief_hub.services import views
from relief_hub.services.errors import AppError, ForbiddenError, NotFoundError
from relief_hub.utils.logger import get_logger

logger = get_logger("relief_hub.services.camps")

_LIST_FIELDS = {"items", "drop_off_locations", "help_request_ids", "donation_ids"}


def _items(items: list[CampItemInput]) -> list[dict[str, Any]]:
    return [{"item_type": i.item_type.value, "quantity": i.quantity, "notes": i.notes} for i in items]


def _locations(locations: list[DropOffLocationInput]) -> list[dict[str, Any]]:
    return [loc.model_dump() for loc in locations]


def _check_links(help_request_ids: Optional[list[int]], donation_ids: Optional[list[int]]) -> None:
    if help_request_ids:
        missing = sorted(set(help_request_ids) - set(help_request_repo.get_many(help_request_ids)))
        if missing:
            raise AppError(f"Unknown help request ids: {missing}")
    if donation_ids:
        missing = sorted(set(donation_ids) - donation_repo.existing_ids(donation_ids))
        if missing:
            raise AppError(f"Unknown donation ids: {missing}")


def require(camp_id: int) -> Camp:
    camp = camp_repo.get_by_id(camp_id)
    if camp is None:
        raise NotFoundError(f"Camp {camp_id} not found")
    return camp


def _render(camp: Camp) -> CampResponse:
    return views.camp(camp, camp_repo.load_relations([camp.id])[camp.id])


def owning_club(user: User) -> VolunteerClub:
    club = volunteer_club_repo.get_club_by_user_id(user.id)
    if club is None:
        raise ForbiddenError("Only volunteer clubs can manage camps")
    return club


def can_manage(camp: Camp, user: User) -> bool:
    if is_admin_role(user.role):
        return True
    club = volunteer_club_repo.get_club_by_user_id(user.id)
    return club is not None and club.id == camp.volunteer_club_id


def create(body: CreateCamp, user: User) -> CampResponse:
    club = owning_club(user)
    _check_links(body.help_request_ids, body.donation_ids)
    fields = body.model_dump(mode="json", exclude=_LIST_FIELDS)
    camp = camp_repo.create(
        club.id,
        fields,
        items=_items(body.items),
        drop_off_locations=_locations(body.drop_off_locations),
        help_request_ids=body.help_request_ids,
        donation_ids=body.donation_ids,
    )
    logger.info(
        "camps.create.ok",
        camp_id=camp.id,
        volunteer_club_id=club.id,
        items=len(body.items),
        drop_off_locations=len(body.drop_off_locations),
    )
    return _render(camp)


def list_camps(
    camp_type: Optional[str] = None,
    needs: Optional[list[str]] = None,
    district: Optional[str] = None,
    bounds: Optional[Bounds] = None,
) -> list[CampResponse]:
    camps = camp_repo.find_all(camp_type=camp_type, needs=needs, district=district, bounds=bounds)
    relations = camp_repo.load_relations([c.id for c in camps])
    return [views.camp(c, relations[c.id]) for c in camps]


def get(camp_id: int, user: User) -> CampResponse:
    camp = require(camp_id)
    if not can_manage(camp, user):
        raise ForbiddenError("You do not have access to this camp")
    return _render(camp)


def update(camp_id: int, body: UpdateCamp, user: User) -> CampResponse:
    camp = require(camp_id)
    if not can_manage(camp, user):
        raise ForbiddenError("You can only update camps of your own volunteer club")
    _check_links(body.help_request_ids, body.donation_ids)
    fields = body.model_dump(mode="json", exclude_unset=True, exclude_none=True, exclude=_LIST_FIELDS)
    updated = camp_repo.update(
        camp_id,
        fields,
        items=_items(body.items) if body.items is not None else None,
        drop_off_locations=_locations(body.drop_off_locations) if body.drop_off_locations is not None else None,
        help_request_ids=body.help_request_ids,
        donation_ids=body.donation_ids,
    )
    if updated is None:
        raise NotFoundError(f"Camp {camp_id} not found")
    logger.info("camps.update.ok", camp_id=camp_id, user_id=user.id, fields=sorted(fields))
    return _render(updated)


def inventory(camp_id: int) -> list[InventoryItemResponse]:
    require(camp_id)
    return [views.inventory_item(r) for r in inventory_repo.list_for_target(TargetType.CAMP, camp_id)]


def drop_off_locations() -> list[DropOffLocationResponse]:
    return [views.drop_off_location(loc, name) for loc, name in camp_repo.all_drop_off_locations()]

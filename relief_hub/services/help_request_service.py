"""Help request operations: create, public listing, owner views, update, inventory, summary."""

from typing import Optional

from relief_hub.db.models.help_request import HelpRequest
from relief_hub.db.models.user import User
from relief_hub.db.repositories import help_request_repo, inventory_repo
from relief_hub.db.repositories.help_request_repo import Bounds
from relief_hub.models.enums import TargetType, is_admin_role
from relief_hub.models.requests import CreateHelpRequest, UpdateHelpRequest
from relief_hub.models.responses import HelpRequestResponse, HelpRequestSummary, InventoryItemResponse
from relief_hub.services import views
from relief_hub.services.errors import ForbiddenError, NotFoundError
from relief_hub.utils.logger import get_logger

logger = get_logger("relief_hub.services.help_requests")


def is_owner(row: HelpRequest, user: Optional[User]) -> bool:
    return user is not None and row.user_id is not None and row.user_id == user.id


def require(help_request_id: int) -> HelpRequest:
    row = help_request_repo.get_by_id(help_request_id)
    if row is None:
        raise NotFoundError(f"Help request {help_request_id} not found")
    return row


def create(body: CreateHelpRequest, user: User) -> HelpRequestResponse:
    fields = body.model_dump(mode="json", exclude={"ration_items"})
    row, codes = help_request_repo.create(fields, body.ration_items, user.id)
    logger.info(
        "help_requests.create.ok",
        help_request_id=row.id,
        user_id=user.id,
        urgency=row.urgency,
        items=len(codes),
    )
    return views.help_request(row, codes, is_owner=True)


def list_open(
    urgency: Optional[str] = None,
    district: Optional[str] = None,
    bounds: Optional[Bounds] = None,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[HelpRequestResponse], int]:
    """Returns (page of responses, total matching count)."""
    rows, total, codes = help_request_repo.find_all(
        urgency=urgency, district=district, bounds=bounds, page=page, limit=limit
    )
    return [views.help_request(r, codes.get(r.id, [])) for r in rows], total


def get(help_request_id: int, viewer: Optional[User]) -> HelpRequestResponse:
    row = require(help_request_id)
    codes = help_request_repo.needed_codes_for([row.id])[row.id]
    return views.help_request(row, codes, is_owner=is_owner(row, viewer))


def list_mine(user: User) -> list[HelpRequestResponse]:
    rows, codes = help_request_repo.find_by_user(user.id)
    return [views.help_request(r, codes.get(r.id, []), is_owner=True) for r in rows]


def update(help_request_id: int, body: UpdateHelpRequest, user: User) -> HelpRequestResponse:
    row = require(help_request_id)
    if not (is_owner(row, user) or is_admin_role(user.role)):
        raise ForbiddenError("You can only update your own help requests")
    fields = body.model_dump(mode="json", exclude_unset=True, exclude_none=True, exclude={"ration_items"})
    updated = help_request_repo.update(help_request_id, fields, ration_items=body.ration_items)
    if updated is None:
        raise NotFoundError(f"Help request {help_request_id} not found")
    codes = help_request_repo.needed_codes_for([updated.id])[updated.id]
    logger.info(
        "help_requests.update.ok",
        help_request_id=help_request_id,
        user_id=user.id,
        fields=sorted(fields),
        items_replaced=body.ration_items is not None,
    )
    return views.help_request(updated, codes, is_owner=is_owner(updated, user))


def inventory(help_request_id: int) -> list[InventoryItemResponse]:
    require(help_request_id)
    rows = inventory_repo.list_for_target(TargetType.HELP_REQUEST, help_request_id)
    return [views.inventory_item(r) for r in rows]


def summary() -> HelpRequestSummary:
    return inventory_repo.summarize()

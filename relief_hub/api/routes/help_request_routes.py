"""Help request endpoints, including donations made to a help request."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from relief_hub.api.deps import get_current_user, get_optional_user
from relief_hub.api.envelope import ok
from relief_hub.api.params import bounds_query
from relief_hub.config import DEFAULT_PAGE_LIMIT
from relief_hub.db.models.user import User
from relief_hub.db.repositories.help_request_repo import Bounds
from relief_hub.domain.donation_lifecycle import Transition
from relief_hub.models.enums import TargetType, Urgency
from relief_hub.models.requests import CreateDonation, CreateHelpRequest, UpdateHelpRequest
from relief_hub.services import donation_service, help_request_service

router = APIRouter(prefix="/help-requests", tags=["help-requests"])


@router.get("")
def list_help_requests(
    urgency: Optional[Urgency] = None,
    district: Optional[str] = None,
    bounds: Optional[Bounds] = Depends(bounds_query),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=1, le=100),
):
    """OPEN requests from the last 30 days. ``count`` is the total, not the page size."""
    rows, total = help_request_service.list_open(
        urgency=urgency.value if urgency else None,
        district=district,
        bounds=bounds,
        page=page,
        limit=limit,
    )
    return ok(rows, count=total)


@router.post("")
def create_help_request(body: CreateHelpRequest, user: User = Depends(get_current_user)):
    return ok(help_request_service.create(body, user), message="Help request created", status_code=201)


@router.get("/summary")
def summary():
    return ok(help_request_service.summary())


@router.get("/my")
def my_help_requests(user: User = Depends(get_current_user)):
    rows = help_request_service.list_mine(user)
    return ok(rows, count=len(rows))


@router.get("/my/donations")
def my_donations(user: User = Depends(get_current_user)):
    rows = donation_service.list_mine(user)
    return ok(rows, count=len(rows))


@router.get("/{help_request_id}")
def get_help_request(help_request_id: int, user: Optional[User] = Depends(get_optional_user)):
    return ok(help_request_service.get(help_request_id, user))


@router.put("/{help_request_id}")
def update_help_request(help_request_id: int, body: UpdateHelpRequest, user: User = Depends(get_current_user)):
    return ok(help_request_service.update(help_request_id, body, user), message="Help request updated")


@router.get("/{help_request_id}/inventory")
def help_request_inventory(help_request_id: int):
    rows = help_request_service.inventory(help_request_id)
    return ok(rows, count=len(rows))


@router.get("/{help_request_id}/donations")
def list_donations(help_request_id: int, user: Optional[User] = Depends(get_optional_user)):
    rows = donation_service.list_for_target(TargetType.HELP_REQUEST, help_request_id, user)
    return ok(rows, count=len(rows))


@router.post("/{help_request_id}/donations")
def create_donation(help_request_id: int, body: CreateDonation, user: User = Depends(get_current_user)):
    donation = donation_service.create(TargetType.HELP_REQUEST, help_request_id, body, user)
    return ok(donation, message="Donation created", status_code=201)


@router.patch("/{help_request_id}/donations/{donation_id}/{step}")
def donation_transition(
    help_request_id: int,
    donation_id: int,
    step: Transition,
    user: User = Depends(get_current_user),
):
    """step is one of schedule, complete-donator, complete-owner."""
    donation = donation_service.transition(TargetType.HELP_REQUEST, help_request_id, donation_id, step, user)
    return ok(donation)

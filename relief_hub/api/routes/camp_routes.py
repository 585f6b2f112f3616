"""Camp endpoints, including camp inventory and donations made to a camp."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from relief_hub.api.deps import get_current_user, get_optional_user
from relief_hub.api.envelope import ok
from relief_hub.api.params import bounds_query
from relief_hub.db.models.user import User
from relief_hub.db.repositories.help_request_repo import Bounds
from relief_hub.domain.donation_lifecycle import Transition
from relief_hub.models.enums import CampType, TargetType
from relief_hub.models.requests import CreateCamp, CreateDonation, UpdateCamp
from relief_hub.services import camp_service, donation_service

router = APIRouter(prefix="/camps", tags=["camps"])


@router.get("")
def list_camps(
    camp_type: Optional[CampType] = Query(None, alias="campType"),
    needs: Optional[str] = None,
    district: Optional[str] = None,
    bounds: Optional[Bounds] = Depends(bounds_query),
):
    """``needs`` is a comma separated list; a camp matches when it shares any of them."""
    need_list = [n.strip() for n in needs.split(",") if n.strip()] if needs else None
    rows = camp_service.list_camps(
        camp_type=camp_type.value if camp_type else None,
        needs=need_list,
        district=district,
        bounds=bounds,
    )
    return ok(rows, count=len(rows))


@router.post("")
def create_camp(body: CreateCamp, user: User = Depends(get_current_user)):
    return ok(camp_service.create(body, user), message="Camp created", status_code=201)


@router.get("/drop-off-locations")
def drop_off_locations():
    rows = camp_service.drop_off_locations()
    return ok(rows, count=len(rows))


@router.get("/{camp_id}")
def get_camp(camp_id: int, user: User = Depends(get_current_user)):
    return ok(camp_service.get(camp_id, user))


@router.put("/{camp_id}")
def update_camp(camp_id: int, body: UpdateCamp, user: User = Depends(get_current_user)):
    return ok(camp_service.update(camp_id, body, user), message="Camp updated")


@router.get("/{camp_id}/inventory")
def camp_inventory(camp_id: int):
    rows = camp_service.inventory(camp_id)
    return ok(rows, count=len(rows))


@router.get("/{camp_id}/donations")
def list_camp_donations(camp_id: int, user: Optional[User] = Depends(get_optional_user)):
    rows = donation_service.list_for_target(TargetType.CAMP, camp_id, user)
    return ok(rows, count=len(rows))


@router.post("/{camp_id}/donations")
def create_camp_donation(camp_id: int, body: CreateDonation, user: User = Depends(get_current_user)):
    donation = donation_service.create(TargetType.CAMP, camp_id, body, user)
    return ok(donation, message="Donation created", status_code=201)


@router.patch("/{camp_id}/donations/{donation_id}/{step}")
def camp_donation_transition(
    camp_id: int,
    donation_id: int,
    step: Transition,
    user: User = Depends(get_current_user),
):
    donation = donation_service.transition(TargetType.CAMP, camp_id, donation_id, step, user)
    return ok(donation)

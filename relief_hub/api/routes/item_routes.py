"""Ration item catalog."""

from fastapi import APIRouter

from relief_hub.api.envelope import ok
from relief_hub.models.ration_items import RATION_ITEMS
from relief_hub.models.responses import RationItemResponse

router = APIRouter(prefix="/items", tags=["items"])


@router.get("")
def list_items():
    items = [RationItemResponse(code=i.code.value, label=i.label, icon=i.icon) for i in RATION_ITEMS]
    return ok(items, count=len(items))

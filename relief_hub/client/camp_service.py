"""Client wrapper for camp endpoints."""

from typing import Any, Optional, TypedDict

from relief_hub.client.base import BaseService
from relief_hub.models.responses import ApiResponse, CampResponse, DropOffLocationResponse, InventoryItemResponse


class CampFilters(TypedDict, total=False):
    camp_type: str
    needs: list[str]
    district: str
    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float


def _params(filters: CampFilters) -> dict[str, Any]:
    params: dict[str, Any] = {
        "campType": filters.get("camp_type"),
        "district": filters.get("district"),
        "minLat": filters.get("min_lat"),
        "maxLat": filters.get("max_lat"),
        "minLng": filters.get("min_lng"),
        "maxLng": filters.get("max_lng"),
    }
    needs = filters.get("needs")
    if needs:
        params["needs"] = ",".join(getattr(n, "value", n) for n in needs)
    return {k: v for k, v in params.items() if v is not None}


class CampService(BaseService):
    async def get_all(self, filters: Optional[CampFilters] = None) -> ApiResponse:
        return await self._call(self.client.get("/api/camps", _params(filters or {})), list[CampResponse])

    async def get_by_id(self, camp_id: int) -> ApiResponse:
        return await self._call(self.client.get(f"/api/camps/{camp_id}"), CampResponse)

    async def create(self, data: dict[str, Any]) -> ApiResponse:
        return await self._call(self.client.post("/api/camps", data), CampResponse)

    async def update(self, camp_id: int, data: dict[str, Any]) -> ApiResponse:
        return await self._call(self.client.put(f"/api/camps/{camp_id}", data), CampResponse)

    async def get_inventory_items(self, camp_id: int) -> ApiResponse:
        return await self._call(self.client.get(f"/api/camps/{camp_id}/inventory"), list[InventoryItemResponse])

    async def get_all_drop_off_locations(self) -> ApiResponse:
        return await self._call(self.client.get("/api/camps/drop-off-locations"), list[DropOffLocationResponse])

"""Client wrapper for help request endpoints."""

import math
from typing import Any, Optional, TypedDict

from relief_hub.client.base import BaseService
from relief_hub.models.responses import (
    ApiResponse,
    HelpRequestResponse,
    HelpRequestSummary,
    InventoryItemResponse,
)


class HelpRequestFilters(TypedDict, total=False):
    urgency: str
    district: str
    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float
    page: int
    limit: int


_FILTER_PARAMS = {
    "urgency": "urgency",
    "district": "district",
    "min_lat": "minLat",
    "max_lat": "maxLat",
    "min_lng": "minLng",
    "max_lng": "maxLng",
    "page": "page",
    "limit": "limit",
}


def positive_items(ration_items: Optional[dict[str, Any]]) -> dict[str, int]:
    """Keep only items with a quantity above zero."""
    counts = {
        getattr(code, "value", code): int(quantity)
        for code, quantity in (ration_items or {}).items()
        if (isinstance(quantity, int) and not isinstance(quantity, bool))
        or (isinstance(quantity, float) and math.isfinite(quantity))
    }
    return {code: count for code, count in counts.items() if count > 0}


class HelpRequestService(BaseService):
    async def get_all(self, filters: Optional[HelpRequestFilters] = None) -> ApiResponse:
        params = {_FILTER_PARAMS[k]: v for k, v in (filters or {}).items() if k in _FILTER_PARAMS and v is not None}
        return await self._call(self.client.get("/api/help-requests", params), list[HelpRequestResponse])

    async def create(self, data: dict[str, Any]) -> ApiResponse:
        payload = dict(data)
        if "rationItems" in payload:
            payload["rationItems"] = positive_items(payload["rationItems"])
        return await self._call(self.client.post("/api/help-requests", payload), HelpRequestResponse)

    async def get_by_id(self, help_request_id: int) -> ApiResponse:
        return await self._call(self.client.get(f"/api/help-requests/{help_request_id}"), HelpRequestResponse)

    async def get_summary(self) -> ApiResponse:
        return await self._call(self.client.get("/api/help-requests/summary"), HelpRequestSummary)

    async def get_my(self) -> ApiResponse:
        return await self._call(self.client.get("/api/help-requests/my"), list[HelpRequestResponse])

    async def update(self, help_request_id: int, data: dict[str, Any]) -> ApiResponse:
        payload = dict(data)
        if payload.get("rationItems") is not None:
            payload["rationItems"] = positive_items(payload["rationItems"])
        return await self._call(
            self.client.put(f"/api/help-requests/{help_request_id}", payload), HelpRequestResponse
        )

    async def get_inventory(self, help_request_id: int) -> ApiResponse:
        return await self._call(
            self.client.get(f"/api/help-requests/{help_request_id}/inventory"), list[InventoryItemResponse]
        )

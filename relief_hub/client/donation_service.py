"""Client wrapper for donation endpoints on help requests and camps."""

from typing import Any, Optional

from relief_hub.client.base import BaseService
from relief_hub.models.responses import ApiResponse, DonationResponse, DonationWithTargetResponse


def _donations_path(help_request_id: Optional[int], camp_id: Optional[int]) -> str:
    if camp_id is not None:
        return f"/api/camps/{camp_id}/donations"
    return f"/api/help-requests/{help_request_id}/donations"


class DonationService(BaseService):
    async def get_by_help_request(self, help_request_id: int) -> ApiResponse:
        """The server leaves out donor contact details unless the caller may see them."""
        return await self._call(
            self.client.get(_donations_path(help_request_id, None)), list[DonationResponse]
        )

    async def get_by_camp(self, camp_id: int) -> ApiResponse:
        return await self._call(self.client.get(_donations_path(None, camp_id)), list[DonationResponse])

    async def create(self, help_request_id: int, data: dict[str, Any]) -> ApiResponse:
        return await self._call(
            self.client.post(_donations_path(help_request_id, None), data), DonationResponse
        )

    async def create_for_camp(self, camp_id: int, data: dict[str, Any], auto_approve: bool = False) -> ApiResponse:
        payload = dict(data)
        if auto_approve:
            payload["autoApprove"] = True
        return await self._call(self.client.post(_donations_path(None, camp_id), payload), DonationResponse)

    async def _mark(self, help_request_id: Optional[int], donation_id: int, step: str, camp_id: Optional[int]) -> ApiResponse:
        path = f"{_donations_path(help_request_id, camp_id)}/{donation_id}/{step}"
        return await self._call(self.client.patch(path), DonationResponse)

    async def mark_as_scheduled(self, help_request_id: Optional[int], donation_id: int, camp_id: Optional[int] = None) -> ApiResponse:
        return await self._mark(help_request_id, donation_id, "schedule", camp_id)

    async def mark_as_completed_by_donator(
        self, help_request_id: Optional[int], donation_id: int, camp_id: Optional[int] = None
    ) -> ApiResponse:
        return await self._mark(help_request_id, donation_id, "complete-donator", camp_id)

    async def mark_as_completed_by_owner(
        self, help_request_id: Optional[int], donation_id: int, camp_id: Optional[int] = None
    ) -> ApiResponse:
        return await self._mark(help_request_id, donation_id, "complete-owner", camp_id)

    async def get_my_donations(self) -> ApiResponse:
        return await self._call(
            self.client.get("/api/help-requests/my/donations"), list[DonationWithTargetResponse]
        )

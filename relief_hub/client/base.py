"""Shared envelope handling for the client domain services."""

from typing import Any, Awaitable, Optional

from pydantic import TypeAdapter, ValidationError

from relief_hub.client.api_client import ApiClient, ApiError
from relief_hub.models.responses import ApiResponse
from relief_hub.utils.logger import get_logger

logger = get_logger("relief_hub.client.services")


class BaseService:
    """Services are built around an injected ApiClient and never raise to callers."""

    def __init__(self, client: ApiClient):
        self.client = client

    async def _call(self, request: Awaitable[Any], data_type: Optional[Any] = None) -> ApiResponse:
        """Await ``request`` and turn its body (or failure) into an ApiResponse."""
        try:
            body = await request
        except ApiError as e:
            return ApiResponse(success=False, error=e.message, details=e.details)
        if not isinstance(body, dict):
            return ApiResponse(success=False, error="Unexpected response from server")
        try:
            data = body.get("data")
            if data is not None and data_type is not None:
                data = TypeAdapter(data_type).validate_python(data)
            return ApiResponse(
                success=bool(body.get("success", True)),
                data=data,
                error=body.get("error"),
                message=body.get("message"),
                count=body.get("count"),
            )
        except ValidationError as e:
            logger.warning("api_client.response_invalid", error=str(e))
            return ApiResponse(success=False, error="Unexpected response from server")

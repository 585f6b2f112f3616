"""Async HTTP client for the relief API with transparent access-token refresh.

On a 401 the client refreshes once and retries the original request once.
Concurrent requests that hit 401 together share a single refresh call.
"""

import asyncio
from typing import Any, Optional

import httpx

from relief_hub.client.token_store import (
    ACCESS_TOKEN_KEY,
    REFRESH_TOKEN_KEY,
    MemoryTokenStore,
    TokenStore,
)
from relief_hub.config import API_CLIENT_TIMEOUT_SECONDS, API_URL
from relief_hub.utils.logger import get_logger

logger = get_logger("relief_hub.client.api_client")

REFRESH_ENDPOINT = "/api/auth/refresh"


class ApiError(Exception):
    """Failed API call. status_code is None for connection and parse failures."""

    def __init__(self, message: str, status_code: Optional[int] = None, details: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details


def error_message(body: Any, status_code: int) -> str:
    """First validation constraint message, else the body's error, else a generic HTTP message."""
    if isinstance(body, dict):
        details = body.get("details")
        if isinstance(details, list):
            for detail in details:
                constraints = detail.get("constraints") if isinstance(detail, dict) else None
                if isinstance(constraints, dict) and constraints:
                    return str(next(iter(constraints.values())))
        if body.get("error"):
            return str(body["error"])
    return f"HTTP error! status: {status_code}"


class ApiClient:
    def __init__(
        self,
        base_url: str = API_URL,
        token_store: Optional[TokenStore] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = API_CLIENT_TIMEOUT_SECONDS,
    ):
        self.base_url = base_url.rstrip("/")
        self.token_store: TokenStore = token_store if token_store is not None else MemoryTokenStore()
        self._http = httpx.AsyncClient(base_url=self.base_url, timeout=timeout, transport=transport)
        self._refresh_lock = asyncio.Lock()
        self._refresh_task: Optional[asyncio.Task[bool]] = None

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # --- tokens ---

    def set_tokens(self, access_token: str, refresh_token: Optional[str] = None) -> None:
        self.token_store.set(ACCESS_TOKEN_KEY, access_token)
        if refresh_token is not None:
            self.token_store.set(REFRESH_TOKEN_KEY, refresh_token)

    def clear_tokens(self) -> None:
        self.token_store.remove(ACCESS_TOKEN_KEY)
        self.token_store.remove(REFRESH_TOKEN_KEY)

    @property
    def access_token(self) -> Optional[str]:
        return self.token_store.get(ACCESS_TOKEN_KEY)

    async def _do_refresh(self) -> bool:
        refresh_token = self.token_store.get(REFRESH_TOKEN_KEY)
        if not refresh_token:
            logger.info("api_client.refresh.no_token")
            return False
        try:
            response = await self._http.post(REFRESH_ENDPOINT, json={"refreshToken": refresh_token})
            body = response.json()
        except httpx.TransportError as e:
            logger.warning("api_client.refresh.failed", error=str(e))
            return False
        except ValueError as e:
            logger.warning("api_client.refresh.failed", status_code=response.status_code, error=str(e))
            return False
        data = body.get("data") if isinstance(body, dict) else None
        if not response.is_success or not isinstance(data, dict) or not data.get("accessToken"):
            logger.warning("api_client.refresh.failed", status_code=response.status_code)
            return False
        self.set_tokens(data["accessToken"], data.get("refreshToken"))
        logger.debug("api_client.refresh.ok")
        return True

    async def refresh_tokens(self) -> bool:
        """Refresh the access token. Callers arriving while a refresh runs await the same one."""
        async with self._refresh_lock:
            task = self._refresh_task
            if task is None:
                task = asyncio.create_task(self._do_refresh())
                self._refresh_task = task
        try:
            return await task
        finally:
            async with self._refresh_lock:
                if self._refresh_task is task:
                    self._refresh_task = None

    # --- requests ---

    async def request(
        self,
        method: str,
        endpoint: str,
        params: Optional[dict[str, Any]] = None,
        data: Any = None,
        skip_auth: bool = False,
        retry_count: int = 0,
    ) -> Any:
        """Send one request and return the decoded JSON body. Raises ApiError."""
        headers = {"Accept": "application/json"}
        if not skip_auth:
            token = self.access_token
            if token:
                headers["Authorization"] = f"Bearer {token}"
        try:
            response = await self._http.request(
                method,
                endpoint,
                params={k: v for k, v in (params or {}).items() if v is not None},
                json=data,
                headers=headers,
            )
        except httpx.TransportError as e:
            logger.warning("api_client.connection_error", method=method, endpoint=endpoint, error=str(e))
            raise ApiError(
                f"Unable to connect to the API server at {self.base_url}. "
                "Please make sure the backend server is running."
            ) from e

        if response.status_code == 401 and not skip_auth:
            if retry_count == 0 and await self.refresh_tokens():
                return await self.request(
                    method, endpoint, params=params, data=data, skip_auth=skip_auth, retry_count=retry_count + 1
                )
            self.clear_tokens()
            body = self._json_or_none(response)
            message = body.get("error") if isinstance(body, dict) and body.get("error") else "Authentication failed"
            logger.info("api_client.auth_failed", endpoint=endpoint, retry_count=retry_count)
            raise ApiError(str(message), 401, body.get("details") if isinstance(body, dict) else None)

        try:
            body = response.json()
        except ValueError as e:
            raise ApiError("Invalid JSON response from server", response.status_code) from e

        if not response.is_success:
            details = body.get("details") if isinstance(body, dict) else None
            raise ApiError(error_message(body, response.status_code), response.status_code, details)
        return body

    @staticmethod
    def _json_or_none(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return None

    async def get(self, endpoint: str, params: Optional[dict[str, Any]] = None, skip_auth: bool = False) -> Any:
        return await self.request("GET", endpoint, params=params, skip_auth=skip_auth)

    async def post(self, endpoint: str, data: Any = None, skip_auth: bool = False) -> Any:
        return await self.request("POST", endpoint, data=data, skip_auth=skip_auth)

    async def put(self, endpoint: str, data: Any = None, skip_auth: bool = False) -> Any:
        return await self.request("PUT", endpoint, data=data, skip_auth=skip_auth)

    async def patch(self, endpoint: str, data: Any = None, skip_auth: bool = False) -> Any:
        return await self.request("PATCH", endpoint, data=data, skip_auth=skip_auth)

    async def delete(self, endpoint: str, skip_auth: bool = False) -> Any:
        return await self.request("DELETE", endpoint, skip_auth=skip_auth)

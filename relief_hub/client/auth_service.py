"""Client-side sign up, sign in and sign out. Tokens and the donor identity go to the token store."""

from typing import Optional

from relief_hub.client.api_client import ApiError
from relief_hub.client.base import BaseService
from relief_hub.client.token_store import DONOR_USER_KEY, REFRESH_TOKEN_KEY
from relief_hub.models.responses import ApiResponse, AuthResponse, UserResponse


class AuthService(BaseService):
    def _remember(self, result: ApiResponse) -> ApiResponse:
        if result.success and isinstance(result.data, AuthResponse):
            auth = result.data
            self.client.set_tokens(auth.access_token, auth.refresh_token)
            self.client.token_store.set(
                DONOR_USER_KEY,
                {"name": auth.user.username, "identifier": str(auth.user.id), "loggedIn": True},
            )
        return result

    async def register(self, username: str, password: Optional[str] = None) -> ApiResponse:
        payload = {"username": username}
        if password:
            payload["password"] = password
        result = await self._call(self.client.post("/api/users/register", payload, skip_auth=True), AuthResponse)
        return self._remember(result)

    async def login(self, username: str, password: Optional[str] = None) -> ApiResponse:
        payload = {"username": username}
        if password:
            payload["password"] = password
        result = await self._call(self.client.post("/api/auth/login", payload, skip_auth=True), AuthResponse)
        return self._remember(result)

    async def logout(self) -> ApiResponse:
        """Revoke the refresh token server side, then forget everything locally."""
        refresh_token = self.client.token_store.get(REFRESH_TOKEN_KEY)
        error = None
        if refresh_token:
            try:
                await self.client.post("/api/auth/logout", {"refreshToken": refresh_token}, skip_auth=True)
            except ApiError as e:
                error = e.message
        self.client.clear_tokens()
        self.client.token_store.remove(DONOR_USER_KEY)
        return ApiResponse(success=True, message="Logged out" if error is None else f"Logged out locally: {error}")

    async def current_user(self) -> ApiResponse:
        return await self._call(self.client.get("/api/auth/me"), UserResponse)

    def donor_user(self) -> Optional[dict]:
        return self.client.token_store.get(DONOR_USER_KEY)

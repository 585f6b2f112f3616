"""Registration, login, token refresh and logout."""

from typing import Optional

from fastapi import APIRouter, Body, Depends

from relief_hub.api.deps import get_current_user
from relief_hub.api.envelope import ok
from relief_hub.db.models.user import User
from relief_hub.models.requests import LoginRequest, RefreshRequest, RegisterUser
from relief_hub.models.responses import UserResponse
from relief_hub.services import auth_service

users_router = APIRouter(prefix="/users", tags=["users"])
router = APIRouter(prefix="/auth", tags=["auth"])


@users_router.post("/register")
def register(body: RegisterUser):
    result = auth_service.register(body)
    return ok(result, message="User registered successfully", status_code=201)


@router.post("/login")
def login(body: LoginRequest):
    return ok(auth_service.login(body), message="Login successful")


@router.post("/refresh")
def refresh(body: RefreshRequest):
    return ok(auth_service.refresh(body.refresh_token))


@router.post("/logout")
def logout(body: Optional[dict] = Body(None)):
    token = (body or {}).get("refreshToken")
    auth_service.logout(token if isinstance(token, str) else None)
    return ok(message="Logged out")


@router.get("/me")
def me(user: User = Depends(get_current_user)):
    return ok(UserResponse.from_row(user))

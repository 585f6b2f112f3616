"""Registration, login, refresh-token rotation and logout."""

from typing import Optional

from relief_hub.auth.security import (
    create_access_token,
    hash_password,
    new_refresh_token,
    verify_password,
)
from relief_hub.db.models.user import User
from relief_hub.db.repositories import user_repo
from relief_hub.models.enums import UserRole, UserStatus
from relief_hub.models.requests import LoginRequest, RegisterUser
from relief_hub.models.responses import AuthResponse, UserResponse
from relief_hub.services.errors import ConflictError, UnauthorizedError
from relief_hub.utils.logger import get_logger

logger = get_logger("relief_hub.services.auth")


def _issue_tokens(user: User) -> AuthResponse:
    refresh_token, expires_at = new_refresh_token()
    user_repo.store_refresh_token(user.id, refresh_token, expires_at)
    return AuthResponse(
        user=UserResponse.from_row(user),
        access_token=create_access_token(user.id, user.username, user.role),
        refresh_token=refresh_token,
    )


def register(body: RegisterUser, role: str = UserRole.USER.value) -> AuthResponse:
    if user_repo.get_by_username(body.username) is not None:
        raise ConflictError("Username already exists")
    password_hash = hash_password(body.password) if body.password else None
    user = user_repo.create(body.username, password_hash=password_hash, role=role)
    logger.info("auth.register.ok", user_id=user.id, username=user.username)
    return _issue_tokens(user)


def login(body: LoginRequest) -> AuthResponse:
    """Password is required only when the account has one."""
    user = user_repo.get_by_username(body.username)
    if user is None:
        logger.info("auth.login.unknown_user", username=body.username)
        raise UnauthorizedError("Invalid credentials")
    if user.status != UserStatus.ACTIVE.value:
        logger.info("auth.login.inactive", user_id=user.id, status=user.status)
        raise UnauthorizedError("Account is not active")
    if user.password_hash:
        if not body.password or not verify_password(body.password, user.password_hash):
            logger.info("auth.login.bad_password", user_id=user.id)
            raise UnauthorizedError("Invalid credentials")
    logger.info("auth.login.ok", user_id=user.id)
    return _issue_tokens(user)


def refresh(refresh_token: str) -> AuthResponse:
    """Rotate: the presented token is consumed and a new pair is issued."""
    stored = user_repo.find_valid_refresh_token(refresh_token)
    if stored is None:
        raise UnauthorizedError("Invalid or expired refresh token")
    user = user_repo.get_by_id(stored.user_id)
    if user is None or user.status != UserStatus.ACTIVE.value:
        user_repo.delete_refresh_token(refresh_token)
        raise UnauthorizedError("Invalid or expired refresh token")
    new_token, expires_at = new_refresh_token()
    if not user_repo.rotate_refresh_token(refresh_token, new_token, expires_at):
        raise UnauthorizedError("Invalid or expired refresh token")
    logger.debug("auth.refresh.ok", user_id=user.id)
    return AuthResponse(
        user=UserResponse.from_row(user),
        access_token=create_access_token(user.id, user.username, user.role),
        refresh_token=new_token,
    )


def logout(refresh_token: Optional[str]) -> bool:
    if not refresh_token:
        return False
    removed = user_repo.delete_refresh_token(refresh_token) > 0
    logger.info("auth.logout", revoked=removed)
    return removed


def ensure_admin(username: str, password: Optional[str]) -> tuple[User, bool]:
    """Create a SYSTEM_ADMINISTRATOR or promote an existing user. Returns (user, created)."""
    password_hash = hash_password(password) if password else None
    existing = user_repo.get_by_username(username)
    if existing is None:
        user = user_repo.create(username, password_hash=password_hash, role=UserRole.SYSTEM_ADMINISTRATOR.value)
        logger.info("auth.admin.created", user_id=user.id)
        return user, True
    fields = {"role": UserRole.SYSTEM_ADMINISTRATOR.value, "status": UserStatus.ACTIVE.value}
    if password_hash:
        fields["password_hash"] = password_hash
    user = user_repo.update(existing.id, **fields)
    logger.info("auth.admin.promoted", user_id=existing.id)
    return user, False

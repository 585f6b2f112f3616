"""Bearer-token auth dependencies."""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from relief_hub.auth.security import InvalidTokenError, decode_access_token
from relief_hub.db.models.user import User
from relief_hub.db.repositories import user_repo
from relief_hub.models.enums import UserRole, UserStatus, is_admin_role
from relief_hub.services.errors import ForbiddenError, UnauthorizedError

_bearer = HTTPBearer(auto_error=False)


def _user_from_token(token: str) -> User:
    try:
        payload = decode_access_token(token)
    except InvalidTokenError as e:
        raise UnauthorizedError(str(e)) from e
    user = user_repo.get_by_id(int(payload.get("id", 0)))
    if user is None or user.status != UserStatus.ACTIVE.value:
        raise UnauthorizedError("User not found or inactive")
    return user


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
) -> User:
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Authentication required")
    return _user_from_token(credentials.credentials)


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
) -> Optional[User]:
    """The caller when a usable token is present, else None. Bad tokens are not an error here."""
    if credentials is None or not credentials.credentials:
        return None
    try:
        return _user_from_token(credentials.credentials)
    except UnauthorizedError:
        return None


def require_admin(user: User = Depends(get_current_user)) -> User:
    if not is_admin_role(user.role):
        raise ForbiddenError("Administrator role required")
    return user


def require_volunteer_club(user: User = Depends(get_current_user)) -> User:
    if user.role != UserRole.VOLUNTEER_CLUB.value and not is_admin_role(user.role):
        raise ForbiddenError("Volunteer club role required")
    return user

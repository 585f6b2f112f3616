"""User and refresh token repository."""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete, select

from relief_hub.db import get_session
from relief_hub.db.models.user import RefreshToken, User
from relief_hub.models.enums import UserRole, UserStatus


def create(username: str, password_hash: Optional[str] = None, role: str = UserRole.USER.value) -> User:
    with get_session() as session:
        row = User(
            username=username,
            password_hash=password_hash,
            role=role,
            status=UserStatus.ACTIVE.value,
        )
        session.add(row)
        session.flush()
        session.refresh(row)
        session.expunge(row)
        return row


def get_by_id(user_id: int) -> Optional[User]:
    with get_session() as session:
        row = session.get(User, user_id)
        if row is not None:
            session.expunge(row)
        return row


def get_by_username(username: str) -> Optional[User]:
    with get_session() as session:
        row = session.scalars(select(User).where(User.username == username)).first()
        if row is not None:
            session.expunge(row)
        return row


def update(user_id: int, **fields) -> Optional[User]:
    """Set role, status or password_hash."""
    with get_session() as session:
        row = session.get(User, user_id)
        if row is None:
            return None
        for key, value in fields.items():
            setattr(row, key, value)
        session.flush()
        session.refresh(row)
        session.expunge(row)
        return row


def store_refresh_token(user_id: int, token: str, expires_at: datetime) -> None:
    with get_session() as session:
        session.add(RefreshToken(user_id=user_id, token=token, expires_at=expires_at))


def find_valid_refresh_token(token: str) -> Optional[RefreshToken]:
    """The stored token row when it exists and has not expired."""
    now = datetime.now(timezone.utc)
    with get_session() as session:
        row = session.scalars(
            select(RefreshToken).where(RefreshToken.token == token).where(RefreshToken.expires_at > now)
        ).first()
        if row is not None:
            session.expunge(row)
        return row


def rotate_refresh_token(old_token: str, new_token: str, expires_at: datetime) -> bool:
    """Replace ``old_token`` with ``new_token`` in one transaction. False if the old one is gone."""
    now = datetime.now(timezone.utc)
    with get_session() as session:
        row = session.scalars(
            select(RefreshToken).where(RefreshToken.token == old_token).where(RefreshToken.expires_at > now)
        ).first()
        if row is None:
            return False
        user_id = row.user_id
        session.delete(row)
        session.add(RefreshToken(user_id=user_id, token=new_token, expires_at=expires_at))
        return True


def delete_refresh_token(token: str) -> int:
    with get_session() as session:
        result = session.execute(delete(RefreshToken).where(RefreshToken.token == token))
        return result.rowcount or 0


def purge_expired_refresh_tokens() -> int:
    now = datetime.now(timezone.utc)
    with get_session() as session:
        result = session.execute(delete(RefreshToken).where(RefreshToken.expires_at <= now))
        return result.rowcount or 0

"""Volunteer club and membership repository."""

from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import delete, func, select

from relief_hub.db import detach_all, get_session
from relief_hub.db.models.volunteer_club import Membership, VolunteerClub
from relief_hub.models.enums import MembershipStatus, UserStatus


# --- Clubs ---


def create_club(fields: dict[str, Any]) -> VolunteerClub:
    with get_session() as session:
        row = VolunteerClub(status=UserStatus.ACTIVE.value, **fields)
        session.add(row)
        session.flush()
        session.refresh(row)
        session.expunge(row)
        return row


def get_club(club_id: int) -> Optional[VolunteerClub]:
    with get_session() as session:
        row = session.get(VolunteerClub, club_id)
        if row is not None:
            session.expunge(row)
        return row


def get_club_by_user_id(user_id: int) -> Optional[VolunteerClub]:
    """The club this user owns, if any."""
    with get_session() as session:
        row = session.scalars(
            select(VolunteerClub).where(VolunteerClub.user_id == user_id).order_by(VolunteerClub.id)
        ).first()
        if row is not None:
            session.expunge(row)
        return row


def name_exists(name: str, exclude_id: Optional[int] = None) -> bool:
    """Case-insensitive check for another club with this name."""
    with get_session() as session:
        q = select(func.count(VolunteerClub.id)).where(func.lower(VolunteerClub.name) == name.lower())
        if exclude_id is not None:
            q = q.where(VolunteerClub.id != exclude_id)
        return (session.scalar(q) or 0) > 0


def list_clubs() -> list[VolunteerClub]:
    with get_session() as session:
        rows = list(session.scalars(select(VolunteerClub).order_by(VolunteerClub.name)).all())
        return detach_all(session, rows)


def update_club(club_id: int, fields: dict[str, Any]) -> Optional[VolunteerClub]:
    with get_session() as session:
        row = session.get(VolunteerClub, club_id)
        if row is None:
            return None
        for key, value in fields.items():
            setattr(row, key, value)
        session.flush()
        session.refresh(row)
        session.expunge(row)
        return row


def delete_club(club_id: int) -> bool:
    with get_session() as session:
        row = session.get(VolunteerClub, club_id)
        if row is None:
            return False
        session.execute(delete(Membership).where(Membership.volunteer_club_id == club_id))
        session.delete(row)
        return True


# --- Memberships ---


def get_membership(membership_id: int) -> Optional[Membership]:
    with get_session() as session:
        row = session.get(Membership, membership_id)
        if row is not None:
            session.expunge(row)
        return row


def find_membership(user_id: int, club_id: int) -> Optional[Membership]:
    with get_session() as session:
        row = session.scalars(
            select(Membership)
            .where(Membership.user_id == user_id)
            .where(Membership.volunteer_club_id == club_id)
        ).first()
        if row is not None:
            session.expunge(row)
        return row


def request_membership(user_id: int, club_id: int) -> Membership:
    """Create a PENDING membership, or reopen a REJECTED one as PENDING."""
    with get_session() as session:
        row = session.scalars(
            select(Membership)
            .where(Membership.user_id == user_id)
            .where(Membership.volunteer_club_id == club_id)
        ).first()
        if row is None:
            row = Membership(user_id=user_id, volunteer_club_id=club_id, status=MembershipStatus.PENDING.value)
            session.add(row)
        else:
            row.status = MembershipStatus.PENDING.value
            row.reviewed_by = None
            row.reviewed_at = None
            row.notes = None
        session.flush()
        session.refresh(row)
        session.expunge(row)
        return row


def list_memberships_for_user(user_id: int) -> list[Membership]:
    with get_session() as session:
        rows = list(
            session.scalars(
                select(Membership).where(Membership.user_id == user_id).order_by(Membership.created_at.desc())
            ).all()
        )
        return detach_all(session, rows)


def list_memberships_for_club(club_id: int) -> list[Membership]:
    with get_session() as session:
        rows = list(
            session.scalars(
                select(Membership)
                .where(Membership.volunteer_club_id == club_id)
                .order_by(Membership.created_at.desc())
            ).all()
        )
        return detach_all(session, rows)


def review_membership(
    membership_id: int, status: str, reviewer_id: int, notes: Optional[str] = None
) -> Optional[Membership]:
    with get_session() as session:
        row = session.get(Membership, membership_id)
        if row is None:
            return None
        row.status = status
        row.reviewed_by = reviewer_id
        row.reviewed_at = datetime.now(timezone.utc)
        if notes is not None:
            row.notes = notes
        session.flush()
        session.refresh(row)
        session.expunge(row)
        return row


def grant_approved(user_id: int, club_id: int, notes: Optional[str] = None) -> tuple[Membership, bool]:
    """Ensure an APPROVED membership exists. Returns (membership, created_or_changed)."""
    with get_session() as session:
        row = session.scalars(
            select(Membership)
            .where(Membership.user_id == user_id)
            .where(Membership.volunteer_club_id == club_id)
        ).first()
        changed = False
        if row is None:
            row = Membership(
                user_id=user_id,
                volunteer_club_id=club_id,
                status=MembershipStatus.APPROVED.value,
                reviewed_at=datetime.now(timezone.utc),
                notes=notes,
            )
            session.add(row)
            changed = True
        elif row.status != MembershipStatus.APPROVED.value:
            row.status = MembershipStatus.APPROVED.value
            row.reviewed_at = datetime.now(timezone.utc)
            if notes is not None:
                row.notes = notes
            changed = True
        session.flush()
        session.refresh(row)
        session.expunge(row)
        return row, changed

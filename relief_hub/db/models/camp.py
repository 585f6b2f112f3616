"""ORM models for relief camps: Camp, drop-off locations and cross-reference links."""

from typing import Optional

from sqlalchemy import JSON, Float, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from relief_hub.db.base import Base, TimestampMixin
from relief_hub.models.enums import CampStatus, ContactType


class Camp(Base, TimestampMixin):
    """Club-run relief camp. Its items live in inventory_items with target_type='camp'."""

    __tablename__ = "camps"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    volunteer_club_id: Mapped[int] = mapped_column(
        ForeignKey("volunteer_clubs.id"), nullable=False, index=True
    )
    lat: Mapped[float] = mapped_column(Float, nullable=False, index=True)
    lng: Mapped[float] = mapped_column(Float, nullable=False, index=True)
    camp_type: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    people_range: Mapped[str] = mapped_column(String(8), nullable=False)
    people_count: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    needs: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    short_note: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    contact_type: Mapped[str] = mapped_column(String(16), nullable=False, default=ContactType.NONE.value)
    contact: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=CampStatus.ACTIVE.value, index=True
    )


class CampDropOffLocation(Base, TimestampMixin):
    """Where goods for a camp are accepted. Coordinates are optional."""

    __tablename__ = "camp_drop_off_locations"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    camp_id: Mapped[int] = mapped_column(ForeignKey("camps.id", ondelete="CASCADE"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    lat: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    lng: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    contact_number: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)


class CampHelpRequest(Base):
    """Link: a help request the camp is looking after."""

    __tablename__ = "camp_help_requests"
    __table_args__ = (UniqueConstraint("camp_id", "help_request_id", name="uq_camp_help_request"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    camp_id: Mapped[int] = mapped_column(ForeignKey("camps.id", ondelete="CASCADE"), nullable=False, index=True)
    help_request_id: Mapped[int] = mapped_column(ForeignKey("help_requests.id"), nullable=False)


class CampDonation(Base):
    """Link: a donation the camp is coordinating."""

    __tablename__ = "camp_donations"
    __table_args__ = (UniqueConstraint("camp_id", "donation_id", name="uq_camp_donation"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    camp_id: Mapped[int] = mapped_column(ForeignKey("camps.id", ondelete="CASCADE"), nullable=False, index=True)
    donation_id: Mapped[int] = mapped_column(ForeignKey("donations.id"), nullable=False)

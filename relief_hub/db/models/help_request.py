"""ORM model for help requests posted by people in need."""

from typing import Optional

from sqlalchemy import Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from relief_hub.db.base import Base, TimestampMixin
from relief_hub.models.enums import ContactType, HelpRequestStatus


class HelpRequest(Base, TimestampMixin):
    """One victim's request for aid. Needed quantities live in inventory_items, not here."""

    __tablename__ = "help_requests"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id"), nullable=True, index=True)
    lat: Mapped[float] = mapped_column(Float, nullable=False, index=True)
    lng: Mapped[float] = mapped_column(Float, nullable=False, index=True)
    urgency: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    short_note: Mapped[str] = mapped_column(String(160), nullable=False)
    approx_area: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    contact_type: Mapped[str] = mapped_column(String(16), nullable=False, default=ContactType.NONE.value)
    contact: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    total_people: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    elders: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    children: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    pets: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=HelpRequestStatus.OPEN.value, index=True
    )

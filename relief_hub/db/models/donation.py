"""ORM model for donations (pledges against a help request or a camp)."""

from typing import Optional

from sqlalchemy import JSON, Boolean, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from relief_hub.db.base import Base, TimestampMixin


class Donation(Base, TimestampMixin):
    """Exactly one of help_request_id / camp_id is set.

    donator_name and donator_mobile_number are captured on the donation itself, not
    joined from the user, so a donor can give contact details per pledge.
    """

    __tablename__ = "donations"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    help_request_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("help_requests.id"), nullable=True, index=True
    )
    camp_id: Mapped[Optional[int]] = mapped_column(ForeignKey("camps.id"), nullable=True, index=True)
    donator_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    donator_name: Mapped[str] = mapped_column(String(100), nullable=False)
    donator_mobile_number: Mapped[str] = mapped_column(String(20), nullable=False)
    ration_items: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)

    donator_marked_scheduled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    donator_marked_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    owner_marked_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # Set once pending quantities have moved to donated
    is_confirmed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

"""Enums, catalog metadata and pydantic request/response models."""

from relief_hub.models.enums import (
    CampNeed,
    CampStatus,
    CampType,
    ContactType,
    DonationStatus,
    HelpRequestStatus,
    MembershipStatus,
    PeopleRange,
    TargetType,
    Urgency,
    UserRole,
    UserStatus,
)
from relief_hub.models.ration_items import RATION_ITEMS, RationItemType
from relief_hub.models.responses import ApiResponse, total_pages

__all__ = [
    "Urgency",
    "ContactType",
    "HelpRequestStatus",
    "CampType",
    "PeopleRange",
    "CampNeed",
    "CampStatus",
    "UserRole",
    "UserStatus",
    "MembershipStatus",
    "DonationStatus",
    "TargetType",
    "RationItemType",
    "RATION_ITEMS",
    "ApiResponse",
    "total_pages",
]

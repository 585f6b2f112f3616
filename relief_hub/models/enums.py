"""Closed vocabularies shared by the API, the database layer and the client."""

from enum import Enum


class Urgency(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class ContactType(str, Enum):
    PHONE = "Phone"
    WHATSAPP = "WhatsApp"
    NONE = "None"


class HelpRequestStatus(str, Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"
    EXPIRED = "EXPIRED"


class CampType(str, Enum):
    OFFICIAL = "Official"
    COMMUNITY = "Community"


class PeopleRange(str, Enum):
    SMALL = "1-10"
    MEDIUM = "10-50"
    LARGE = "50+"


class CampNeed(str, Enum):
    FOOD = "Food"
    WATER = "Water"
    MEDICAL = "Medical"
    SHELTER = "Shelter"
    CLOTHING = "Clothing"
    SANITATION = "Sanitation"
    OTHER = "Other"


class CampStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    COMPLETED = "COMPLETED"


class UserRole(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"
    SYSTEM_ADMINISTRATOR = "SYSTEM_ADMINISTRATOR"
    VOLUNTEER_CLUB = "VOLUNTEER_CLUB"


ADMIN_ROLES = frozenset({UserRole.ADMIN.value, UserRole.SYSTEM_ADMINISTRATOR.value})


class UserStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    DISABLED = "DISABLED"


class MembershipStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class DonationStatus(str, Enum):
    """Display status derived from the three donation progress flags (never stored)."""

    PENDING = "Pending"
    SCHEDULED = "Scheduled"
    COMPLETED = "Completed"


class TargetType(str, Enum):
    """What an inventory row or donation belongs to."""

    HELP_REQUEST = "help_request"
    CAMP = "camp"


def is_admin_role(role: str | None) -> bool:
    return role in ADMIN_ROLES

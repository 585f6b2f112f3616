"""Request bodies accepted by the API. Wire names are camelCase aliases."""

from typing import Annotated, Any, Optional

from pydantic import BaseModel, Field, field_validator

from relief_hub.models.enums import (
    CampNeed,
    CampStatus,
    CampType,
    ContactType,
    HelpRequestStatus,
    MembershipStatus,
    PeopleRange,
    Urgency,
    UserStatus,
)
from relief_hub.models.ration_items import RationItemType

_MODEL_CONFIG = {"populate_by_name": True, "extra": "ignore"}

# Upper bounds keep values inside a 64-bit INTEGER column
MAX_QUANTITY = 1_000_000
MAX_PEOPLE = 1_000_000
MAX_ID = 2**63 - 1

Quantity = Annotated[int, Field(le=MAX_QUANTITY)]
RecordId = Annotated[int, Field(ge=1, le=MAX_ID)]


def _strip(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def parse_coordinate(value: Any, limit: float) -> Optional[float]:
    """Accept a number or numeric string; anything unparseable or outside [-limit, limit] becomes None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        if not value.strip():
            return None
        try:
            value = float(value)
        except ValueError:
            return None
    if not isinstance(value, (int, float)):
        return None
    number = float(value)
    if number != number or not -limit <= number <= limit:
        return None
    return number


# --- Auth / users ---


class RegisterUser(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    password: Optional[str] = Field(None, min_length=6, max_length=128)

    model_config = _MODEL_CONFIG

    @field_validator("username", mode="before")
    @classmethod
    def strip_username(cls, value: Any) -> Any:
        return _strip(value)


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=50)
    password: Optional[str] = None

    model_config = _MODEL_CONFIG

    @field_validator("username", mode="before")
    @classmethod
    def strip_username(cls, value: Any) -> Any:
        return _strip(value)


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., alias="refreshToken", min_length=1)

    model_config = _MODEL_CONFIG


# --- Help requests ---


class CreateHelpRequest(BaseModel):
    """Creation input. rationItems maps item code to the quantity needed."""

    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    urgency: Urgency
    short_note: str = Field(..., alias="shortNote", min_length=1, max_length=160)
    approx_area: str = Field("", alias="approxArea", max_length=255)
    contact_type: ContactType = Field(ContactType.NONE, alias="contactType")
    contact: Optional[str] = Field(None, max_length=50)
    name: Optional[str] = Field(None, max_length=100)
    total_people: int = Field(0, alias="totalPeople", ge=0, le=MAX_PEOPLE)
    elders: int = Field(0, ge=0, le=MAX_PEOPLE)
    children: int = Field(0, ge=0, le=MAX_PEOPLE)
    pets: int = Field(0, ge=0, le=MAX_PEOPLE)
    ration_items: dict[RationItemType, Quantity] = Field(default_factory=dict, alias="rationItems")

    model_config = _MODEL_CONFIG

    @field_validator("short_note", "approx_area", "contact", "name", mode="before")
    @classmethod
    def strip_text(cls, value: Any) -> Any:
        return _strip(value)


class UpdateHelpRequest(BaseModel):
    urgency: Optional[Urgency] = None
    short_note: Optional[str] = Field(None, alias="shortNote", min_length=1, max_length=160)
    approx_area: Optional[str] = Field(None, alias="approxArea", max_length=255)
    contact_type: Optional[ContactType] = Field(None, alias="contactType")
    contact: Optional[str] = Field(None, max_length=50)
    name: Optional[str] = Field(None, max_length=100)
    total_people: Optional[int] = Field(None, alias="totalPeople", ge=0, le=MAX_PEOPLE)
    elders: Optional[int] = Field(None, ge=0, le=MAX_PEOPLE)
    children: Optional[int] = Field(None, ge=0, le=MAX_PEOPLE)
    pets: Optional[int] = Field(None, ge=0, le=MAX_PEOPLE)
    status: Optional[HelpRequestStatus] = None
    ration_items: Optional[dict[RationItemType, Quantity]] = Field(None, alias="rationItems")

    model_config = _MODEL_CONFIG

    @field_validator("short_note", "approx_area", "contact", "name", mode="before")
    @classmethod
    def strip_text(cls, value: Any) -> Any:
        return _strip(value)


# --- Donations ---


class CreateDonation(BaseModel):
    """Pledge of item quantities. The target comes from the URL path."""

    donator_name: str = Field(..., alias="donatorName", min_length=1, max_length=100)
    donator_mobile_number: str = Field(..., alias="donatorMobileNumber", min_length=1, max_length=20)
    ration_items: dict[RationItemType, Quantity] = Field(default_factory=dict, alias="rationItems")
    auto_approve: bool = Field(False, alias="autoApprove")

    model_config = _MODEL_CONFIG

    @field_validator("donator_name", "donator_mobile_number", mode="before")
    @classmethod
    def strip_text(cls, value: Any) -> Any:
        return _strip(value)


# --- Camps ---


class CampItemInput(BaseModel):
    item_type: RationItemType = Field(..., alias="itemType")
    quantity: int = Field(..., ge=1, le=MAX_QUANTITY)
    notes: Optional[str] = Field(None, max_length=500)

    model_config = _MODEL_CONFIG


class DropOffLocationInput(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    address: Optional[str] = Field(None, max_length=500)
    lat: Optional[float] = None
    lng: Optional[float] = None
    contact_number: Optional[str] = Field(None, alias="contactNumber", max_length=20)
    notes: Optional[str] = Field(None, max_length=500)

    model_config = _MODEL_CONFIG

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value: Any) -> Any:
        return _strip(value)

    @field_validator("lat", mode="before")
    @classmethod
    def parse_lat(cls, value: Any) -> Optional[float]:
        return parse_coordinate(value, 90)

    @field_validator("lng", mode="before")
    @classmethod
    def parse_lng(cls, value: Any) -> Optional[float]:
        return parse_coordinate(value, 180)


class CreateCamp(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    camp_type: CampType = Field(..., alias="campType")
    name: str = Field(..., min_length=1, max_length=255)
    people_range: PeopleRange = Field(..., alias="peopleRange")
    people_count: Optional[int] = Field(None, alias="peopleCount", ge=0, le=MAX_PEOPLE)
    needs: list[CampNeed] = Field(..., min_length=1)
    short_note: str = Field(..., alias="shortNote", min_length=1, max_length=500)
    description: Optional[str] = None
    location: Optional[str] = Field(None, max_length=255)
    contact_type: ContactType = Field(ContactType.NONE, alias="contactType")
    contact: Optional[str] = Field(None, max_length=50)
    items: list[CampItemInput] = Field(default_factory=list)
    drop_off_locations: list[DropOffLocationInput] = Field(default_factory=list, alias="dropOffLocations")
    help_request_ids: list[RecordId] = Field(default_factory=list, alias="helpRequestIds")
    donation_ids: list[RecordId] = Field(default_factory=list, alias="donationIds")

    model_config = _MODEL_CONFIG

    @field_validator("name", "short_note", "description", "location", "contact", mode="before")
    @classmethod
    def strip_text(cls, value: Any) -> Any:
        return _strip(value)


class UpdateCamp(BaseModel):
    """Partial update. A list that is present replaces the stored one entirely."""

    lat: Optional[float] = Field(None, ge=-90, le=90)
    lng: Optional[float] = Field(None, ge=-180, le=180)
    camp_type: Optional[CampType] = Field(None, alias="campType")
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    people_range: Optional[PeopleRange] = Field(None, alias="peopleRange")
    people_count: Optional[int] = Field(None, alias="peopleCount", ge=0, le=MAX_PEOPLE)
    needs: Optional[list[CampNeed]] = Field(None, min_length=1)
    short_note: Optional[str] = Field(None, alias="shortNote", min_length=1, max_length=500)
    description: Optional[str] = None
    location: Optional[str] = Field(None, max_length=255)
    contact_type: Optional[ContactType] = Field(None, alias="contactType")
    contact: Optional[str] = Field(None, max_length=50)
    status: Optional[CampStatus] = None
    items: Optional[list[CampItemInput]] = None
    drop_off_locations: Optional[list[DropOffLocationInput]] = Field(None, alias="dropOffLocations")
    help_request_ids: Optional[list[RecordId]] = Field(None, alias="helpRequestIds")
    donation_ids: Optional[list[RecordId]] = Field(None, alias="donationIds")

    model_config = _MODEL_CONFIG

    @field_validator("name", "short_note", "description", "location", "contact", mode="before")
    @classmethod
    def strip_text(cls, value: Any) -> Any:
        return _strip(value)


# --- Volunteer clubs / memberships ---


class CreateVolunteerClub(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    contact_number: Optional[str] = Field(None, alias="contactNumber", max_length=20)
    email: Optional[str] = Field(None, max_length=255)
    address: Optional[str] = Field(None, max_length=500)
    user_id: Optional[RecordId] = Field(None, alias="userId")

    model_config = _MODEL_CONFIG

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value: Any) -> Any:
        return _strip(value)


class UpdateVolunteerClub(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    contact_number: Optional[str] = Field(None, alias="contactNumber", max_length=20)
    email: Optional[str] = Field(None, max_length=255)
    address: Optional[str] = Field(None, max_length=500)
    user_id: Optional[RecordId] = Field(None, alias="userId")
    status: Optional[UserStatus] = None

    model_config = _MODEL_CONFIG

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value: Any) -> Any:
        return _strip(value)


class RequestMembership(BaseModel):
    volunteer_club_id: RecordId = Field(..., alias="volunteerClubId")

    model_config = _MODEL_CONFIG


class ReviewMembership(BaseModel):
    status: MembershipStatus
    notes: Optional[str] = Field(None, max_length=500)

    model_config = _MODEL_CONFIG

    @field_validator("status")
    @classmethod
    def check_reviewed_status(cls, value: MembershipStatus) -> MembershipStatus:
        if value == MembershipStatus.PENDING:
            raise ValueError("status must be APPROVED or REJECTED")
        return value

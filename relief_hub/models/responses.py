"""Response shapes returned inside the {success, data, error, message, count} envelope."""

import math
from datetime import datetime
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, Field

from relief_hub.models.enums import DonationStatus

T = TypeVar("T")

_MODEL_CONFIG = {"populate_by_name": True, "extra": "ignore"}


class ApiResponse(BaseModel, Generic[T]):
    """Uniform envelope for every API response and every client service result."""

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    message: Optional[str] = None
    count: Optional[int] = None
    details: Optional[Any] = None

    model_config = _MODEL_CONFIG


def total_pages(count: int, limit: int) -> int:
    """Pages needed to show ``count`` rows ``limit`` at a time."""
    if limit <= 0:
        return 0
    return math.ceil(count / limit)


class UserResponse(BaseModel):
    id: int
    username: str
    role: str
    status: str
    created_at: Optional[datetime] = Field(None, alias="createdAt")

    model_config = _MODEL_CONFIG

    @classmethod
    def from_row(cls, row: Any) -> "UserResponse":
        return cls(
            id=row.id,
            username=row.username,
            role=row.role,
            status=row.status,
            created_at=row.created_at,
        )


class AuthResponse(BaseModel):
    user: UserResponse
    access_token: str = Field(..., alias="accessToken")
    refresh_token: str = Field(..., alias="refreshToken")

    model_config = _MODEL_CONFIG


class RationItemResponse(BaseModel):
    code: str
    label: str
    icon: Optional[str] = None


class InventoryItemResponse(BaseModel):
    id: int
    help_request_id: Optional[int] = Field(None, alias="helpRequestId")
    camp_id: Optional[int] = Field(None, alias="campId")
    item_name: str = Field(..., alias="itemName")
    quantity_needed: int = Field(..., alias="quantityNeeded")
    quantity_donated: int = Field(..., alias="quantityDonated")
    quantity_pending: int = Field(..., alias="quantityPending")
    quantity_remaining: int = Field(..., alias="quantityRemaining")
    notes: Optional[str] = None

    model_config = _MODEL_CONFIG


class HelpRequestResponse(BaseModel):
    """rationItems lists the codes that are needed; quantities are on the inventory endpoint."""

    id: int
    user_id: Optional[int] = Field(None, alias="userId")
    lat: float
    lng: float
    urgency: str
    short_note: str = Field(..., alias="shortNote")
    approx_area: str = Field("", alias="approxArea")
    contact_type: str = Field(..., alias="contactType")
    contact: Optional[str] = None
    name: Optional[str] = None
    total_people: int = Field(0, alias="totalPeople")
    elders: int = 0
    children: int = 0
    pets: int = 0
    ration_items: list[str] = Field(default_factory=list, alias="rationItems")
    status: str
    is_owner: Optional[bool] = Field(None, alias="isOwner")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    model_config = _MODEL_CONFIG


class DonationResponse(BaseModel):
    """donatorName / donatorMobileNumber are left out unless the viewer may see them."""

    id: int
    help_request_id: Optional[int] = Field(None, alias="helpRequestId")
    camp_id: Optional[int] = Field(None, alias="campId")
    donator_id: int = Field(..., alias="donatorId")
    donator_name: Optional[str] = Field(None, alias="donatorName")
    donator_mobile_number: Optional[str] = Field(None, alias="donatorMobileNumber")
    ration_items: dict[str, int] = Field(default_factory=dict, alias="rationItems")
    donator_marked_scheduled: bool = Field(False, alias="donatorMarkedScheduled")
    donator_marked_completed: bool = Field(False, alias="donatorMarkedCompleted")
    owner_marked_completed: bool = Field(False, alias="ownerMarkedCompleted")
    status: DonationStatus = DonationStatus.PENDING
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    model_config = _MODEL_CONFIG


class CampSummaryResponse(BaseModel):
    id: int
    name: str
    location: Optional[str] = None
    volunteer_club_id: int = Field(..., alias="volunteerClubId")

    model_config = _MODEL_CONFIG


class DonationWithTargetResponse(DonationResponse):
    """A caller's own donation together with what it was given to."""

    help_request: Optional[HelpRequestResponse] = Field(None, alias="helpRequest")
    camp: Optional[CampSummaryResponse] = None


class CampItemResponse(BaseModel):
    item_type: str = Field(..., alias="itemType")
    quantity: int
    notes: Optional[str] = None

    model_config = _MODEL_CONFIG


class DropOffLocationResponse(BaseModel):
    id: int
    camp_id: int = Field(..., alias="campId")
    camp_name: Optional[str] = Field(None, alias="campName")
    name: str
    address: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    contact_number: Optional[str] = Field(None, alias="contactNumber")
    notes: Optional[str] = None

    model_config = _MODEL_CONFIG


class CampResponse(BaseModel):
    id: int
    volunteer_club_id: int = Field(..., alias="volunteerClubId")
    lat: float
    lng: float
    camp_type: str = Field(..., alias="campType")
    name: str
    people_range: str = Field(..., alias="peopleRange")
    people_count: Optional[int] = Field(None, alias="peopleCount")
    needs: list[str] = Field(default_factory=list)
    short_note: str = Field(..., alias="shortNote")
    description: Optional[str] = None
    location: Optional[str] = None
    contact_type: str = Field(..., alias="contactType")
    contact: Optional[str] = None
    status: str
    items: list[CampItemResponse] = Field(default_factory=list)
    drop_off_locations: list[DropOffLocationResponse] = Field(default_factory=list, alias="dropOffLocations")
    help_request_ids: list[int] = Field(default_factory=list, alias="helpRequestIds")
    donation_ids: list[int] = Field(default_factory=list, alias="donationIds")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    model_config = _MODEL_CONFIG


class VolunteerClubResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    contact_number: Optional[str] = Field(None, alias="contactNumber")
    email: Optional[str] = None
    address: Optional[str] = None
    user_id: Optional[int] = Field(None, alias="userId")
    status: str
    created_at: Optional[datetime] = Field(None, alias="createdAt")

    model_config = _MODEL_CONFIG

    @classmethod
    def from_row(cls, row: Any) -> "VolunteerClubResponse":
        return cls(
            id=row.id,
            name=row.name,
            description=row.description,
            contact_number=row.contact_number,
            email=row.email,
            address=row.address,
            user_id=row.user_id,
            status=row.status,
            created_at=row.created_at,
        )


class MembershipResponse(BaseModel):
    id: int
    user_id: int = Field(..., alias="userId")
    volunteer_club_id: int = Field(..., alias="volunteerClubId")
    status: str
    reviewed_by: Optional[int] = Field(None, alias="reviewedBy")
    reviewed_at: Optional[datetime] = Field(None, alias="reviewedAt")
    notes: Optional[str] = None
    created_at: Optional[datetime] = Field(None, alias="createdAt")

    model_config = _MODEL_CONFIG

    @classmethod
    def from_row(cls, row: Any) -> "MembershipResponse":
        return cls(
            id=row.id,
            user_id=row.user_id,
            volunteer_club_id=row.volunteer_club_id,
            status=row.status,
            reviewed_by=row.reviewed_by,
            reviewed_at=row.reviewed_at,
            notes=row.notes,
            created_at=row.created_at,
        )


class PeopleSummary(BaseModel):
    total_people: int = Field(0, alias="totalPeople")
    elders: int = 0
    children: int = 0
    pets: int = 0
    # totalPeople + elders + children, the headline "people affected" figure
    combined_total: int = Field(0, alias="combinedTotal")

    model_config = _MODEL_CONFIG


class RationItemInventorySummary(BaseModel):
    quantity_needed: int = Field(0, alias="quantityNeeded")
    quantity_donated: int = Field(0, alias="quantityDonated")
    quantity_pending: int = Field(0, alias="quantityPending")
    quantity_remaining: int = Field(0, alias="quantityRemaining")
    request_count: int = Field(0, alias="requestCount")

    model_config = _MODEL_CONFIG


class HelpRequestSummary(BaseModel):
    total: int = 0
    by_urgency: dict[str, int] = Field(default_factory=dict, alias="byUrgency")
    by_status: dict[str, int] = Field(default_factory=dict, alias="byStatus")
    by_district: dict[str, int] = Field(default_factory=dict, alias="byDistrict")
    people: PeopleSummary = Field(default_factory=PeopleSummary)
    ration_items: dict[str, RationItemInventorySummary] = Field(default_factory=dict, alias="rationItems")
    total_ration_item_types: int = Field(0, alias="totalRationItemTypes")

    model_config = _MODEL_CONFIG

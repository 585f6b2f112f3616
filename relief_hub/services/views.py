"""ORM row -> response model conversions shared by several services."""

from typing import Optional

from relief_hub.db.models.camp import Camp, CampDropOffLocation
from relief_hub.db.models.help_request import HelpRequest
from relief_hub.db.models.inventory import InventoryItem
from relief_hub.db.repositories.camp_repo import CampRelations
from relief_hub.domain.inventory import remaining
from relief_hub.models.enums import TargetType
from relief_hub.models.responses import (
    CampItemResponse,
    CampResponse,
    CampSummaryResponse,
    DropOffLocationResponse,
    HelpRequestResponse,
    InventoryItemResponse,
)


def inventory_item(row: InventoryItem) -> InventoryItemResponse:
    is_camp = row.target_type == TargetType.CAMP.value
    return InventoryItemResponse(
        id=row.id,
        help_request_id=None if is_camp else row.target_id,
        camp_id=row.target_id if is_camp else None,
        item_name=row.item_name,
        quantity_needed=row.quantity_needed,
        quantity_donated=row.quantity_donated,
        quantity_pending=row.quantity_pending,
        quantity_remaining=remaining(row.quantity_needed, row.quantity_donated, row.quantity_pending),
        notes=row.notes,
    )


def help_request(row: HelpRequest, codes: list[str], is_owner: Optional[bool] = None) -> HelpRequestResponse:
    return HelpRequestResponse(
        id=row.id,
        user_id=row.user_id,
        lat=row.lat,
        lng=row.lng,
        urgency=row.urgency,
        short_note=row.short_note,
        approx_area=row.approx_area or "",
        contact_type=row.contact_type,
        contact=row.contact,
        name=row.name,
        total_people=row.total_people,
        elders=row.elders,
        children=row.children,
        pets=row.pets,
        ration_items=codes,
        status=row.status,
        is_owner=is_owner,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def drop_off_location(row: CampDropOffLocation, camp_name: Optional[str] = None) -> DropOffLocationResponse:
    return DropOffLocationResponse(
        id=row.id,
        camp_id=row.camp_id,
        camp_name=camp_name,
        name=row.name,
        address=row.address,
        lat=row.lat,
        lng=row.lng,
        contact_number=row.contact_number,
        notes=row.notes,
    )


def camp(row: Camp, relations: CampRelations) -> CampResponse:
    return CampResponse(
        id=row.id,
        volunteer_club_id=row.volunteer_club_id,
        lat=row.lat,
        lng=row.lng,
        camp_type=row.camp_type,
        name=row.name,
        people_range=row.people_range,
        people_count=row.people_count,
        needs=list(row.needs or []),
        short_note=row.short_note,
        description=row.description,
        location=row.location,
        contact_type=row.contact_type,
        contact=row.contact,
        status=row.status,
        items=[
            CampItemResponse(item_type=item.item_name, quantity=item.quantity_needed, notes=item.notes)
            for item in relations.items
        ],
        drop_off_locations=[drop_off_location(loc, row.name) for loc in relations.drop_off_locations],
        help_request_ids=relations.help_request_ids,
        donation_ids=relations.donation_ids,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def camp_summary(row: Camp) -> CampSummaryResponse:
    return CampSummaryResponse(
        id=row.id,
        name=row.name,
        location=row.location,
        volunteer_club_id=row.volunteer_club_id,
    )

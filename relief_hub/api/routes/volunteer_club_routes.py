"""Volunteer club and membership endpoints."""

from fastapi import APIRouter, Depends

from relief_hub.api.deps import get_current_user, require_admin, require_volunteer_club
from relief_hub.api.envelope import ok
from relief_hub.db.models.user import User
from relief_hub.models.requests import (
    CreateVolunteerClub,
    RequestMembership,
    ReviewMembership,
    UpdateVolunteerClub,
)
from relief_hub.services import volunteer_club_service

router = APIRouter(prefix="/volunteer-clubs", tags=["volunteer-clubs"])
memberships_router = APIRouter(prefix="/memberships", tags=["memberships"])


@router.post("")
def create_club(body: CreateVolunteerClub, admin: User = Depends(require_admin)):
    return ok(volunteer_club_service.create(body), message="Volunteer club created", status_code=201)


@router.get("")
def list_clubs():
    rows = volunteer_club_service.list_clubs()
    return ok(rows, count=len(rows))


@router.get("/me")
def my_club(user: User = Depends(require_volunteer_club)):
    return ok(volunteer_club_service.get_mine(user))


@router.get("/{club_id}")
def get_club(club_id: int):
    return ok(volunteer_club_service.get(club_id))


@router.put("/{club_id}")
def update_club(club_id: int, body: UpdateVolunteerClub, admin: User = Depends(require_admin)):
    return ok(volunteer_club_service.update(club_id, body), message="Volunteer club updated")


@router.delete("/{club_id}")
def delete_club(club_id: int, admin: User = Depends(require_admin)):
    volunteer_club_service.delete(club_id)
    return ok(message="Volunteer club deleted")


@memberships_router.post("/request")
def request_membership(body: RequestMembership, user: User = Depends(get_current_user)):
    membership = volunteer_club_service.request_membership(body.volunteer_club_id, user)
    return ok(membership, message="Membership requested", status_code=201)


@memberships_router.get("/me")
def my_memberships(user: User = Depends(get_current_user)):
    rows = volunteer_club_service.my_memberships(user)
    return ok(rows, count=len(rows))


@memberships_router.get("/club/{club_id}")
def club_memberships(club_id: int, user: User = Depends(get_current_user)):
    rows = volunteer_club_service.club_memberships(club_id, user)
    return ok(rows, count=len(rows))


@memberships_router.put("/{membership_id}/review")
def review_membership(membership_id: int, body: ReviewMembership, user: User = Depends(get_current_user)):
    return ok(volunteer_club_service.review_membership(membership_id, body, user), message="Membership reviewed")

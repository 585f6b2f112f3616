"""Donation progress flags, derived status and who may flip which flag."""

from enum import Enum
from typing import Iterable, Protocol

from relief_hub.models.enums import DonationStatus


class DonationFlags(Protocol):
    donator_marked_scheduled: bool
    donator_marked_completed: bool
    owner_marked_completed: bool


class Transition(str, Enum):
    SCHEDULE = "schedule"
    COMPLETE_DONATOR = "complete-donator"
    COMPLETE_OWNER = "complete-owner"


# Transition -> (flag attribute, party allowed to set it)
_TRANSITIONS: dict[Transition, tuple[str, str]] = {
    Transition.SCHEDULE: ("donator_marked_scheduled", "donator"),
    Transition.COMPLETE_DONATOR: ("donator_marked_completed", "donator"),
    Transition.COMPLETE_OWNER: ("owner_marked_completed", "owner"),
}

DENIED_MESSAGES: dict[Transition, str] = {
    Transition.SCHEDULE: "You can only mark your own donations as scheduled",
    Transition.COMPLETE_DONATOR: "You can only mark your own donations as completed",
    Transition.COMPLETE_OWNER: "You can only mark donations for your own help requests or camps as completed",
}


class TransitionNotAllowed(Exception):
    def __init__(self, transition: Transition):
        self.transition = transition
        super().__init__(DENIED_MESSAGES[transition])


def effective_status(donation: DonationFlags) -> DonationStatus:
    """Completed if either side attested completion, else Scheduled, else Pending."""
    if donation.donator_marked_completed or donation.owner_marked_completed:
        return DonationStatus.COMPLETED
    if donation.donator_marked_scheduled:
        return DonationStatus.SCHEDULED
    return DonationStatus.PENDING


def flag_for(transition: Transition) -> str:
    return _TRANSITIONS[transition][0]


def authorize_transition(
    transition: Transition,
    actor_id: int,
    donator_id: int,
    owner_ids: Iterable[int],
    actor_is_admin: bool = False,
    admin_may_act_as_owner: bool = False,
) -> None:
    """Raise TransitionNotAllowed unless actor is the party that owns this flag."""
    party = _TRANSITIONS[transition][1]
    if party == "donator":
        if actor_id != donator_id:
            raise TransitionNotAllowed(transition)
        return
    if actor_id in set(owner_ids):
        return
    if admin_may_act_as_owner and actor_is_admin:
        return
    raise TransitionNotAllowed(transition)


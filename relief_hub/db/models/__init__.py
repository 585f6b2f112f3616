"""Re-export all ORM models so Base.metadata has all tables."""

from relief_hub.db.models.camp import Camp, CampDonation, CampDropOffLocation, CampHelpRequest
from relief_hub.db.models.donation import Donation
from relief_hub.db.models.help_request import HelpRequest
from relief_hub.db.models.inventory import InventoryItem, Item
from relief_hub.db.models.user import RefreshToken, User
from relief_hub.db.models.volunteer_club import Membership, VolunteerClub

__all__ = [
    "User",
    "RefreshToken",
    "HelpRequest",
    "Item",
    "InventoryItem",
    "Donation",
    "VolunteerClub",
    "Membership",
    "Camp",
    "CampDropOffLocation",
    "CampHelpRequest",
    "CampDonation",
]

"""Python client for the relief API: token-aware HTTP client plus one service per resource."""

from relief_hub.client.api_client import ApiClient, ApiError
from relief_hub.client.auth_service import AuthService
from relief_hub.client.camp_service import CampService
from relief_hub.client.donation_service import DonationService
from relief_hub.client.help_request_service import HelpRequestService
from relief_hub.client.token_store import FileTokenStore, MemoryTokenStore, TokenStore

__all__ = [
    "ApiClient",
    "ApiError",
    "AuthService",
    "CampService",
    "DonationService",
    "HelpRequestService",
    "FileTokenStore",
    "MemoryTokenStore",
    "TokenStore",
]

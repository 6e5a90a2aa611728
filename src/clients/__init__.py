"""API clients package."""

from src.clients.auth_token_manager import AuthTokenManager, TokenManagerError
from src.clients.hotel_cms_client import (
    HotelCMSAuthenticationError,
    HotelCMSClient,
    HotelCMSClientError,
    HotelCMSNotFoundError,
    HotelCMSServerError,
)

__all__ = [
    "AuthTokenManager",
    "TokenManagerError",
    "HotelCMSClient",
    "HotelCMSClientError",
    "HotelCMSAuthenticationError",
    "HotelCMSNotFoundError",
    "HotelCMSServerError",
]

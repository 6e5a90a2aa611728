"""Hotel CMS API response models."""

from src.models.cms.responses import (
    AssignFilesResult,
    CategoriesResult,
    CurrentUser,
    EventCreateResult,
    FullHotelDetails,
    HotelCreateResult,
    LoginResult,
    RoomConfigData,
    RoomConfigResult,
)

__all__ = [
    "HotelCreateResult",
    "RoomConfigResult",
    "RoomConfigData",
    "CategoriesResult",
    "EventCreateResult",
    "AssignFilesResult",
    "LoginResult",
    "CurrentUser",
    "FullHotelDetails",
]

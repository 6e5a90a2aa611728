"""Pydantic models for Hotel CMS API responses used by the wizard."""

from typing import Any, Optional, Union

from pydantic import BaseModel, Field


class HotelCreateResult(BaseModel):
    """Result of POST /hotels, flattened from the `data` envelope."""

    success: bool = True
    hotel_id: Optional[int] = Field(None, alias="hotelId")
    name: Optional[str] = None

    class Config:
        extra = "allow"
        populate_by_name = True


class RoomConfigData(BaseModel):
    """Main room configuration as echoed back by POST /rooms."""

    room_id: Optional[int] = Field(None, alias="roomId")

    class Config:
        extra = "allow"
        populate_by_name = True


class RoomConfigResult(BaseModel):
    """Result of POST /rooms."""

    success: bool = True
    data: Optional[RoomConfigData] = None

    class Config:
        extra = "allow"
        populate_by_name = True

    @property
    def room_id(self) -> Optional[int]:
        return self.data.room_id if self.data else None


class CategoriesResult(BaseModel):
    """Result of POST /rooms/{id}/categories."""

    success: bool = True
    room_id: Optional[int] = Field(None, alias="roomId")
    created_categories: list[dict[str, Any]] = Field(
        default_factory=list, alias="createdCategories"
    )

    class Config:
        extra = "allow"
        populate_by_name = True


class EventCreateResult(BaseModel):
    """Result of POST /events."""

    success: bool = True
    event_id: Optional[int] = Field(None, alias="eventId")

    class Config:
        extra = "allow"
        populate_by_name = True


class AssignFilesResult(BaseModel):
    """Result of POST /files/assign/{entityType}/{entityId}."""

    message: Optional[str] = None
    updated_count: int = Field(default=0, alias="updatedCount")

    class Config:
        extra = "allow"
        populate_by_name = True


class LoginResult(BaseModel):
    """Result of POST /auth/login."""

    token: str
    user: dict[str, Any] = Field(default_factory=dict)

    class Config:
        extra = "allow"


class CurrentUser(BaseModel):
    """Result of GET /auth/me."""

    user: dict[str, Any] = Field(default_factory=dict)
    permissions: list[str] = Field(default_factory=list)

    class Config:
        extra = "allow"


class FullHotelDetails(BaseModel):
    """Hotel aggregate returned by GET /hotels/{id}/full.

    Sections the backend omits stay empty. `events_info` is not part of the
    backend payload; it is filled in by the service when the first event's
    sub-records are fetched.
    """

    hotel: Optional[dict[str, Any]] = None
    rooms: list[dict[str, Any]] = Field(default_factory=list)
    room_categories: list[dict[str, Any]] = Field(default_factory=list, alias="roomCategories")
    room_operational: Union[list[dict[str, Any]], dict[str, Any], None] = Field(
        None, alias="roomOperational"
    )
    room_handling: Optional[dict[str, Any]] = Field(None, alias="roomHandling")
    events: list[dict[str, Any]] = Field(default_factory=list)
    events_info: Optional[dict[str, Any]] = Field(None, alias="eventsInfo")
    event_spaces: list[dict[str, Any]] = Field(default_factory=list, alias="eventSpaces")
    fnb: Optional[dict[str, Any]] = None
    information_policies: list[dict[str, Any]] = Field(
        default_factory=list, alias="informationPolicies"
    )

    class Config:
        extra = "allow"
        populate_by_name = True

"""Hotel CMS REST API client used by the onboarding wizard."""

import asyncio
from typing import Any, Optional

import httpx
from structlog import get_logger

from src.clients.auth_token_manager import AuthTokenManager
from src.config import settings
from src.models.cms import (
    AssignFilesResult,
    CategoriesResult,
    CurrentUser,
    EventCreateResult,
    HotelCreateResult,
    RoomConfigResult,
)

logger = get_logger(__name__)


class HotelCMSClientError(Exception):
    """Base exception for Hotel CMS client errors."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class HotelCMSAuthenticationError(HotelCMSClientError):
    """Raised when the CMS rejects the token or the caller lacks permission."""

    pass


class HotelCMSNotFoundError(HotelCMSClientError):
    """Raised when a CMS resource is not found."""

    pass


class HotelCMSServerError(HotelCMSClientError):
    """Raised when the CMS returns a server error."""

    pass


def _error_message(response: httpx.Response, default: str) -> str:
    """Pull the backend's `error` (or `message`) field out of an error body."""
    try:
        body = response.json()
    except ValueError:
        return response.text or default
    if isinstance(body, dict):
        return body.get("error") or body.get("message") or default
    return default


class HotelCMSClient:
    """Client for the Hotel CMS endpoints the onboarding wizard depends on.

    Write requests are sent exactly once. GET requests are retried with
    exponential backoff on timeouts, transport errors and 5xx responses.
    """

    def __init__(
        self,
        token_manager: Optional[AuthTokenManager] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the client with settings.

        Args:
            token_manager: Source of bearer tokens; built from settings when omitted
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = settings.api.base_url.rstrip("/")
        self.timeout = settings.api.request_timeout
        self.max_retries = max(1, settings.api.max_retries)
        self.retry_backoff_base = 2
        self.user_agent = settings.api.user_agent
        self.token_manager = token_manager or AuthTokenManager(transport=transport)
        self.transport = transport

    async def _get_headers(self) -> dict[str, str]:
        token = await self.token_manager.get_auth_token()
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {token}",
            "User-Agent": self.user_agent,
        }

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        data: Any = None,
        params: Optional[dict[str, Any]] = None,
        hotel_id: Optional[int] = None,
    ) -> Any:
        """Make an HTTP request to the CMS API.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            endpoint: API endpoint path (without base URL)
            data: JSON request body (object or list)
            params: Query parameters
            hotel_id: Hotel id for log context

        Returns:
            Decoded JSON response ({} for empty bodies)

        Raises:
            HotelCMSAuthenticationError: On 401/403
            HotelCMSNotFoundError: On 404
            HotelCMSServerError: On 5xx
            HotelCMSClientError: For other API and transport errors
        """
        url = f"{self.base_url}{endpoint}"
        headers = await self._get_headers()
        attempts = self.max_retries if method.upper() == "GET" else 1

        for attempt in range(attempts):
            retry_allowed = attempt < attempts - 1
            try:
                async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                    response = await client.request(
                        method=method,
                        url=url,
                        headers=headers,
                        json=data,
                        params=params,
                    )
            except httpx.TimeoutException as e:
                if retry_allowed:
                    await self._backoff("CMS request timeout, retrying", endpoint, attempt, hotel_id)
                    continue
                logger.error("CMS request timeout", hotel_id=hotel_id, endpoint=endpoint)
                raise HotelCMSClientError(f"Request timeout for {endpoint}") from e
            except httpx.RequestError as e:
                if retry_allowed:
                    await self._backoff("CMS request error, retrying", endpoint, attempt, hotel_id)
                    continue
                logger.error("CMS request error", hotel_id=hotel_id, endpoint=endpoint, error=str(e))
                raise HotelCMSClientError(f"Request failed for {endpoint}: {str(e)}") from e

            status = response.status_code

            if status in (401, 403):
                logger.error("CMS authentication failed", hotel_id=hotel_id, endpoint=endpoint, status_code=status)
                if status == 401:
                    await self.token_manager.invalidate()
                raise HotelCMSAuthenticationError(
                    _error_message(response, f"Access denied for {endpoint}"), status
                )

            if status == 404:
                logger.warning("CMS resource not found", hotel_id=hotel_id, endpoint=endpoint)
                raise HotelCMSNotFoundError(
                    _error_message(response, f"Resource not found: {endpoint}"), status
                )

            if status >= 500:
                if retry_allowed:
                    await self._backoff("CMS server error, retrying", endpoint, attempt, hotel_id)
                    continue
                logger.error("CMS server error", hotel_id=hotel_id, endpoint=endpoint, status_code=status)
                raise HotelCMSServerError(
                    _error_message(response, f"Server error at {endpoint}"), status
                )

            if status >= 400:
                logger.error(
                    "CMS client error",
                    hotel_id=hotel_id,
                    endpoint=endpoint,
                    status_code=status,
                    response_text=response.text[:200],
                )
                raise HotelCMSClientError(
                    _error_message(response, f"Client error at {endpoint}"), status
                )

            logger.debug(
                "CMS request successful",
                hotel_id=hotel_id,
                endpoint=endpoint,
                method=method,
                status_code=status,
            )
            return response.json() if response.content else {}

        raise HotelCMSClientError(f"Failed to complete request to {endpoint}")

    async def _backoff(
        self, message: str, endpoint: str, attempt: int, hotel_id: Optional[int]
    ) -> None:
        wait_time = self.retry_backoff_base ** attempt
        logger.warning(
            message,
            hotel_id=hotel_id,
            endpoint=endpoint,
            attempt=attempt + 1,
            max_retries=self.max_retries,
            wait_seconds=wait_time,
        )
        await asyncio.sleep(wait_time)

    async def close(self) -> None:
        """Release the token manager's Redis connection."""
        await self.token_manager.close()

    # ---- Auth ----

    async def get_current_user(self) -> CurrentUser:
        """Fetch the logged-in user together with their permission codes."""
        response = await self._make_request("GET", "/auth/me")
        return CurrentUser(**response)

    # ---- Hotels ----

    async def create_hotel(self, hotel_input: dict[str, Any]) -> HotelCreateResult:
        """Create a hotel.

        Args:
            hotel_input: snake_case hotel payload

        Returns:
            Created hotel id and name

        Raises:
            HotelCMSClientError: If the request fails or the response has no id
        """
        response = await self._make_request("POST", "/hotels", data=hotel_input)
        body = response.get("data") if isinstance(response, dict) else None
        if not isinstance(body, dict) or not response.get("success") or not isinstance(body.get("hotelId"), int):
            raise HotelCMSClientError(
                "Failed to process hotel creation response: Unexpected data structure from server."
            )
        logger.info("Created hotel", hotel_id=body["hotelId"])
        return HotelCreateResult(
            success=True,
            hotel_id=body["hotelId"],
            name=hotel_input.get("name") or body.get("name"),
        )

    async def update_hotel(self, hotel_id: int, hotel_input: dict[str, Any]) -> dict[str, Any]:
        return await self._make_request("PUT", f"/hotels/{hotel_id}", data=hotel_input, hotel_id=hotel_id)

    async def get_hotel_by_id(self, hotel_id: int) -> dict[str, Any]:
        """Fetch the hotel row, unwrapping a `data` envelope when present."""
        response = await self._make_request("GET", f"/hotels/{hotel_id}", hotel_id=hotel_id)
        if isinstance(response.get("data"), dict):
            return response["data"]
        return response

    async def get_full_hotel_details(self, hotel_id: int) -> dict[str, Any]:
        """Fetch the hotel aggregate (hotel, rooms, categories, handling, events, spaces, F&B)."""
        response = await self._make_request("GET", f"/hotels/{hotel_id}/full", hotel_id=hotel_id)
        return response.get("data") or {}

    async def upsert_food_beverage_details(self, hotel_id: int, details: dict[str, Any]) -> dict[str, Any]:
        return await self._make_request(
            "POST", f"/hotels/{hotel_id}/fb/details", data=details, hotel_id=hotel_id
        )

    # ---- Rooms ----

    async def create_room(self, room_config: dict[str, Any]) -> RoomConfigResult:
        """Create or replace the main room configuration of a hotel."""
        response = await self._make_request(
            "POST", "/rooms", data=room_config, hotel_id=room_config.get("hotel_id")
        )
        return RoomConfigResult(**response)

    async def add_categories_to_room(
        self, room_id: int, categories: list[dict[str, Any]]
    ) -> CategoriesResult:
        response = await self._make_request("POST", f"/rooms/{room_id}/categories", data=categories)
        return CategoriesResult(**response)

    async def get_room_categories(self, room_id: int) -> list[dict[str, Any]]:
        response = await self._make_request("GET", f"/rooms/types/{room_id}/categories")
        if isinstance(response, dict):
            return response.get("data") or []
        return response

    async def update_room_category(self, category_id: int, category: dict[str, Any]) -> dict[str, Any]:
        return await self._make_request("PUT", f"/rooms/categories/{category_id}", data=category)

    async def delete_room_category(self, category_id: int) -> dict[str, Any]:
        return await self._make_request("DELETE", f"/rooms/categories/{category_id}")

    async def create_or_update_room_operational_handling(
        self, room_id: int, handling: dict[str, Any]
    ) -> dict[str, Any]:
        return await self._make_request("POST", f"/rooms/{room_id}/handling", data=handling)

    # ---- Events ----

    async def create_event(self, event_input: dict[str, Any]) -> EventCreateResult:
        response = await self._make_request(
            "POST", "/events", data=event_input, hotel_id=event_input.get("hotel_id")
        )
        return EventCreateResult(**response)

    async def update_event(self, event_id: int, event_input: dict[str, Any]) -> dict[str, Any]:
        return await self._make_request("PUT", f"/events/{event_id}", data=event_input)

    async def get_events_by_hotel_id(self, hotel_id: int) -> list[dict[str, Any]]:
        response = await self._make_request("GET", f"/events/hotel/{hotel_id}", hotel_id=hotel_id)
        return response if isinstance(response, list) else response.get("data") or []

    async def get_event_by_id(self, event_id: int) -> dict[str, Any]:
        return await self._make_request("GET", f"/events/{event_id}")

    async def _get_event_section(self, event_id: int, section: str) -> Any:
        return await self._make_request("GET", f"/events/{event_id}/{section}")

    async def get_event_booking(self, event_id: int) -> dict[str, Any]:
        return await self._get_event_section(event_id, "booking")

    async def get_event_operations(self, event_id: int) -> dict[str, Any]:
        return await self._get_event_section(event_id, "operations")

    async def get_event_financials(self, event_id: int) -> dict[str, Any]:
        return await self._get_event_section(event_id, "financials")

    async def get_event_equipment(self, event_id: int) -> list[dict[str, Any]]:
        return await self._get_event_section(event_id, "equipment")

    async def get_event_technical_info(self, event_id: int) -> dict[str, Any]:
        return await self._get_event_section(event_id, "technical")

    async def get_event_contracting_info(self, event_id: int) -> dict[str, Any]:
        return await self._get_event_section(event_id, "contracting")

    async def get_event_spaces(self, event_id: int) -> list[dict[str, Any]]:
        return await self._get_event_section(event_id, "spaces")

    async def _upsert_event_section(self, event_id: int, section: str, payload: Any) -> dict[str, Any]:
        return await self._make_request("POST", f"/events/{event_id}/{section}", data=payload)

    async def upsert_booking(self, event_id: int, booking: dict[str, Any]) -> dict[str, Any]:
        return await self._upsert_event_section(event_id, "booking", booking)

    async def upsert_operations(self, event_id: int, operations: dict[str, Any]) -> dict[str, Any]:
        return await self._upsert_event_section(event_id, "operations", operations)

    async def upsert_financials(self, event_id: int, financials: dict[str, Any]) -> dict[str, Any]:
        return await self._upsert_event_section(event_id, "financials", financials)

    async def upsert_equipment(self, event_id: int, equipment: list[dict[str, Any]]) -> dict[str, Any]:
        return await self._upsert_event_section(event_id, "equipment", equipment)

    async def upsert_spaces(self, event_id: int, spaces: list[dict[str, Any]]) -> dict[str, Any]:
        return await self._upsert_event_section(event_id, "spaces", spaces)

    async def create_or_update_event_technical_info(
        self, event_id: int, technical: dict[str, Any]
    ) -> dict[str, Any]:
        return await self._upsert_event_section(event_id, "technical", technical)

    # ---- Information policies ----

    async def create_information_policy(self, policy: dict[str, Any]) -> dict[str, Any]:
        return await self._make_request("POST", "/information-policies", data=policy)

    async def update_information_policy(self, policy_id: int, policy: dict[str, Any]) -> dict[str, Any]:
        return await self._make_request("PATCH", f"/information-policies/{policy_id}", data=policy)

    async def get_information_policies_by_hotel(self, system_hotel_id: str) -> list[dict[str, Any]]:
        response = await self._make_request("GET", f"/information-policies/hotel/{system_hotel_id}")
        if isinstance(response, dict):
            return response.get("data") or []
        return response

    # ---- Approval workflow and files ----

    async def submit_changes(
        self,
        entry_id: int,
        entry_type: str,
        change_data: dict[str, Any],
        original_data: dict[str, Any],
    ) -> dict[str, Any]:
        """Submit an edit for approval instead of applying it directly."""
        return await self._make_request(
            "POST",
            "/approval/submit",
            data={
                "entryId": entry_id,
                "entryType": entry_type,
                "changeData": change_data,
                "originalData": original_data,
            },
            hotel_id=entry_id if entry_type == "hotel" else None,
        )

    async def assign_temporary_files(self, entity_type: str, entity_id: int) -> AssignFilesResult:
        """Move files uploaded before the entity existed onto the entity."""
        response = await self._make_request("POST", f"/files/assign/{entity_type}/{entity_id}", data={})
        return AssignFilesResult(**response)

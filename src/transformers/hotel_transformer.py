"""Transformer between the hotel step form (camelCase) and the CMS hotel payload (snake_case)."""

from typing import Any

from structlog import get_logger

logger = get_logger(__name__)


# (form field, API field) pairs that map one-to-one
HOTEL_FIELD_MAP: tuple[tuple[str, str], ...] = (
    ("name", "name"),
    ("street", "street"),
    ("postalCode", "postal_code"),
    ("city", "city"),
    ("country", "country"),
    ("phone", "phone"),
    ("fax", "fax"),
    ("email", "email"),
    ("website", "website"),
    ("description", "description"),
    ("billingAddressName", "billing_address_name"),
    ("billingAddressStreet", "billing_address_street"),
    ("billingAddressZip", "billing_address_zip"),
    ("billingAddressCity", "billing_address_city"),
    ("billingAddressVat", "billing_address_vat"),
    ("externalBillingId", "external_billing_id"),
    ("generalManagerName", "general_manager_name"),
    ("generalManagerPhone", "general_manager_phone"),
    ("generalManagerEmail", "general_manager_email"),
    ("starRating", "star_rating"),
    ("category", "category"),
    ("totalRooms", "total_rooms"),
    ("conferenceRooms", "conference_rooms"),
    ("pmsSystem", "pms_system"),
    ("distanceToAirportKm", "distance_to_airport_km"),
    ("distanceToHighwayKm", "distance_to_highway_km"),
    ("distanceToFairKm", "distance_to_fair_km"),
    ("distanceToTrainStation", "distance_to_train_station"),
    ("distanceToPublicTransport", "distance_to_public_transport"),
    ("noOfParkingSpaces", "no_of_parking_spaces"),
    ("noOfParkingSpacesGarage", "no_of_parking_spaces_garage"),
    ("noOfParkingSpacesElectric", "no_of_parking_spaces_electric"),
    ("noOfParkingSpacesBus", "no_of_parking_spaces_bus"),
    ("noOfParkingSpacesOutside", "no_of_parking_spaces_outside"),
    ("noOfParkingSpacesDisabled", "no_of_parking_spaces_disabled"),
    ("parkingCostPerHour", "parking_cost_per_hour"),
    ("parkingCostPerDay", "parking_cost_per_day"),
    ("parkingRemarks", "parking_remarks"),
    ("openingTimePool", "opening_time_pool"),
    ("openingTimeFitnessCenter", "opening_time_fitness_center"),
    ("equipmentFitnessCenter", "equipment_fitness_center"),
    ("openingTimeSpaArea", "opening_time_spa_area"),
    ("equipmentSpaArea", "equipment_spa_area"),
    ("attractionInTheArea", "attraction_in_the_area"),
    ("plannedChanges", "planned_changes"),
)


def drop_empty(payload: dict[str, Any]) -> dict[str, Any]:
    """Remove keys whose value is None or an empty string."""
    return {key: value for key, value in payload.items() if value is not None and value != ""}


class HotelTransformer:
    """Maps the hotel step between form and API shapes."""

    @staticmethod
    def to_api(form: dict[str, Any]) -> dict[str, Any]:
        """Build the POST/PUT /hotels payload from hotel step data.

        Args:
            form: Hotel step data in form (camelCase) field names

        Returns:
            snake_case payload without empty values
        """
        payload: dict[str, Any] = {"system_hotel_id": form.get("systemHotelId")}
        for form_key, api_key in HOTEL_FIELD_MAP:
            payload[api_key] = form.get(form_key)

        payload["opening_year"] = form.get("openingDate")
        payload["latest_renovation_year"] = form.get("latestRenovationDate")

        links = form.get("additionalLinks")
        if links is not None:
            payload["additional_links"] = [
                {"name": link.get("name"), "link": link.get("link")}
                for link in links
                if link.get("name") or link.get("link")
            ]

        return drop_empty(payload)

    @staticmethod
    def from_api(hotel: dict[str, Any] | None) -> dict[str, Any]:
        """Convert a backend hotel record into hotel step data.

        Args:
            hotel: Hotel row as returned by the CMS, or None

        Returns:
            camelCase hotel step data ({} when hotel is missing)
        """
        if not hotel:
            return {}

        form: dict[str, Any] = {
            "id": hotel.get("id"),
            "systemHotelId": hotel.get("system_hotel_id") or hotel.get("hotel_id"),
        }
        for form_key, api_key in HOTEL_FIELD_MAP:
            form[form_key] = hotel.get(api_key)

        form["openingDate"] = hotel.get("opening_year") or hotel.get("opening_date")
        form["latestRenovationDate"] = (
            hotel.get("latest_renovation_year") or hotel.get("latest_renovation_date")
        )
        form["parkingRemarks"] = hotel.get("parking_remarks") or ""
        form["additionalLinks"] = hotel.get("additional_links") or []

        logger.debug("Hydrated hotel step", hotel_id=hotel.get("id"))
        return form

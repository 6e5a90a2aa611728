"""Transformers for the room steps: main room configuration, categories and operational handling."""

import json
from typing import Any, Optional

from structlog import get_logger

from src.transformers.hotel_transformer import drop_empty

logger = get_logger(__name__)


# Room info form field -> main room config API field
ROOM_INFO_FIELD_MAP: tuple[tuple[str, str], ...] = (
    ("main_contact_name_room", "main_contact_name"),
    ("main_contact_position_room", "main_contact_position"),
    ("reception_hours", "reception_hours"),
    ("room_phone", "phone"),
    ("room_email", "email"),
    ("check_in_time", "check_in"),
    ("check_out_time", "check_out"),
    ("early_checkin_fee", "early_check_in_cost"),
    ("early_checkin_fee_type", "early_check_in_fee_type"),
    ("late_checkout_fee", "late_check_out_cost"),
    ("early_check_in_time_frame", "early_check_in_time_frame"),
    ("late_check_out_tme", "late_check_out_time"),
    ("single_rooms", "amt_single_rooms"),
    ("double_rooms", "amt_double_rooms"),
    ("connected_rooms", "amt_connecting_rooms"),
    ("accessible_rooms", "amt_handicapped_accessible_rooms"),
    ("dog_fee_type", "dog_fee_type"),
    ("dog_fee_inclusions", "dog_fee_inclusions"),
)

# Operational handling columns the forms render as switches
HANDLING_TOGGLE_FIELDS: frozenset[str] = frozenset(
    {
        "demand_calendar",
        "revenue_call",
        "group_rates_check",
        "breakfast_share",
        "first_second_option",
        "shared_options",
        "overbooking",
        "min_stay_weekends",
        "call_off_quota",
        "handled_by_mice_desk",
        "requires_deposit",
        "info_invoice_created",
    }
)

CATEGORY_TOGGLE_FIELDS: frozenset[str] = frozenset(
    {"baby_bed_available", "extra_bed_available", "is_accessible", "has_balcony"}
)


def safe_int(value: Any) -> Optional[int]:
    """Parse an int from form input; blank or unparsable values become None."""
    if value is None or str(value).strip() == "":
        return None
    try:
        return int(float(str(value).strip()))
    except ValueError:
        return None


def safe_float(value: Any) -> Optional[float]:
    """Parse a float from form input; blank or unparsable values become None."""
    if value is None or str(value).strip() == "":
        return None
    try:
        return float(str(value).strip())
    except ValueError:
        return None


def toggles_to_bool(record: dict[str, Any], fields: frozenset[str]) -> dict[str, Any]:
    """Turn backend 0/1 integer flags into booleans for the given toggle fields."""
    out = dict(record)
    for field in fields:
        if field in out and out[field] in (0, 1) and not isinstance(out[field], bool):
            out[field] = bool(out[field])
    return out


def _bool_or_none(value: Any) -> Optional[bool]:
    return value if isinstance(value, bool) else None


class RoomTransformer:
    """Maps room step data to and from the CMS room endpoints."""

    @staticmethod
    def room_info_to_api(hotel_id: int, form: dict[str, Any]) -> dict[str, Any]:
        """Build the POST /rooms payload.

        Args:
            hotel_id: Parent hotel id
            form: roomInfo step data

        Returns:
            Main room configuration payload
        """
        payload: dict[str, Any] = {"hotel_id": hotel_id}
        for form_key, api_key in ROOM_INFO_FIELD_MAP:
            payload[api_key] = form.get(form_key)
        payload["payment_methods"] = form.get("payment_methods") or []
        payload["standard_features"] = form.get("standard_features") or []
        payload["is_dogs_allowed"] = form.get("dogs_allowed") or False
        payload["dog_fee"] = form.get("dog_fee") or 0
        return {key: value for key, value in payload.items() if value is not None}

    @staticmethod
    def room_info_from_api(room: dict[str, Any] | None) -> dict[str, Any]:
        """Flatten a room aggregate (contacts, policies, inventory, pet policies) into roomInfo step data."""
        if not room:
            return {}

        form: dict[str, Any] = {
            "main_contact_name_room": room.get("main_contact_name"),
            "main_contact_position_room": room.get("main_contact_position"),
            "reception_hours": room.get("reception_hours"),
        }

        contacts = room.get("contacts")
        if contacts:
            form["room_phone"] = contacts.get("phone")
            form["room_email"] = contacts.get("email")

        policies = room.get("policies")
        if policies:
            form["check_in_time"] = policies.get("check_in")
            form["check_out_time"] = policies.get("check_out")
            form["early_checkin_fee"] = policies.get("early_check_in_cost")
            form["late_checkout_fee"] = policies.get("late_check_out_cost")
            form["early_check_in_time_frame"] = policies.get("early_check_in_time_frame")
            form["late_check_out_tme"] = policies.get("late_check_out_time")
            form["payment_methods"] = policies.get("payment_methods") or []

        inventory = room.get("inventory")
        if inventory:
            form["single_rooms"] = inventory.get("amt_single_rooms")
            form["double_rooms"] = inventory.get("amt_double_rooms")
            form["connected_rooms"] = inventory.get("amt_connecting_rooms")
            form["accessible_rooms"] = inventory.get("amt_handicapped_accessible_rooms")

        pet_policies = room.get("pet_policies")
        if pet_policies:
            dogs_allowed = pet_policies.get("is_dogs_allowed")
            form["dogs_allowed"] = bool(dogs_allowed) if dogs_allowed is not None else None
            form["dog_fee"] = pet_policies.get("dog_fee")
            form["dog_fee_inclusions"] = pet_policies.get("dog_fee_inclusions")

        if isinstance(room.get("standard_features"), list):
            form["standard_features"] = room["standard_features"]

        return form

    @staticmethod
    def category_to_api(category: dict[str, Any]) -> dict[str, Any]:
        """Build one room category payload, coercing numeric form input."""
        payload = {
            "category_name": category.get("category_name"),
            "pms_name": category.get("pms_name"),
            "num_rooms": safe_int(category.get("num_rooms")),
            "size": safe_int(category.get("size")),
            "bed_type": category.get("bed_type"),
            "surcharges_upsell": category.get("surcharges_upsell"),
            "room_features": category.get("room_features"),
            "second_person_surcharge": safe_float(category.get("second_person_surcharge")),
            "extra_bed_surcharge": safe_float(category.get("extra_bed_surcharge")),
            "baby_bed_available": _bool_or_none(category.get("baby_bed_available")),
            "extra_bed_available": _bool_or_none(category.get("extra_bed_available")),
            "is_accessible": _bool_or_none(category.get("isAccessible")),
            "has_balcony": _bool_or_none(category.get("hasBalcony")),
        }
        return {key: value for key, value in payload.items() if value is not None}

    @staticmethod
    def categories_from_api(categories: list[dict[str, Any]]) -> list[dict[str, Any]]:
        return [toggles_to_bool(category, CATEGORY_TOGGLE_FIELDS) for category in categories]

    @staticmethod
    def handling_from_api(handling: dict[str, Any] | None) -> dict[str, Any]:
        """Convert an operational handling row into roomHandling step data.

        Args:
            handling: room_operational_handling row, or None

        Returns:
            Step data with boolean toggles and a decoded payment method list
        """
        if not handling:
            return {}

        form = toggles_to_bool(handling, HANDLING_TOGGLE_FIELDS)
        methods = form.get("payment_methods_room_handling")
        if isinstance(methods, str):
            try:
                form["payment_methods_room_handling"] = json.loads(methods)
            except ValueError:
                logger.warning(
                    "Could not decode payment_methods_room_handling",
                    room_id=handling.get("room_id"),
                )
        return form

    @staticmethod
    def handling_to_api(form: dict[str, Any]) -> dict[str, Any]:
        return drop_empty(form)

"""Transformers for the event steps (eventsInfo and eventSpaces)."""

from typing import Any

from structlog import get_logger

logger = get_logger(__name__)


CONTACT_FIELDS: tuple[str, ...] = (
    "contact_name",
    "contact_phone",
    "contact_email",
    "contact_position",
)


class EventTransformer:
    """Maps event step data to the CMS event endpoints and back."""

    @staticmethod
    def contact_to_api(hotel_id: int, events_info: dict[str, Any]) -> dict[str, Any]:
        """Build the POST/PUT /events payload from the contact block.

        Args:
            hotel_id: Parent hotel id
            events_info: eventsInfo step data

        Returns:
            Event payload; missing contact fields are sent as empty strings
        """
        contact = events_info.get("contact") or {}
        payload: dict[str, Any] = {"hotel_id": hotel_id}
        for field in CONTACT_FIELDS:
            payload[field] = contact.get(field) or ""
        return payload

    @staticmethod
    def equipment_to_api(items: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Normalize equipment rows to {equipment_name, quantity, price}."""
        return [
            {
                "equipment_name": item.get("equipment_name") or item.get("name") or "",
                "quantity": item.get("quantity") or 0,
                "price": item.get("price_per_unit") or item.get("price") or 0,
            }
            for item in items
        ]

    @staticmethod
    def spaces_to_api(spaces: list[dict[str, Any]], keep_existing_ids: bool) -> list[dict[str, Any]]:
        """Prepare event spaces for the bulk upsert.

        Spaces loaded from the backend carry integer ids; spaces added in the
        form carry temporary string ids. Temporary ids are always removed.

        Args:
            spaces: eventSpaces step data
            keep_existing_ids: Keep integer ids so the backend updates those rows

        Returns:
            Space payloads
        """
        prepared = []
        for space in spaces:
            space_id = space.get("id")
            keep = keep_existing_ids and isinstance(space_id, int) and not isinstance(space_id, bool)
            if keep:
                prepared.append(dict(space))
            else:
                prepared.append({key: value for key, value in space.items() if key != "id"})
        return prepared

    @staticmethod
    def sub_records(events_info: dict[str, Any]) -> dict[str, Any]:
        """Non-empty sub-record sections of the eventsInfo step, in upsert order."""
        sections: dict[str, Any] = {}
        for section in ("booking", "operations", "financials"):
            if events_info.get(section):
                sections[section] = events_info[section]
        if events_info.get("equipment"):
            sections["equipment"] = EventTransformer.equipment_to_api(events_info["equipment"])
        if events_info.get("technical"):
            sections["technical"] = events_info["technical"]
        return sections

    @staticmethod
    def events_info_from_api(sections: dict[str, Any]) -> dict[str, Any]:
        """Assemble eventsInfo step data from the per-section event responses.

        Args:
            sections: Section name to fetched value, or an exception for a failed fetch

        Returns:
            eventsInfo step data; failed or malformed sections become empty
        """
        info: dict[str, Any] = {}
        for section in ("contact", "booking", "operations", "financials", "technical", "contracting"):
            value = sections.get(section)
            info[section] = value if isinstance(value, dict) else {}
        for section in ("equipment", "spaces"):
            value = sections.get(section)
            info[section] = value if isinstance(value, list) else []

        failed = [name for name, value in sections.items() if isinstance(value, BaseException)]
        if failed:
            logger.warning("Some event sections could not be loaded", sections=failed)
        return info

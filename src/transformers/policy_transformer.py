"""Transformer for the informationPolicies step."""

from typing import Any, Optional


class PolicyTransformer:
    """Maps information policy step data to POST /information-policies payloads."""

    @staticmethod
    def as_list(step_value: Any) -> list[dict[str, Any]]:
        """The policy form submits one policy; stored step data may hold several."""
        if not step_value:
            return []
        if isinstance(step_value, dict):
            return [step_value]
        return [policy for policy in step_value if policy]

    @staticmethod
    def system_hotel_id(policies: list[dict[str, Any]], hotel_form: dict[str, Any]) -> Optional[str]:
        """External hotel id for the policies: taken from the policy form, else the hotel step."""
        for policy in policies:
            if policy.get("system_hotel_id"):
                return str(policy["system_hotel_id"])
        if hotel_form.get("systemHotelId"):
            return str(hotel_form["systemHotelId"])
        return None

    @staticmethod
    def existing_id(policy: dict[str, Any]) -> Optional[int]:
        """Backend id of a policy that was loaded for edit, None for a new one."""
        policy_id = policy.get("id")
        if isinstance(policy_id, int) and not isinstance(policy_id, bool):
            return policy_id
        return None

    @staticmethod
    def to_api(policy: dict[str, Any], system_hotel_id: str) -> dict[str, Any]:
        return {
            "system_hotel_id": system_hotel_id,
            "type": policy.get("type") or "room_information",
            "items": policy.get("items") or [],
        }

    @staticmethod
    def to_update_api(policy: dict[str, Any]) -> dict[str, Any]:
        """PATCH body for an existing policy; its system hotel id cannot change."""
        return {
            "type": policy.get("type") or "room_information",
            "items": policy.get("items") or [],
        }

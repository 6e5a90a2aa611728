"""Hydration of wizard state from a backend hotel aggregate (edit mode)."""

from typing import Any, Optional, Union

from pydantic import BaseModel, Field
from structlog import get_logger

from src.models.cms import FullHotelDetails
from src.models.wizard import WizardStep
from src.transformers.hotel_transformer import HotelTransformer
from src.transformers.room_transformer import RoomTransformer

logger = get_logger(__name__)


class HydratedState(BaseModel):
    """Wizard state derived from an aggregate."""

    step_data: dict[str, Any] = Field(default_factory=dict)
    completion: dict[str, bool] = Field(default_factory=dict)
    room_config_id: Optional[int] = None
    event_id: Optional[int] = None


class HydrationTransformer:
    """Turns a FullHotelDetails aggregate into step data and completion flags."""

    @staticmethod
    def from_aggregate(aggregate: Union[FullHotelDetails, dict[str, Any]]) -> HydratedState:
        """Build wizard state for edit mode.

        Missing sections yield empty step values. The completion map is a
        best-effort guess from which sections are present: a hotel with a
        total_rooms count counts as having room categories, for instance,
        even when none were ever submitted through the wizard.

        Args:
            aggregate: Aggregate model or its raw JSON dict

        Returns:
            HydratedState with step data keyed by step name
        """
        if isinstance(aggregate, dict):
            aggregate = FullHotelDetails.model_validate(aggregate)

        hotel = aggregate.hotel or {}
        first_room = aggregate.rooms[0] if aggregate.rooms else None
        handling_row = HydrationTransformer._handling_row(aggregate)
        events_info = aggregate.events_info or {}
        event_spaces = aggregate.event_spaces or list(events_info.get("spaces") or [])

        step_data: dict[str, Any] = {
            WizardStep.HOTEL.value: HotelTransformer.from_api(aggregate.hotel),
            WizardStep.ROOM_INFO.value: RoomTransformer.room_info_from_api(first_room),
            WizardStep.ROOM_CATEGORIES.value: RoomTransformer.categories_from_api(
                aggregate.room_categories
            ),
            WizardStep.ROOM_HANDLING.value: RoomTransformer.handling_from_api(handling_row),
            WizardStep.EVENTS_INFO.value: dict(events_info),
            WizardStep.EVENT_SPACES.value: list(event_spaces),
            WizardStep.FOOD_BEVERAGE.value: dict(aggregate.fnb or {}),
            WizardStep.INFORMATION_POLICIES.value: list(aggregate.information_policies),
        }

        completion = {
            WizardStep.HOTEL.value: bool(aggregate.hotel),
            WizardStep.ROOM_INFO.value: bool(
                aggregate.rooms or hotel.get("total_rooms") or hotel.get("conference_rooms")
            ),
            WizardStep.ROOM_CATEGORIES.value: bool(
                aggregate.room_categories or hotel.get("total_rooms")
            ),
            WizardStep.ROOM_HANDLING.value: bool(
                handling_row or hotel.get("check_in_time") or hotel.get("check_out_time")
            ),
            WizardStep.EVENTS_INFO.value: bool(events_info or hotel.get("conference_rooms")),
            WizardStep.EVENT_SPACES.value: bool(event_spaces),
            WizardStep.FOOD_BEVERAGE.value: bool(aggregate.fnb),
            WizardStep.INFORMATION_POLICIES.value: bool(aggregate.information_policies),
        }

        room_config_id = first_room.get("id") if first_room else None
        event_id = aggregate.events[0].get("id") if aggregate.events else None

        logger.debug(
            "Hydrated wizard state",
            hotel_id=hotel.get("id"),
            room_config_id=room_config_id,
            event_id=event_id,
            completed=[step for step, done in completion.items() if done],
        )

        return HydratedState(
            step_data=step_data,
            completion=completion,
            room_config_id=room_config_id,
            event_id=event_id,
        )

    @staticmethod
    def _handling_row(aggregate: FullHotelDetails) -> Optional[dict[str, Any]]:
        operational = aggregate.room_operational
        if isinstance(operational, list):
            return operational[0] if operational else aggregate.room_handling
        if isinstance(operational, dict) and operational:
            return operational
        return aggregate.room_handling

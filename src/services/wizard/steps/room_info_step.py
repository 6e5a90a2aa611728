"""Step: main room configuration."""

from src.models.wizard import WizardStep
from src.services.wizard.base_handler import StepHandler
from src.services.wizard.context import DispatchContext
from src.transformers import RoomTransformer


class RoomInfoStep(StepHandler):
    """Creates or replaces the hotel's main room configuration and records its id."""

    step = WizardStep.ROOM_INFO
    parent_id = "hotel_id"
    missing_parent_message = "Hotel ID not found. Please complete the Hotel step first."

    async def execute(self, context: DispatchContext) -> bool:
        if not context.data:
            context.info("Skipping Main Room Configuration save (no data provided).")
            return True

        payload = RoomTransformer.room_info_to_api(context.session.ids.hotel_id, context.data)

        try:
            result = await context.client.create_room(payload)
        except Exception as e:
            context.error(f"Failed to save Main Room Configuration: {str(e)}")
            return False

        if result.room_id is None:
            context.error("Failed to save Main Room Configuration: No Room ID returned.")
            return False

        context.session.ids.room_config_id = result.room_id
        context.success(f"Main Room Configuration saved (ID: {result.room_id}).")
        return True

"""Step: room operational handling."""

from src.models.wizard import WizardStep
from src.services.wizard.base_handler import StepHandler
from src.services.wizard.context import DispatchContext
from src.transformers import RoomTransformer


class RoomHandlingStep(StepHandler):
    """Upserts the operational-handling record of the main room configuration."""

    step = WizardStep.ROOM_HANDLING
    parent_id = "room_config_id"
    missing_parent_message = (
        "Main Room Configuration ID not found. Please complete the Room Info step."
    )

    async def execute(self, context: DispatchContext) -> bool:
        if not context.data:
            context.info("Skipping room handling (no handling data).")
            return True

        room_id = context.session.ids.room_config_id
        try:
            await context.client.create_or_update_room_operational_handling(
                room_id, RoomTransformer.handling_to_api(context.data)
            )
        except Exception as e:
            context.error(f"Failed to save room handling: {str(e)}")
            return False

        context.success(f"Handling info for Room ID {room_id} saved.")
        return True

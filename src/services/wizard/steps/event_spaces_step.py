"""Step: event spaces."""

from src.models.wizard import WizardStep
from src.services.wizard.base_handler import StepHandler
from src.services.wizard.context import DispatchContext
from src.transformers import EventTransformer


class EventSpacesStep(StepHandler):
    """Bulk-upserts the event spaces of the session's event."""

    step = WizardStep.EVENT_SPACES
    parent_id = "event_id"
    missing_parent_message = "Event ID not found. Please complete the Event Info step first."

    async def execute(self, context: DispatchContext) -> bool:
        spaces = context.data or []
        if not spaces:
            context.info("No event spaces to save.")
            return True

        payload = EventTransformer.spaces_to_api(spaces, keep_existing_ids=context.is_edit)
        try:
            await context.client.upsert_spaces(context.session.ids.event_id, payload)
        except Exception as e:
            context.error(f"Error in event spaces step: {str(e)}")
            return False

        verb = "processed" if context.is_edit else "created"
        context.success(f"{len(payload)} event spaces {verb} successfully.")
        return True

"""Step: food and beverage details."""

from src.config import settings
from src.models.wizard import WizardStep
from src.services.wizard.base_handler import StepHandler
from src.services.wizard.context import DispatchContext


class FoodBeverageStep(StepHandler):
    """Upserts the F&B detail aggregate.

    When onboarding a new hotel this is where the wizard ends: a successful
    save finishes the run and points the caller at the hotel view. An empty
    submission in that mode neither finishes nor advances.
    """

    step = WizardStep.FOOD_BEVERAGE
    parent_id = "hotel_id"
    missing_parent_message = "Hotel ID not found. Cannot save F&B details."

    async def execute(self, context: DispatchContext) -> bool:
        if not context.data:
            context.info("Skipping F&B (no data).")
            if not context.is_edit:
                context.hold()
            return True

        hotel_id = context.session.ids.hotel_id
        try:
            await context.client.upsert_food_beverage_details(hotel_id, context.data)
        except Exception as e:
            context.error(f"Failed to save F&B details: {str(e)}")
            return False

        if context.is_edit:
            context.success("F&B details saved successfully.")
        else:
            context.success("F&B details saved successfully! Redirecting to hotel view...")
            context.finish(redirect_to=settings.hotel_view_url(hotel_id))
        return True

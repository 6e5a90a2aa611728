"""Step: room categories of the main room configuration."""

from typing import Any

from src.models.wizard import WizardStep
from src.services.wizard.base_handler import StepHandler
from src.services.wizard.context import DispatchContext
from src.transformers import RoomTransformer


class RoomCategoriesStep(StepHandler):
    """Adds new categories in bulk.

    In edit mode the categories already stored are synced first: those
    removed from the form are deleted and those carrying an id are updated.
    Nothing is rolled back if a later call fails.
    """

    step = WizardStep.ROOM_CATEGORIES
    parent_id = "room_config_id"
    missing_parent_message = (
        "Main Room Configuration ID not found. Please complete the Room Info step."
    )

    async def execute(self, context: DispatchContext) -> bool:
        categories: list[dict[str, Any]] = context.data or []
        if not categories:
            context.info("Skipping category addition (no categories provided).")
            return True

        room_id = context.session.ids.room_config_id
        existing = [category for category in categories if category.get("id")]
        new = [category for category in categories if not category.get("id")]

        if context.is_edit:
            try:
                deleted = await self._sync_existing(context, room_id, existing)
            except Exception as e:
                context.error(f"Failed to update room categories: {str(e)}")
                return False
            context.success(
                f"Updated {len(existing)} categories and deleted {deleted} categories."
            )

        if new:
            payload = [RoomTransformer.category_to_api(category) for category in new]
            try:
                result = await context.client.add_categories_to_room(room_id, payload)
            except Exception as e:
                context.error(f"Failed to add Room Categories: {str(e)}")
                return False
            context.success(
                f"{len(result.created_categories)} new categories added to Room ID {room_id}."
            )

        return True

    @staticmethod
    async def _sync_existing(
        context: DispatchContext, room_id: int, existing: list[dict[str, Any]]
    ) -> int:
        """Delete stored categories missing from the form and update the rest. Returns the delete count."""
        original = await context.client.get_room_categories(room_id)
        kept_ids = {category["id"] for category in existing}
        to_delete = [
            category for category in original
            if category.get("id") and category["id"] not in kept_ids
        ]

        for category in to_delete:
            await context.client.delete_room_category(category["id"])

        for category in existing:
            await context.client.update_room_category(
                category["id"], RoomTransformer.category_to_api(category)
            )

        return len(to_delete)

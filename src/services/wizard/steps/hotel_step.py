"""Step: create, update or submit the hotel record for approval."""

from typing import Optional

from src.config import settings
from src.models.wizard import WizardSession, WizardStep
from src.services.wizard.base_handler import StepHandler
from src.services.wizard.context import DispatchContext
from src.transformers import HotelTransformer


class HotelStep(StepHandler):
    """Persists the hotel step.

    Without a hotel id the hotel is created and the returned id is written
    back into the session and into the hotel step data. With an id the hotel
    is updated, or the change is submitted for approval when the caller may
    only edit with approval. Temporary uploads are then reassigned to the
    hotel; that call never fails the step.
    """

    step = WizardStep.HOTEL

    def precondition_error(self, session: WizardSession) -> Optional[str]:
        hotel_form = session.data.committed(self.step) or {}
        if not hotel_form.get("name"):
            return "Hotel name is required."
        return None

    async def execute(self, context: DispatchContext) -> bool:
        hotel_input = HotelTransformer.to_api(context.data)
        session = context.session

        if session.ids.hotel_id is None:
            try:
                created = await context.client.create_hotel(hotel_input)
            except Exception as e:
                context.error(f"Failed to create hotel: {str(e)}")
                return False

            session.ids.hotel_id = created.hotel_id
            context.logger = context.logger.bind(hotel_id=created.hotel_id)
            updated_form = {**context.data, "id": created.hotel_id}
            session.data.set_step_data(self.step, updated_form)
            context.success(f'Hotel "{created.name}" created (ID: {created.hotel_id}).')
            await self._assign_temporary_files(context, created.hotel_id, "created")
            return True

        hotel_id = session.ids.hotel_id

        if session.requires_approval():
            try:
                original = await context.client.get_hotel_by_id(hotel_id)
                await context.client.submit_changes(
                    hotel_id, settings.wizard.approval_entry_type, hotel_input, original
                )
            except Exception as e:
                context.error(f"Failed to submit for approval: {str(e)}")
                return False
            context.success("Update request submitted for approval.")
            return True

        try:
            await context.client.update_hotel(hotel_id, hotel_input)
        except Exception as e:
            context.error(f"Failed to update hotel: {str(e)}")
            return False

        context.success(f'Hotel "{hotel_input.get("name") or "Details"}" updated (ID: {hotel_id}).')
        await self._assign_temporary_files(context, hotel_id, "updated")
        return True

    @staticmethod
    async def _assign_temporary_files(context: DispatchContext, hotel_id: int, action: str) -> None:
        try:
            result = await context.client.assign_temporary_files(
                settings.wizard.temp_files_entity_type, hotel_id
            )
        except Exception as e:
            context.warning(
                f"Hotel {action} successfully, but there was an issue with file assignment.",
                error=str(e),
            )
            return

        if result.updated_count > 0:
            context.info(f"Assigned {result.updated_count} temporary files to hotel.")

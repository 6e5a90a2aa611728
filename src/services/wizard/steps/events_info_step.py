"""Step: event contact plus booking, operations, financials, equipment and technical sub-records."""

import asyncio
from typing import Any, Awaitable, Callable

from src.models.wizard import WizardStep
from src.services.wizard.base_handler import StepHandler
from src.services.wizard.context import DispatchContext
from src.transformers import EventTransformer


class EventsInfoStep(StepHandler):
    """Creates or updates the event, then upserts its sub-records concurrently.

    A failed sub-record call is reported as a warning. This is the one
    non-blocking step: the wizard moves on to event spaces even when the
    event itself could not be saved.
    """

    step = WizardStep.EVENTS_INFO
    parent_id = "hotel_id"
    blocking = False
    missing_parent_message = "Hotel ID not found. Cannot create event."

    async def execute(self, context: DispatchContext) -> bool:
        events_info: dict[str, Any] = context.data or {}
        if not events_info:
            context.info("Skipping events info (no data).")
            return True

        session = context.session
        contact = EventTransformer.contact_to_api(session.ids.hotel_id, events_info)

        try:
            if session.ids.event_id is None:
                created = await context.client.create_event(contact)
                session.ids.event_id = created.event_id
                context.success(f"Event created (ID: {created.event_id}).")
            else:
                await context.client.update_event(session.ids.event_id, contact)
                context.success(f"Event updated (ID: {session.ids.event_id}).")
        except Exception as e:
            context.error(f"Error in events step: {str(e)}")
            return False

        if session.ids.event_id is None:
            context.error("Event saved but no event ID was returned.")
            return False

        await self._upsert_sub_records(context, session.ids.event_id, events_info)
        context.success("Event data saved, proceeding to next step.")
        return True

    @staticmethod
    async def _upsert_sub_records(
        context: DispatchContext, event_id: int, events_info: dict[str, Any]
    ) -> None:
        upserts: dict[str, Callable[[int, Any], Awaitable[Any]]] = {
            "booking": context.client.upsert_booking,
            "operations": context.client.upsert_operations,
            "financials": context.client.upsert_financials,
            "equipment": context.client.upsert_equipment,
            "technical": context.client.create_or_update_event_technical_info,
        }
        sections = EventTransformer.sub_records(events_info)
        if not sections:
            return

        names = list(sections)
        results = await asyncio.gather(
            *(upserts[name](event_id, sections[name]) for name in names),
            return_exceptions=True,
        )

        for name, outcome in zip(names, results):
            if isinstance(outcome, Exception):
                context.warning(
                    f"Failed to save {name} data but proceeding.",
                    event_id=event_id,
                    error=str(outcome),
                )

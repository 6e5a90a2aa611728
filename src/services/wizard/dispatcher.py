"""Persistence dispatcher: runs the handler for a submitted step and applies the outcome."""

from typing import Optional

from src.clients import HotelCMSClient
from src.models.wizard import DispatchResult, WizardMode, WizardSession, WizardStep
from src.services.wizard.base_handler import StepHandler
from src.services.wizard.context import DispatchContext
from src.services.wizard.sequencer import StepSequencer
from src.services.wizard.steps import (
    EventSpacesStep,
    EventsInfoStep,
    FoodBeverageStep,
    HotelStep,
    InformationPoliciesStep,
    RoomCategoriesStep,
    RoomHandlingStep,
    RoomInfoStep,
)


def default_dispatch_table() -> dict[WizardStep, StepHandler]:
    """One handler instance per wizard step."""
    handlers: list[StepHandler] = [
        HotelStep(),
        RoomInfoStep(),
        RoomCategoriesStep(),
        RoomHandlingStep(),
        EventsInfoStep(),
        EventSpacesStep(),
        FoodBeverageStep(),
        InformationPoliciesStep(),
    ]
    return {handler.step: handler for handler in handlers}


class WizardDispatcher:
    """Dispatches step submissions through a table of step handlers.

    After the handler runs the dispatcher:
    1. Sets the step's completion flag from the outcome
    2. Advances the sequencer on success, or on failure of a non-blocking step
    3. Keeps the cursor on the step after a blocking failure or a missing parent id,
       or when the handler asked to hold position
    4. Finishes the run after the last step, resetting the session in add mode
    """

    def __init__(
        self,
        client: HotelCMSClient,
        sequencer: Optional[StepSequencer] = None,
        handlers: Optional[dict[WizardStep, StepHandler]] = None,
    ):
        """Initialize the dispatcher.

        Args:
            client: Hotel CMS API client used by the handlers
            sequencer: Step sequencer; defaults to the standard step order
            handlers: Dispatch table; defaults to default_dispatch_table()
        """
        self.client = client
        self.sequencer = sequencer or StepSequencer()
        self.handlers = handlers or default_dispatch_table()

    def handler_for(self, step: WizardStep) -> StepHandler:
        return self.handlers[WizardStep(step)]

    async def dispatch(self, session: WizardSession, step: WizardStep) -> DispatchResult:
        """Persist the committed data of `step` and move the session on.

        Args:
            session: Wizard session; its committed data for `step` is submitted
            step: Step being submitted

        Returns:
            DispatchResult with notices and the navigation outcome
        """
        handler = self.handler_for(step)
        context = DispatchContext(session, self.client, handler.step)

        context.logger.info("Dispatching step", mode=session.mode.value)
        success = await handler.run(context)
        result = context.result
        result.success = success
        result.hotel_id = session.ids.hotel_id

        if success:
            session.completion.mark_complete(handler.step)
        else:
            session.completion.mark_incomplete(handler.step)

        if context.hold_position:
            context.logger.info("Step held in place")
            return result

        if context.precondition_failed or (not success and handler.blocking):
            context.logger.warning("Step not advanced", blocking=handler.blocking)
            return result

        next_step = self.sequencer.advance(handler.step)

        if result.finished or (success and next_step is None):
            self._finish(session, context)
            return result

        if next_step is None:
            return result

        session.active_step = next_step
        result.advanced = True
        result.next_step = next_step
        return result

    def _finish(self, session: WizardSession, context: DispatchContext) -> None:
        context.result.finished = True
        context.success("Hotel onboarding process completed!")
        if session.mode == WizardMode.ADD:
            session.reset()
            context.result.next_step = session.active_step
        session.finished = True
        context.logger.info(
            "Wizard finished",
            mode=session.mode.value,
            redirect_to=context.result.redirect_to,
        )

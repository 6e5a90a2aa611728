"""Base class for wizard step handlers."""

from abc import ABC, abstractmethod
from typing import Optional

from structlog import get_logger

from src.models.wizard import WizardSession, WizardStep
from src.services.wizard.context import DispatchContext

logger = get_logger(__name__)


class StepHandler(ABC):
    """Abstract base class for the per-step persistence logic.

    Each handler:
    1. Declares the parent id it needs (`parent_id`) and whether a failure
       keeps the wizard on the step (`blocking`)
    2. Implements execute(), which maps the committed step data into API
       payloads and performs the calls
    3. Writes ids and notices back through the context
    4. Returns a success boolean
    """

    step: WizardStep
    parent_id: Optional[str] = None
    blocking: bool = True
    missing_parent_message: str = "Please complete the previous step first."

    def __init__(self):
        self.name = self.step.value
        self.logger = logger.bind(step=self.name)

    def precondition_error(self, session: WizardSession) -> Optional[str]:
        """Return an error message when the step cannot be submitted yet.

        Args:
            session: Wizard session

        Returns:
            Error message, or None when the step may run
        """
        if self.parent_id and getattr(session.ids, self.parent_id) is None:
            return self.missing_parent_message
        return None

    @abstractmethod
    async def execute(self, context: DispatchContext) -> bool:
        """Persist the step.

        Args:
            context: Dispatch context for this submission

        Returns:
            True if the step succeeded, False if it failed
        """
        pass

    async def run(self, context: DispatchContext) -> bool:
        """Check preconditions, then run the step with error handling and logging.

        Args:
            context: Dispatch context

        Returns:
            True if step succeeded, False if failed
        """
        problem = self.precondition_error(context.session)
        if problem:
            context.precondition_failed = True
            context.error(problem)
            return False

        self.logger.info("Step starting", hotel_id=context.session.ids.hotel_id)

        try:
            success = await self.execute(context)

            if success:
                self.logger.info("Step completed successfully", hotel_id=context.session.ids.hotel_id)
            else:
                self.logger.warning("Step completed with failure", hotel_id=context.session.ids.hotel_id)

            return success

        except Exception as e:
            context.error(f"Error in {self.name} step: {str(e) or type(e).__name__}", exc_info=True)
            return False

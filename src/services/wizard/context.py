"""Dispatch context shared by a step handler and the dispatcher."""

from typing import Any, Optional

from structlog import get_logger

from src.clients import HotelCMSClient
from src.models.wizard import (
    DispatchResult,
    Notice,
    NoticeLevel,
    WizardMode,
    WizardSession,
    WizardStep,
)

logger = get_logger(__name__)


class DispatchContext:
    """Everything a handler needs for one step submission.

    Handlers read the session and call the API through `client`. User-visible
    messages are recorded on `result` and logged at the matching level.
    """

    def __init__(self, session: WizardSession, client: HotelCMSClient, step: WizardStep):
        """Initialize dispatch context.

        Args:
            session: Wizard session owned by the caller
            client: Hotel CMS API client
            step: Step being submitted
        """
        self.session = session
        self.client = client
        self.step = WizardStep(step)
        self.result = DispatchResult(step=self.step)
        self.precondition_failed = False
        self.hold_position = False
        self.logger = logger.bind(step=self.step.value, hotel_id=session.ids.hotel_id)

    @property
    def data(self) -> Any:
        """Committed data of the step being submitted."""
        return self.session.data.committed(self.step)

    @property
    def is_edit(self) -> bool:
        return self.session.mode == WizardMode.EDIT

    def finish(self, redirect_to: Optional[str] = None) -> None:
        """Mark the wizard run as complete after this step."""
        self.result.finished = True
        self.result.redirect_to = redirect_to

    def hold(self) -> None:
        """Keep the wizard on this step even though the submission succeeded."""
        self.hold_position = True

    def notify(self, level: NoticeLevel, message: str, **kwargs: Any) -> None:
        self.result.notices.append(Notice(level=level, step=self.step, message=message))
        log_method = {
            NoticeLevel.INFO: self.logger.info,
            NoticeLevel.SUCCESS: self.logger.info,
            NoticeLevel.WARNING: self.logger.warning,
            NoticeLevel.ERROR: self.logger.error,
        }[level]
        log_method(message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self.notify(NoticeLevel.INFO, message, **kwargs)

    def success(self, message: str, **kwargs: Any) -> None:
        self.notify(NoticeLevel.SUCCESS, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self.notify(NoticeLevel.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self.notify(NoticeLevel.ERROR, message, **kwargs)

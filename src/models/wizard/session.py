"""Pydantic models for the hotel onboarding wizard session."""

import copy
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class WizardStep(str, Enum):
    """Wizard steps, declared in rendering and default "next" order."""

    HOTEL = "hotel"
    ROOM_INFO = "roomInfo"
    ROOM_CATEGORIES = "roomCategories"
    ROOM_HANDLING = "roomHandling"
    EVENTS_INFO = "eventsInfo"
    EVENT_SPACES = "eventSpaces"
    FOOD_BEVERAGE = "foodBeverage"
    INFORMATION_POLICIES = "informationPolicies"


class WizardMode(str, Enum):
    """Whether the wizard onboards a new hotel or edits an existing one."""

    ADD = "add"
    EDIT = "edit"


STEP_SEQUENCE: tuple[WizardStep, ...] = tuple(WizardStep)

# Steps whose value is a list of records rather than a single object
LIST_STEPS: frozenset[WizardStep] = frozenset(
    {
        WizardStep.ROOM_CATEGORIES,
        WizardStep.EVENT_SPACES,
        WizardStep.INFORMATION_POLICIES,
    }
)


def empty_step_value(step: WizardStep) -> Any:
    """Initial value for a step: [] for multi-entity steps, {} otherwise."""
    return [] if step in LIST_STEPS else {}


def _initial_step_data() -> dict[str, Any]:
    return {step.value: empty_step_value(step) for step in STEP_SEQUENCE}


def _initial_completion() -> dict[str, bool]:
    return {step.value: False for step in STEP_SEQUENCE}


class StepDataStore(BaseModel):
    """Committed and live copies of the per-step form values.

    The committed copy is what gets submitted. The live copy follows every
    field change and feeds preview rendering. Values are replaced wholesale.
    """

    committed_data: dict[str, Any] = Field(default_factory=_initial_step_data)
    live_data: dict[str, Any] = Field(default_factory=_initial_step_data)

    def set_step_data(self, step: WizardStep, value: Any, live_only: bool = False) -> None:
        """Replace the value for a step.

        Args:
            step: Step to update
            value: New value for the step
            live_only: When True only the live (preview) copy is replaced
        """
        key = WizardStep(step).value
        if not live_only:
            self.committed_data[key] = copy.deepcopy(value)
        self.live_data[key] = copy.deepcopy(value)

    def committed(self, step: WizardStep) -> Any:
        return self.committed_data[WizardStep(step).value]

    def live(self, step: WizardStep) -> Any:
        return self.live_data[WizardStep(step).value]

    def reset(self) -> None:
        self.committed_data = _initial_step_data()
        self.live_data = _initial_step_data()


class CompletionTracker(BaseModel):
    """Per-step completion flags shown as progress indicators."""

    steps: dict[str, bool] = Field(default_factory=_initial_completion)

    def mark_complete(self, step: WizardStep) -> None:
        self.steps[WizardStep(step).value] = True

    def mark_incomplete(self, step: WizardStep) -> None:
        self.steps[WizardStep(step).value] = False

    def is_complete(self, step: WizardStep) -> bool:
        return self.steps[WizardStep(step).value]

    def as_dict(self) -> dict[str, bool]:
        return dict(self.steps)

    def reset(self) -> None:
        self.steps = _initial_completion()


class EntityIds(BaseModel):
    """Identifiers returned by the backend, used as foreign keys by later steps."""

    hotel_id: Optional[int] = None
    room_config_id: Optional[int] = None
    event_id: Optional[int] = None

    def reset(self) -> None:
        self.hotel_id = None
        self.room_config_id = None
        self.event_id = None


class WizardSession(BaseModel):
    """Aggregate root of one onboarding or edit run.

    Owned by the caller and handed to the dispatcher explicitly; nothing
    is kept in module-level state.
    """

    active_step: WizardStep = WizardStep.HOTEL
    mode: WizardMode = WizardMode.ADD
    ids: EntityIds = Field(default_factory=EntityIds)
    data: StepDataStore = Field(default_factory=StepDataStore)
    completion: CompletionTracker = Field(default_factory=CompletionTracker)
    permissions: list[str] = Field(default_factory=list)
    finished: bool = False

    def requires_approval(self) -> bool:
        """True when hotel edits must go through the approval workflow."""
        return "edit_with_approval" in self.permissions and "edit_all" not in self.permissions

    def reset(self) -> None:
        """Return to the initial empty state on the first step."""
        self.active_step = STEP_SEQUENCE[0]
        self.ids.reset()
        self.data.reset()
        self.completion.reset()
        self.finished = False

    def snapshot(self) -> dict[str, Any]:
        """JSON-serializable view of the session."""
        return self.model_dump(mode="json")


class NoticeLevel(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class Notice(BaseModel):
    """User-visible message produced while dispatching a step."""

    level: NoticeLevel
    step: WizardStep
    message: str


class DispatchResult(BaseModel):
    """Outcome of submitting one step."""

    step: WizardStep
    success: bool = False
    advanced: bool = False
    next_step: Optional[WizardStep] = None
    finished: bool = False
    hotel_id: Optional[int] = None
    redirect_to: Optional[str] = None
    notices: list[Notice] = Field(default_factory=list)

    def messages(self, level: NoticeLevel) -> list[str]:
        """Messages of the given level, in the order they were raised."""
        return [notice.message for notice in self.notices if notice.level == level]

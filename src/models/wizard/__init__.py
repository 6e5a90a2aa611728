"""Onboarding wizard session models."""

from src.models.wizard.session import (
    LIST_STEPS,
    STEP_SEQUENCE,
    CompletionTracker,
    DispatchResult,
    EntityIds,
    Notice,
    NoticeLevel,
    StepDataStore,
    WizardMode,
    WizardSession,
    WizardStep,
    empty_step_value,
)

__all__ = [
    "STEP_SEQUENCE",
    "LIST_STEPS",
    "WizardStep",
    "WizardMode",
    "WizardSession",
    "StepDataStore",
    "CompletionTracker",
    "EntityIds",
    "Notice",
    "NoticeLevel",
    "DispatchResult",
    "empty_step_value",
]

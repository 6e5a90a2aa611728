"""Hotel onboarding wizard: sequencing, dispatch and per-step handlers."""

from .base_handler import StepHandler
from .context import DispatchContext
from .dispatcher import WizardDispatcher, default_dispatch_table
from .sequencer import StepSequencer

__all__ = [
    "StepHandler",
    "DispatchContext",
    "WizardDispatcher",
    "default_dispatch_table",
    "StepSequencer",
]

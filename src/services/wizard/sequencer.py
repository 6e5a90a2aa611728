"""Ordered navigation over the wizard steps."""

from typing import Optional

from src.models.wizard import STEP_SEQUENCE, WizardSession, WizardStep


class StepSequencer:
    """Pure lookups over the fixed step sequence.

    Navigation is never gated on completion: any step may be visited.
    """

    def __init__(self, steps: tuple[WizardStep, ...] = STEP_SEQUENCE):
        self.steps = steps

    def index(self, step: WizardStep) -> int:
        return self.steps.index(WizardStep(step))

    def is_last(self, step: WizardStep) -> bool:
        return self.index(step) == len(self.steps) - 1

    def advance(self, step: WizardStep) -> Optional[WizardStep]:
        """Next step, or None when `step` is the last one."""
        position = self.index(step)
        if position + 1 >= len(self.steps):
            return None
        return self.steps[position + 1]

    def retreat(self, step: WizardStep) -> WizardStep:
        """Previous step; the first step retreats to itself."""
        position = self.index(step)
        return self.steps[max(position - 1, 0)]

    def jump_to(self, session: WizardSession, step: WizardStep) -> WizardSession:
        """Make `step` active. Step data and completion are left untouched."""
        session.active_step = WizardStep(step)
        return session

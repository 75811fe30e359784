"""Onboarding state machine.

The single authority for how named steps, numeric steps, and status relate.
Both the named-step and numeric-step endpoint families, the analysis run,
and activation go through this module rather than re-deriving the mapping.

    step  name                    derived status
    1     intro                   not_started
    2     collecting_evidence     in_progress
    3     waiting_for_analysis    in_progress
    4     analyzing               in_progress
    5     reviewing_brand_brain   ready
    5     complete (activated)    ready

Any transition between steps is permitted. ``is_activated`` only becomes
true through a step-5 transition that asks for activation.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from brands.domain.value_objects import NamedStep, OnboardingStatus

MIN_STEP = 1
MAX_STEP = 5
FAILED_STEP = 2
RESET_STEP = 3
ANALYSIS_STEP = 4

_STEP_BY_NAME: dict[NamedStep, int] = {
    NamedStep.INTRO: 1,
    NamedStep.COLLECTING_EVIDENCE: 2,
    NamedStep.WAITING_FOR_ANALYSIS: 3,
    NamedStep.ANALYZING: 4,
    NamedStep.REVIEWING_BRAND_BRAIN: 5,
    NamedStep.COMPLETE: 5,
}


class InvalidStepError(ValueError):
    """Raised for a numeric step outside 1..5."""

    def __init__(self, step: object) -> None:
        super().__init__(
            f"Invalid step number. Must be between {MIN_STEP} and {MAX_STEP}."
        )
        self.step = step


@dataclass(frozen=True)
class OnboardingState:
    """Position of one brand in the onboarding flow."""

    step: int
    status: OnboardingStatus
    is_activated: bool = False


class OnboardingStateMachine:
    """Maps between step representations and computes transitions."""

    @staticmethod
    def validate_step(step: int) -> int:
        """Return ``step`` if it is a valid numeric step.

        Raises:
            InvalidStepError: If step is not an int within 1..5
        """
        if isinstance(step, bool) or not isinstance(step, int):
            raise InvalidStepError(step)
        if step < MIN_STEP or step > MAX_STEP:
            raise InvalidStepError(step)
        return step

    @staticmethod
    def derive_status(step: int) -> OnboardingStatus:
        """Status implied by a numeric step. Pure and total over 1..5."""
        OnboardingStateMachine.validate_step(step)
        if step >= MAX_STEP:
            return OnboardingStatus.READY
        if step > MIN_STEP:
            return OnboardingStatus.IN_PROGRESS
        return OnboardingStatus.NOT_STARTED

    @staticmethod
    def step_for_name(name: NamedStep) -> int:
        """Numeric step for a named step."""
        return _STEP_BY_NAME[name]

    @staticmethod
    def name_for_step(step: int, is_activated: bool = False) -> NamedStep:
        """Named step for a numeric step.

        Step 5 is ``complete`` once activated, otherwise ``reviewing_brand_brain``.
        """
        OnboardingStateMachine.validate_step(step)
        if step == MAX_STEP:
            return NamedStep.COMPLETE if is_activated else NamedStep.REVIEWING_BRAND_BRAIN
        for name, number in _STEP_BY_NAME.items():
            if number == step:
                return name
        raise InvalidStepError(step)  # unreachable for validated steps

    @staticmethod
    def initial() -> OnboardingState:
        return OnboardingState(step=MIN_STEP, status=OnboardingStatus.NOT_STARTED)

    @classmethod
    def advance(
        cls,
        current: OnboardingState,
        target_step: int,
        activate: bool = False,
    ) -> OnboardingState:
        """Move to ``target_step``, forward or backward.

        Args:
            current: The state being left
            target_step: Numeric step to move to
            activate: Request activation; honoured only for step 5

        Raises:
            InvalidStepError: If target_step is outside 1..5
        """
        status = cls.derive_status(target_step)
        is_activated = current.is_activated or (activate and target_step == MAX_STEP)
        return OnboardingState(step=target_step, status=status, is_activated=is_activated)

    @classmethod
    def advance_to_name(cls, current: OnboardingState, name: NamedStep) -> OnboardingState:
        """Move to a named step. ``complete`` activates."""
        return cls.advance(
            current,
            cls.step_for_name(name),
            activate=name is NamedStep.COMPLETE,
        )

    @staticmethod
    def complete_analysis(current: OnboardingState) -> OnboardingState:
        return replace(current, step=MAX_STEP, status=OnboardingStatus.READY)

    @staticmethod
    def fail_analysis(current: OnboardingState) -> OnboardingState:
        """Send the brand back to evidence collection after a failed run."""
        return replace(current, step=FAILED_STEP, status=OnboardingStatus.FAILED)

    @staticmethod
    def reset_analysis(current: OnboardingState) -> OnboardingState:
        """Let the user retry analysis: step 3, not_started."""
        return replace(current, step=RESET_STEP, status=OnboardingStatus.NOT_STARTED)

    @staticmethod
    def activate(current: OnboardingState) -> OnboardingState:
        """Terminal activated state. Idempotent."""
        return OnboardingState(
            step=MAX_STEP, status=OnboardingStatus.READY, is_activated=True
        )

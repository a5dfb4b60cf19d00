"""
Onboarding flow manager.

Tracks one user's progress through the checklist for their role. The manager
is the only writer of the user's flow: every mutation is saved to the
injected ProgressStore right away and reported to the injected AnalyticsSink.

Invalid input (unknown step id, out-of-range index) leaves the flow untouched
and the operation returns False. Storage and analytics failures are logged
and never raised to the caller.
"""

from typing import Any, Dict, Optional
from app.core.exceptions import ProgressStoreError
from app.core.logging_config import logger
from app.models.user import UserRole
from app.schemas.onboarding import AnalyticsEvent, OnboardingFlow, OnboardingStep
from app.services.onboarding.ports import AnalyticsSink, ProgressStore
from app.services.onboarding.templates import build_flow


class OnboardingFlowManager:
    """Single-writer state container for one user's onboarding flow."""

    def __init__(
        self,
        user_id: int,
        store: ProgressStore,
        analytics: AnalyticsSink,
        organization_id: Optional[int] = None
    ):
        self.user_id = user_id
        self.organization_id = organization_id
        self.store = store
        self.analytics = analytics
        self.flow: Optional[OnboardingFlow] = self._load()

    @property
    def current_step(self) -> Optional[OnboardingStep]:
        return self.flow.current_step if self.flow else None

    @property
    def progress_percent(self) -> int:
        return self.flow.progress_percent if self.flow else 0

    def initialize_onboarding(self, role: UserRole) -> OnboardingFlow:
        """
        Start the checklist for a role from scratch, discarding saved progress.

        Args:
            role: Role whose template applies

        Returns:
            The new flow
        """
        role = UserRole(role)
        self.flow = build_flow(role)
        self._save()
        self.track_event("onboarding_initialized", {"role": role.value})
        return self.flow

    def complete_step(self, step_id: str) -> bool:
        """
        Mark a step completed and recompute progress.

        Emits onboarding_step_completed, plus onboarding_completed when this
        call is the one that completes the flow.

        Returns:
            False if there is no flow or the step id is unknown
        """
        if self.flow is None:
            return False

        step = self.flow.find_step(step_id)
        if step is None:
            logger.debug(f"Ignoring unknown onboarding step {step_id!r} for user {self.user_id}")
            return False

        was_complete = self.flow.is_complete
        step.completed = True
        self._recount()
        self._save()

        self.track_event("onboarding_step_completed", {
            "step": step_id,
            "role": self.flow.role.value,
            "completedSteps": self.flow.completed_steps,
            "totalSteps": self.flow.total_steps,
        })
        if self.flow.is_complete and not was_complete:
            self.track_event("onboarding_completed", {"role": self.flow.role.value})
        return True

    def go_to_step(self, step_index: int) -> bool:
        """
        Move to a step by position.

        Returns:
            False if there is no flow or the index is outside [0, total_steps)
        """
        if self.flow is None or step_index < 0 or step_index >= self.flow.total_steps:
            return False

        self.flow.current_step_index = step_index
        self._save()
        self.track_event("onboarding_step_navigated", {
            "step": self.flow.steps[step_index].id,
            "role": self.flow.role.value,
            "stepIndex": step_index,
        })
        return True

    def next_step(self) -> bool:
        if self.flow is None:
            return False
        return self.go_to_step(self.flow.current_step_index + 1)

    def previous_step(self) -> bool:
        if self.flow is None:
            return False
        return self.go_to_step(self.flow.current_step_index - 1)

    def skip_step(self, step_id: str) -> bool:
        """
        Skip an optional step. Skipping counts as completing it.

        Returns:
            False if there is no flow, the step is unknown or the step is required
        """
        if self.flow is None:
            return False

        step = self.flow.find_step(step_id)
        if step is None or step.required:
            return False

        self.complete_step(step_id)
        self.track_event("onboarding_step_skipped", {"step": step_id, "role": self.flow.role.value})
        return True

    def reset_onboarding(self) -> None:
        """Forget the flow, both saved and in memory."""
        try:
            self.store.clear(self.user_id)
        except ProgressStoreError as e:
            logger.error(f"Failed to clear onboarding state for user {self.user_id}: {e}")
        self.flow = None
        self.track_event("onboarding_reset")

    def finish_onboarding(self) -> bool:
        """
        Force the flow to complete.

        Every required step is marked completed; optional steps keep their
        state. The flow is complete from here on even if optional steps are
        still pending.

        Returns:
            False if there is no flow
        """
        if self.flow is None:
            return False

        for step in self.flow.steps:
            if step.required:
                step.completed = True
        self.flow.is_complete = True
        self._recount()
        self._save()
        self.track_event("onboarding_force_completed", {"role": self.flow.role.value})
        return True

    def track_event(self, event_name: str, properties: Optional[Dict[str, Any]] = None) -> None:
        """
        Hand an event to the analytics sink. Never raises.
        """
        event = AnalyticsEvent(
            event=event_name,
            user_id=self.user_id,
            organization_id=self.organization_id,
            properties=properties or {},
        )
        try:
            self.analytics.record(event)
        except Exception as e:
            logger.warning(f"Dropped analytics event {event_name!r} for user {self.user_id}: {e}")

    def _recount(self) -> None:
        self.flow.completed_steps = sum(1 for step in self.flow.steps if step.completed)
        # Completion sticks once reached, including after finish_onboarding
        self.flow.is_complete = self.flow.is_complete or self.flow.completed_steps == self.flow.total_steps

    def _load(self) -> Optional[OnboardingFlow]:
        try:
            return self.store.load(self.user_id)
        except ProgressStoreError as e:
            logger.error(f"Failed to load saved onboarding state for user {self.user_id}: {e}")
            return None

    def _save(self) -> None:
        try:
            self.store.save(self.user_id, self.flow)
        except ProgressStoreError as e:
            logger.error(f"Failed to save onboarding state for user {self.user_id}: {e}")

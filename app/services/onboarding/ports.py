"""Ports injected into OnboardingFlowManager.

Implementations:
- stores.py (InMemoryProgressStore, SqlProgressStore)
- analytics.py (LoggingAnalyticsSink, SqlAnalyticsSink, InMemoryAnalyticsSink)
"""

from __future__ import annotations

from typing import Optional, Protocol

from app.schemas.onboarding import AnalyticsEvent, OnboardingFlow


def storage_key(user_id: int) -> str:
    """Key under which a user's flow is saved."""
    return f"onboarding_{user_id}"


class ProgressStore(Protocol):
    """Port for saving onboarding progress.

    Writes are last-writer-wins; there is no conflict detection between
    sessions of the same user.
    """

    def load(self, user_id: int) -> Optional[OnboardingFlow]:
        """Load the saved flow.

        Args:
            user_id: Owner of the flow.

        Returns:
            The saved flow, or None if the user has not started onboarding.

        Raises:
            ProgressStoreError: If the saved state cannot be read or parsed.
        """
        ...

    def save(self, user_id: int, flow: OnboardingFlow) -> None:
        """Replace the saved flow.

        Raises:
            ProgressStoreError: If the state cannot be written.
        """
        ...

    def clear(self, user_id: int) -> None:
        """Remove the saved flow. Clearing a missing entry is not an error.

        Raises:
            ProgressStoreError: If the state cannot be removed.
        """
        ...


class AnalyticsSink(Protocol):
    """Port for fire-and-forget analytics.

    Delivery is not guaranteed and nothing is retried.
    """

    def record(self, event: AnalyticsEvent) -> None:
        """Record a single event.

        Raises:
            AnalyticsDeliveryError: If the event could not be recorded.
        """
        ...

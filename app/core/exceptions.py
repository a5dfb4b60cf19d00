"""Typed errors for the onboarding domain.

Storage and analytics failures are raised as these types by the adapters
and caught by OnboardingFlowManager, which logs them and degrades to
"no progress shown" instead of surfacing anything to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class OnboardingError(Exception):
    """Base error for the onboarding domain.

    Attributes:
        message: Human-readable error description
        cause: Optional underlying exception that caused this error
    """

    message: str
    cause: Optional[Exception] = field(default=None, repr=False)

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def __post_init__(self) -> None:
        super().__init__(self.message)


@dataclass
class ProgressStoreError(OnboardingError):
    """Saved onboarding state could not be read, parsed, written or cleared.

    Attributes:
        storage_key: Key of the affected entry (``onboarding_<userId>``)
    """

    storage_key: str = ""


@dataclass
class AnalyticsDeliveryError(OnboardingError):
    """An analytics sink failed to record an event.

    Attributes:
        event_name: Name of the event that was dropped
    """

    event_name: str = ""

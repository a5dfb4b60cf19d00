"""
Onboarding package: per-user, role-specific setup checklists.

This package provides modular components for:
- Static step templates per role
- The flow manager and the ports it is wired to
- Progress store and analytics sink adapters
- Contextual help for the current step
"""

from .manager import OnboardingFlowManager
from .ports import ProgressStore, AnalyticsSink, storage_key
from .stores import InMemoryProgressStore, SqlProgressStore
from .analytics import LoggingAnalyticsSink, InMemoryAnalyticsSink, SqlAnalyticsSink, get_analytics_sink
from .templates import ONBOARDING_STEPS, build_flow

__all__ = [
    "OnboardingFlowManager",
    "ProgressStore",
    "AnalyticsSink",
    "storage_key",
    "InMemoryProgressStore",
    "SqlProgressStore",
    "LoggingAnalyticsSink",
    "InMemoryAnalyticsSink",
    "SqlAnalyticsSink",
    "get_analytics_sink",
    "ONBOARDING_STEPS",
    "build_flow",
]

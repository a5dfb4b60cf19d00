"""
Analytics sink adapters.
"""

from typing import List
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.core.config import settings
from app.core.exceptions import AnalyticsDeliveryError
from app.core.logging_config import logger
from app.crud.onboarding import onboarding as onboarding_crud
from app.schemas.onboarding import AnalyticsEvent


class LoggingAnalyticsSink:
    """Writes the event payload to the application log."""

    def record(self, event: AnalyticsEvent) -> None:
        logger.info(f"Analytics Event: {event.payload()}")


class InMemoryAnalyticsSink:
    """Keeps recorded events in a list."""

    def __init__(self):
        self.events: List[AnalyticsEvent] = []

    def record(self, event: AnalyticsEvent) -> None:
        self.events.append(event)

    def names(self) -> List[str]:
        return [e.event for e in self.events]


class SqlAnalyticsSink:
    """Appends events to the onboarding_event table."""

    def __init__(self, db: Session):
        self.db = db
        self.crud = onboarding_crud

    def record(self, event: AnalyticsEvent) -> None:
        try:
            self.crud.create_event(
                self.db,
                event=event.event,
                user_id=event.user_id,
                organization_id=event.organization_id,
                properties=event.properties,
                occurred_at=event.timestamp
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            raise AnalyticsDeliveryError("Failed to store analytics event", cause=e, event_name=event.event)


def get_analytics_sink(db: Session):
    """Sink selected by the ANALYTICS_SINK setting."""
    if settings.ANALYTICS_SINK == "database":
        return SqlAnalyticsSink(db)
    return LoggingAnalyticsSink()

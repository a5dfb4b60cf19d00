from sqlalchemy import Column, Integer, String, Text, ForeignKey, DateTime, JSON, func
from sqlalchemy.orm import relationship
from app.database import Base, TimestampMixin


class OnboardingProgress(Base, TimestampMixin):
    """
    Saved onboarding flow for each user.
    Uses user_id as primary key (1:1 relationship with user).
    """
    __tablename__ = "onboarding_progress"

    user_id = Column(Integer, ForeignKey("user.id", ondelete="CASCADE"), primary_key=True)
    storage_key = Column(String, unique=True, nullable=False)  # onboarding_<userId>
    role = Column(String, nullable=False)
    state = Column(Text, nullable=False)  # JSON-serialized OnboardingFlow

    user = relationship("User", back_populates="onboarding")


class OnboardingEvent(Base):
    """
    Append-only log of onboarding analytics events.
    """
    __tablename__ = "onboarding_event"

    id = Column(Integer, primary_key=True, index=True)
    event = Column(String, nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("user.id", ondelete="SET NULL"), nullable=True, index=True)
    organization_id = Column(Integer, ForeignKey("organization.id", ondelete="SET NULL"), nullable=True)
    properties = Column(JSON, nullable=False, default=dict)
    occurred_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

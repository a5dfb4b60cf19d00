from .onboarding import OnboardingProgress, OnboardingEvent
from .organization import Organization
from .user import User, UserRole

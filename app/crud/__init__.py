from .onboarding import onboarding
from .organization import organization
from .user import user

__all__ = ["onboarding", "organization", "user"]

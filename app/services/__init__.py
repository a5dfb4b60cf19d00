from .onboarding import OnboardingFlowManager

__all__ = ["OnboardingFlowManager"]

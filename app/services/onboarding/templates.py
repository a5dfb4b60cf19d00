"""
Static onboarding checklists, one per user role.
"""

from typing import Dict, List
from app.models.user import UserRole
from app.schemas.onboarding import OnboardingFlow, OnboardingStep


ONBOARDING_STEPS: Dict[UserRole, List[OnboardingStep]] = {
    UserRole.admin: [
        OnboardingStep(
            id="connect_systems",
            title="Connect HR/Finance Systems",
            description="Integrate with your existing HR and finance platforms",
            required=True,
        ),
        OnboardingStep(
            id="invite_team",
            title="Invite Team Members",
            description="Add travel managers and employees to your organization",
            required=True,
        ),
        OnboardingStep(
            id="define_policy",
            title="Define Travel Policy",
            description="Set up travel policies and spending limits",
            required=True,
        ),
        OnboardingStep(
            id="configure_approval",
            title="Configure Approval Workflow",
            description="Set up approval processes for travel requests",
            required=True,
        ),
        OnboardingStep(
            id="complete_setup",
            title="Complete Setup",
            description="Review settings and launch your travel program",
            required=True,
        ),
    ],
    UserRole.travel_manager: [
        OnboardingStep(
            id="view_dashboard",
            title="Explore Dashboard",
            description="Get familiar with your travel management dashboard",
            required=True,
        ),
        OnboardingStep(
            id="approve_trip",
            title="Approve a Trip",
            description="Learn how to review and approve travel requests",
            required=True,
        ),
        OnboardingStep(
            id="launch_report",
            title="Generate Reports",
            description="Create your first travel analytics report",
            required=True,
        ),
        OnboardingStep(
            id="view_analytics",
            title="View Analytics",
            description="Explore travel insights and cost optimization",
            required=True,
        ),
    ],
    UserRole.traveler: [
        OnboardingStep(
            id="sync_calendar",
            title="Sync Calendar",
            description="Connect your calendar for seamless trip planning",
            required=False,
        ),
        OnboardingStep(
            id="book_demo_trip",
            title="Book Demo Trip",
            description="Try booking your first trip with our platform",
            required=True,
        ),
        OnboardingStep(
            id="voice_assistant",
            title="Try Voice Assistant",
            description="Use voice commands to check your itinerary",
            required=False,
        ),
        OnboardingStep(
            id="feedback_survey",
            title="Provide Feedback",
            description="Help us improve your travel experience",
            required=True,
        ),
    ],
}


def build_flow(role: UserRole) -> OnboardingFlow:
    """
    Create a fresh flow for a role with progress reset to zero.

    Steps are deep-copied so mutating a user's flow never touches the template.
    """
    role = UserRole(role)
    steps = [step.model_copy(deep=True) for step in ONBOARDING_STEPS[role]]
    return OnboardingFlow(
        role=role,
        steps=steps,
        current_step_index=0,
        total_steps=len(steps),
        completed_steps=0,
        is_complete=False,
    )

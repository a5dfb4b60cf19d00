from pydantic import BaseModel, Field, model_validator
from typing import Optional, List, Dict, Any
from datetime import datetime, timezone
from app.models.user import UserRole


class OnboardingStep(BaseModel):
    """A single checklist item"""
    id: str
    title: str
    description: str
    completed: bool = False
    required: bool = True


class OnboardingFlow(BaseModel):
    """Ordered checklist for one user, scoped by role"""
    role: UserRole
    steps: List[OnboardingStep]
    current_step_index: int = 0
    total_steps: int
    completed_steps: int = 0
    is_complete: bool = False

    @model_validator(mode="after")
    def check_progress(self):
        # Checked when a flow is built or loaded; the manager keeps it true on assignment
        if self.total_steps != len(self.steps):
            raise ValueError(f"total_steps is {self.total_steps} but the flow has {len(self.steps)} steps")
        if len({step.id for step in self.steps}) != len(self.steps):
            raise ValueError("step ids must be unique within a flow")
        if not 0 <= self.current_step_index < self.total_steps:
            raise ValueError(f"current_step_index {self.current_step_index} is out of range")
        completed = sum(1 for step in self.steps if step.completed)
        if self.completed_steps != completed:
            raise ValueError(f"completed_steps is {self.completed_steps} but {completed} steps are completed")
        if completed == self.total_steps and not self.is_complete:
            raise ValueError("is_complete must be set when every step is completed")
        return self

    @property
    def current_step(self) -> Optional[OnboardingStep]:
        if 0 <= self.current_step_index < len(self.steps):
            return self.steps[self.current_step_index]
        return None

    @property
    def progress_percent(self) -> int:
        if not self.total_steps:
            return 0
        return round(self.completed_steps / self.total_steps * 100)

    def find_step(self, step_id: str) -> Optional[OnboardingStep]:
        return next((step for step in self.steps if step.id == step_id), None)


class AnalyticsEvent(BaseModel):
    """Event handed to an analytics sink"""
    event: str
    user_id: Optional[int] = None
    organization_id: Optional[int] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    properties: Dict[str, Any] = Field(default_factory=dict)

    def payload(self) -> Dict[str, Any]:
        """Flat wire payload: {event, userId, organizationId, timestamp, ...properties}"""
        return {
            "event": self.event,
            "userId": self.user_id,
            "organizationId": self.organization_id,
            "timestamp": self.timestamp.isoformat(),
            **self.properties,
        }


class OnboardingStatusResponse(BaseModel):
    """Response schema for onboarding status and step operations"""
    flow: Optional[OnboardingFlow] = None
    current_step: Optional[OnboardingStep] = None
    progress_percent: int = 0
    applied: bool = True  # False when the operation was ignored (unknown step, out-of-range index)


class InitializeRequest(BaseModel):
    """Request schema for starting a flow. Defaults to the user's own role."""
    role: Optional[UserRole] = None


class NavigateRequest(BaseModel):
    """Request schema for jumping to a step"""
    step_index: int


class TrackEventRequest(BaseModel):
    """Request schema for client-side analytics events"""
    event: str = Field(..., min_length=1, max_length=100)
    properties: Dict[str, Any] = Field(default_factory=dict)


class FaqEntry(BaseModel):
    question: str
    answer: str


class StepHelp(BaseModel):
    """Contextual help for one onboarding step"""
    title: str
    quick_help: str
    suggestions: List[str]
    faqs: List[FaqEntry] = Field(default_factory=list)


class HelpReply(BaseModel):
    """Assistant reply shown in the help chat"""
    content: str
    suggestions: List[str]


class HelpResponse(BaseModel):
    """Response schema for help on the current step"""
    step_id: Optional[str] = None
    help: Optional[StepHelp] = None
    welcome: HelpReply


class AskHelpRequest(BaseModel):
    message: str = Field(..., max_length=1000)

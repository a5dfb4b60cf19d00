from fastapi import APIRouter, Depends, HTTPException, status
from app.dependencies import get_current_user, get_onboarding_manager
from app.models.user import User
from app.schemas.onboarding import (
    OnboardingStatusResponse,
    InitializeRequest,
    NavigateRequest,
    TrackEventRequest,
    HelpResponse,
    HelpReply,
    AskHelpRequest
)
from app.services.onboarding import OnboardingFlowManager
from app.services.onboarding.help import get_step_help, welcome_message, answer_question
from app.core.logging_config import logger

router = APIRouter()


def _status(manager: OnboardingFlowManager, applied: bool = True) -> OnboardingStatusResponse:
    return OnboardingStatusResponse(
        flow=manager.flow,
        current_step=manager.current_step,
        progress_percent=manager.progress_percent,
        applied=applied
    )


@router.get("", response_model=OnboardingStatusResponse)
def get_onboarding_status(
    manager: OnboardingFlowManager = Depends(get_onboarding_manager)
):
    """
    Get the current onboarding flow for the user.
    
    `flow` is null when onboarding has not been started (or the saved
    state could not be read).
    """
    return _status(manager)


@router.post("/initialize", response_model=OnboardingStatusResponse)
def initialize_onboarding(
    data: InitializeRequest,
    current_user: User = Depends(get_current_user),
    manager: OnboardingFlowManager = Depends(get_onboarding_manager)
):
    """
    Start the checklist for a role, discarding any saved progress.
    
    Args:
        data: Optional role override; defaults to the user's own role
    """
    role = data.role or current_user.role
    logger.info(f"Initializing onboarding for user {current_user.id} as {role.value}")
    manager.initialize_onboarding(role)
    return _status(manager)


@router.post("/steps/{step_id}/complete", response_model=OnboardingStatusResponse)
def complete_step(
    step_id: str,
    manager: OnboardingFlowManager = Depends(get_onboarding_manager)
):
    """
    Mark a step completed.
    
    Unknown step ids are ignored and reported with `applied: false`.
    """
    return _status(manager, manager.complete_step(step_id))


@router.post("/steps/{step_id}/skip", response_model=OnboardingStatusResponse)
def skip_step(
    step_id: str,
    manager: OnboardingFlowManager = Depends(get_onboarding_manager)
):
    """
    Skip an optional step. Required steps cannot be skipped (`applied: false`).
    """
    return _status(manager, manager.skip_step(step_id))


@router.post("/navigate", response_model=OnboardingStatusResponse)
def go_to_step(
    data: NavigateRequest,
    manager: OnboardingFlowManager = Depends(get_onboarding_manager)
):
    """
    Move to a step by index. Out-of-range indexes are ignored (`applied: false`).
    """
    return _status(manager, manager.go_to_step(data.step_index))


@router.post("/next", response_model=OnboardingStatusResponse)
def next_step(
    manager: OnboardingFlowManager = Depends(get_onboarding_manager)
):
    return _status(manager, manager.next_step())


@router.post("/previous", response_model=OnboardingStatusResponse)
def previous_step(
    manager: OnboardingFlowManager = Depends(get_onboarding_manager)
):
    return _status(manager, manager.previous_step())


@router.post("/finish", response_model=OnboardingStatusResponse)
def finish_onboarding(
    manager: OnboardingFlowManager = Depends(get_onboarding_manager)
):
    """
    Complete every required step and mark the flow complete.
    """
    logger.info(f"Force-completing onboarding for user {manager.user_id}")
    return _status(manager, manager.finish_onboarding())


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def reset_onboarding(
    manager: OnboardingFlowManager = Depends(get_onboarding_manager)
):
    """
    Clear saved onboarding progress.
    """
    logger.info(f"Resetting onboarding for user {manager.user_id}")
    manager.reset_onboarding()
    return None


@router.post("/events", status_code=status.HTTP_202_ACCEPTED)
def track_event(
    data: TrackEventRequest,
    manager: OnboardingFlowManager = Depends(get_onboarding_manager)
):
    """
    Record a client-side analytics event (tour, survey, help chat, ...).
    
    Delivery is best effort; the response does not say whether the event was stored.
    """
    manager.track_event(data.event, data.properties)
    return {"status": "accepted"}


@router.get("/help", response_model=HelpResponse)
def get_help(
    manager: OnboardingFlowManager = Depends(get_onboarding_manager)
):
    """
    Contextual help for the current step.
    """
    step = manager.current_step
    step_id = step.id if step else None
    manager.track_event("help_chat_opened", {
        "currentStep": step_id,
        "role": manager.flow.role.value if manager.flow else None
    })
    return HelpResponse(
        step_id=step_id,
        help=get_step_help(step_id),
        welcome=welcome_message(step_id)
    )


@router.post("/help/ask", response_model=HelpReply)
def ask_help(
    data: AskHelpRequest,
    manager: OnboardingFlowManager = Depends(get_onboarding_manager)
):
    """
    Answer a help chat message in the context of the current step.
    
    Raises:
        HTTPException 400: If the message is blank
    """
    step = manager.current_step
    step_id = step.id if step else None
    try:
        reply = answer_question(data.message, step_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    manager.track_event("help_chat_message_sent", {
        "message": data.message,
        "currentStep": step_id
    })
    manager.track_event("help_chat_response_received", {
        "userMessage": data.message,
        "responseLength": len(reply.content)
    })
    return reply

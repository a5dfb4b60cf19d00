from fastapi import Depends, HTTPException, status, Request
from jose import JWTError
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import select
from app.database import get_db
from app.models.user import User
from app.core.security import verify_token
from app.services.onboarding import OnboardingFlowManager, SqlProgressStore, get_analytics_sink


async def get_current_user(
    request: Request,
    db: Session = Depends(get_db)
) -> User:
    """
    Extract and validate JWT token from Authorization Bearer header, return the authenticated User.
    
    Args:
        request: FastAPI Request to extract Authorization header
        db: Database session
    
    Returns:
        User object with organization relationship loaded
    
    Raises:
        HTTPException: If token is invalid or user not found
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    
    try:
        authorization = request.headers.get("Authorization")
        if not authorization or not authorization.startswith("Bearer "):
            raise credentials_exception
        
        token = authorization.replace("Bearer ", "")
        
        payload = verify_token(token)
        user_id: str = payload.get("id")
        if user_id is None:
            raise credentials_exception
        user_id = int(user_id)
    except (JWTError, ValueError):
        raise credentials_exception
    
    stmt = select(User).where(User.id == user_id).options(selectinload(User.organization))
    result = db.execute(stmt)
    user = result.scalar_one_or_none()
    
    if user is None:
        raise credentials_exception
    
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Inactive user"
        )
    
    return user


def get_onboarding_manager(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> OnboardingFlowManager:
    """
    Flow manager for the authenticated user, wired to the database store
    and the configured analytics sink.
    """
    return OnboardingFlowManager(
        user_id=current_user.id,
        organization_id=current_user.organization_id,
        store=SqlProgressStore(db),
        analytics=get_analytics_sink(db),
    )

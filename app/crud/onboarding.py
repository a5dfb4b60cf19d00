from typing import Optional, List, Dict, Any
from datetime import datetime
from sqlalchemy.orm import Session
from sqlalchemy import select, delete
from app.models.onboarding import OnboardingProgress, OnboardingEvent


class CRUDOnboarding:
    """CRUD operations for OnboardingProgress and OnboardingEvent models."""

    def get_by_user_id(self, db: Session, user_id: int) -> Optional[OnboardingProgress]:
        """
        Get the saved onboarding row for a user.
        
        Args:
            db: Database session
            user_id: User ID
            
        Returns:
            OnboardingProgress instance or None if the user has not started onboarding
        """
        result = db.execute(
            select(OnboardingProgress).where(OnboardingProgress.user_id == user_id)
        )
        return result.scalar_one_or_none()

    def upsert_state(
        self,
        db: Session,
        *,
        user_id: int,
        storage_key: str,
        role: str,
        state: str
    ) -> OnboardingProgress:
        """
        Create or replace the saved state for a user. Last write wins.
        """
        progress = self.get_by_user_id(db, user_id)
        if progress is None:
            progress = OnboardingProgress(
                user_id=user_id,
                storage_key=storage_key,
                role=role,
                state=state
            )
            db.add(progress)
        else:
            progress.role = role
            progress.state = state
        db.commit()
        db.refresh(progress)
        return progress

    def delete_by_user_id(self, db: Session, user_id: int) -> int:
        """
        Delete the saved state for a user.
        
        Returns:
            Number of rows removed (0 or 1)
        """
        result = db.execute(
            delete(OnboardingProgress).where(OnboardingProgress.user_id == user_id)
        )
        db.commit()
        return result.rowcount

    def create_event(
        self,
        db: Session,
        *,
        event: str,
        user_id: Optional[int],
        organization_id: Optional[int],
        properties: Dict[str, Any],
        occurred_at: datetime
    ) -> OnboardingEvent:
        """
        Append an analytics event.
        """
        db_obj = OnboardingEvent(
            event=event,
            user_id=user_id,
            organization_id=organization_id,
            properties=properties,
            occurred_at=occurred_at
        )
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def get_events(
        self,
        db: Session,
        *,
        user_id: int,
        skip: int = 0,
        limit: int = 100
    ) -> List[OnboardingEvent]:
        """
        List a user's analytics events, oldest first.
        """
        stmt = select(OnboardingEvent).where(
            OnboardingEvent.user_id == user_id
        ).order_by(OnboardingEvent.id).offset(skip).limit(limit)
        result = db.execute(stmt)
        return list(result.scalars().all())


# Create singleton instance
onboarding = CRUDOnboarding()

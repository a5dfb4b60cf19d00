from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from app.models.user import User, UserRole


class CRUDUser:
    """
    CRUD operations for User model.
    
    Users belong to one organization; the authenticated user is loaded in
    app.dependencies.get_current_user.
    """
    
    def __init__(self):
        self.model = User
    
    def create(
        self,
        db: Session,
        *,
        email: str,
        organization_id: int,
        role: UserRole = UserRole.traveler,
        is_active: bool = True,
        commit: bool = True
    ) -> User:
        """
        Create a new user.
        
        Args:
            db: Database session
            email: User email
            organization_id: Organization the user belongs to
            role: Role that selects the onboarding checklist
            is_active: Whether user is active
            commit: Whether to commit immediately
            
        Returns:
            Created User instance
            
        Raises:
            ValueError: If a user with this email already exists
        """
        db_user = User(
            email=email,
            organization_id=organization_id,
            role=role,
            is_active=is_active
        )
        db.add(db_user)
        
        try:
            if commit:
                db.commit()
                db.refresh(db_user)
            else:
                db.flush()  # Get ID without committing
        except IntegrityError as e:
            db.rollback()
            if "unique" in str(e).lower() or "user_email_key" in str(e):
                raise ValueError(f"User with email {email} already exists")
            raise e
        
        return db_user


# Create singleton instance
user = CRUDUser()

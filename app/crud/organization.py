from typing import Tuple
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from app.models.organization import Organization
from app.models.user import User, UserRole
from app.crud.user import user as user_crud


class CRUDOrganization:
    """
    CRUD operations for Organization model.
    """
    
    def __init__(self):
        self.model = Organization
    
    def create_with_admin(
        self,
        db: Session,
        *,
        name: str,
        email: str,
        plan_type: str = None
    ) -> Tuple[Organization, User]:
        """
        Create an organization and its initial admin user atomically.
        
        Args:
            db: Database session
            name: Organization name
            email: Admin user email
            plan_type: Optional subscription plan
            
        Returns:
            Tuple of (created Organization, created User)
            
        Raises:
            ValueError: If user with this email already exists
        """
        try:
            organization = Organization(name=name, plan_type=plan_type)
            db.add(organization)
            db.flush()  # Get organization.id without committing
            
            admin = user_crud.create(
                db=db,
                email=email,
                organization_id=organization.id,
                role=UserRole.admin,
                commit=False  # Don't commit yet - we'll commit both together
            )
            
            # Commit both organization and user atomically
            db.commit()
            db.refresh(organization)
            db.refresh(admin)
            
            return organization, admin
            
        except IntegrityError as e:
            db.rollback()
            if "user_email_key" in str(e) or "unique" in str(e).lower():
                raise ValueError(f"User with email {email} already exists")
            raise e


# Create singleton instance
organization = CRUDOrganization()

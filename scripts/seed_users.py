"""
python -m scripts.seed_users

Creates a demo organization with one user per role and prints a bearer
token for each, for trying the onboarding API locally.
"""

import sys

sys.path.insert(0, ".")

from dotenv import load_dotenv
load_dotenv()

from app.database import SessionLocal
from app.core.security import create_access_token
from app.crud.organization import organization as organization_crud
from app.crud.user import user as user_crud
from app.models.user import UserRole


def seed_users():
    """Add a demo organization and its users to the database."""
    db = SessionLocal()
    try:
        organization, admin = organization_crud.create_with_admin(
            db,
            name="Demo Travel Co",
            email="admin@demo.nestmap.com",
            plan_type="trial"
        )
        users = [admin]
        for role in (UserRole.travel_manager, UserRole.traveler):
            users.append(user_crud.create(
                db,
                email=f"{role.value}@demo.nestmap.com",
                organization_id=organization.id,
                role=role
            ))

        print(f"Created organization {organization.id}: {organization.name}")
        for user in users:
            token = create_access_token(data={
                "id": str(user.id),
                "email": user.email,
                "organization_id": user.organization_id,
            })
            print(f"{user.role.value:<15} {user.email:<35} {token}")
    except ValueError as e:
        print(f"Error: {e}")
        db.rollback()
    finally:
        db.close()


if __name__ == "__main__":
    seed_users()

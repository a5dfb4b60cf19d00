import os

# Settings are read at import time, so configure the environment first
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ANALYTICS_SINK"] = "database"

import pytest
from fastapi.testclient import TestClient

import app.models  # noqa: F401
from app.database import Base, SessionLocal, engine
from app.core.security import create_access_token
from app.crud.organization import organization as organization_crud
from app.crud.user import user as user_crud
from app.models.user import UserRole
from app.services.onboarding import InMemoryAnalyticsSink, InMemoryProgressStore, OnboardingFlowManager
from main import app as fastapi_app


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def users(db):
    """One user per role in a single organization."""
    organization, admin = organization_crud.create_with_admin(
        db, name="Acme Travel", email="admin@acme.test"
    )
    manager = user_crud.create(
        db, email="manager@acme.test", organization_id=organization.id, role=UserRole.travel_manager
    )
    traveler = user_crud.create(
        db, email="traveler@acme.test", organization_id=organization.id, role=UserRole.traveler
    )
    return {
        UserRole.admin: admin,
        UserRole.travel_manager: manager,
        UserRole.traveler: traveler,
    }


@pytest.fixture
def auth_headers():
    def make(user):
        token = create_access_token(data={
            "id": str(user.id),
            "email": user.email,
            "organization_id": user.organization_id,
        })
        return {"Authorization": f"Bearer {token}"}
    return make


@pytest.fixture
def client(db):
    with TestClient(fastapi_app) as test_client:
        yield test_client


@pytest.fixture
def store():
    return InMemoryProgressStore()


@pytest.fixture
def sink():
    return InMemoryAnalyticsSink()


@pytest.fixture
def manager(store, sink):
    return OnboardingFlowManager(user_id=42, organization_id=7, store=store, analytics=sink)

"""
Progress store adapters.

- InMemoryProgressStore: JSON text per ``onboarding_<userId>`` key, the same
  shape the web client keeps in local storage.
- SqlProgressStore: rows in the onboarding_progress table.
"""

from typing import Dict, Optional
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.core.exceptions import ProgressStoreError
from app.crud.onboarding import onboarding as onboarding_crud
from app.schemas.onboarding import OnboardingFlow
from app.services.onboarding.ports import storage_key


def _parse_state(key: str, raw: str) -> OnboardingFlow:
    try:
        return OnboardingFlow.model_validate_json(raw)
    except ValidationError as e:
        raise ProgressStoreError("Failed to parse saved onboarding state", cause=e, storage_key=key)


class InMemoryProgressStore:
    """Key/value store holding serialized flows in a dict."""

    def __init__(self, items: Optional[Dict[str, str]] = None):
        self.items: Dict[str, str] = items if items is not None else {}

    def load(self, user_id: int) -> Optional[OnboardingFlow]:
        key = storage_key(user_id)
        raw = self.items.get(key)
        if raw is None:
            return None
        return _parse_state(key, raw)

    def save(self, user_id: int, flow: OnboardingFlow) -> None:
        self.items[storage_key(user_id)] = flow.model_dump_json()

    def clear(self, user_id: int) -> None:
        self.items.pop(storage_key(user_id), None)


class SqlProgressStore:
    """Stores serialized flows in the onboarding_progress table."""

    def __init__(self, db: Session):
        self.db = db
        self.crud = onboarding_crud

    def load(self, user_id: int) -> Optional[OnboardingFlow]:
        key = storage_key(user_id)
        try:
            progress = self.crud.get_by_user_id(self.db, user_id)
        except SQLAlchemyError as e:
            raise ProgressStoreError("Failed to read onboarding state", cause=e, storage_key=key)
        if progress is None:
            return None
        return _parse_state(key, progress.state)

    def save(self, user_id: int, flow: OnboardingFlow) -> None:
        key = storage_key(user_id)
        try:
            self.crud.upsert_state(
                self.db,
                user_id=user_id,
                storage_key=key,
                role=flow.role.value,
                state=flow.model_dump_json()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            raise ProgressStoreError("Failed to save onboarding state", cause=e, storage_key=key)

    def clear(self, user_id: int) -> None:
        key = storage_key(user_id)
        try:
            self.crud.delete_by_user_id(self.db, user_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise ProgressStoreError("Failed to clear onboarding state", cause=e, storage_key=key)

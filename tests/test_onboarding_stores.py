import logging

import pytest

from app.core.exceptions import ProgressStoreError
from app.crud.onboarding import onboarding as onboarding_crud
from app.models.user import UserRole
from app.schemas.onboarding import AnalyticsEvent
from app.services.onboarding import (
    InMemoryProgressStore,
    LoggingAnalyticsSink,
    OnboardingFlowManager,
    SqlAnalyticsSink,
    SqlProgressStore,
    build_flow,
    storage_key,
)


def test_storage_key_pattern():
    assert storage_key(15) == "onboarding_15"


def test_in_memory_store_round_trip():
    store = InMemoryProgressStore()
    flow = build_flow(UserRole.admin)
    flow.steps[1].completed = True
    flow.completed_steps = 1
    flow.current_step_index = 1

    store.save(3, flow)

    assert store.load(3) == flow
    assert store.load(4) is None


def test_in_memory_store_rejects_garbage():
    store = InMemoryProgressStore({"onboarding_3": '{"role": "pilot"}'})

    with pytest.raises(ProgressStoreError) as exc_info:
        store.load(3)
    assert exc_info.value.storage_key == "onboarding_3"


def test_in_memory_clear_is_idempotent():
    store = InMemoryProgressStore()
    store.save(3, build_flow(UserRole.traveler))

    store.clear(3)
    store.clear(3)

    assert store.load(3) is None


def test_sql_store_round_trip(db, users):
    traveler = users[UserRole.traveler]
    store = SqlProgressStore(db)
    flow = build_flow(UserRole.traveler)
    flow.steps[0].completed = True
    flow.completed_steps = 1

    store.save(traveler.id, flow)

    assert store.load(traveler.id) == flow
    row = onboarding_crud.get_by_user_id(db, traveler.id)
    assert row.storage_key == f"onboarding_{traveler.id}"
    assert row.role == "traveler"


def test_sql_store_last_write_wins(db, users):
    admin = users[UserRole.admin]
    store = SqlProgressStore(db)

    store.save(admin.id, build_flow(UserRole.admin))
    replacement = build_flow(UserRole.traveler)
    store.save(admin.id, replacement)

    assert store.load(admin.id) == replacement


def test_sql_store_clear(db, users):
    admin = users[UserRole.admin]
    store = SqlProgressStore(db)
    store.save(admin.id, build_flow(UserRole.admin))

    store.clear(admin.id)
    store.clear(admin.id)

    assert store.load(admin.id) is None


def test_sql_store_corrupt_row_leaves_manager_uninitialized(db, users):
    traveler = users[UserRole.traveler]
    onboarding_crud.upsert_state(
        db,
        user_id=traveler.id,
        storage_key=f"onboarding_{traveler.id}",
        role="traveler",
        state="[]"
    )

    manager = OnboardingFlowManager(
        user_id=traveler.id,
        store=SqlProgressStore(db),
        analytics=LoggingAnalyticsSink()
    )

    assert manager.flow is None


def test_sql_analytics_sink_appends_events(db, users):
    traveler = users[UserRole.traveler]
    sink = SqlAnalyticsSink(db)

    sink.record(AnalyticsEvent(
        event="onboarding_initialized",
        user_id=traveler.id,
        organization_id=traveler.organization_id,
        properties={"role": "traveler"}
    ))
    sink.record(AnalyticsEvent(event="onboarding_reset", user_id=traveler.id))

    events = onboarding_crud.get_events(db, user_id=traveler.id)
    assert [e.event for e in events] == ["onboarding_initialized", "onboarding_reset"]
    assert events[0].properties == {"role": "traveler"}
    assert events[0].organization_id == traveler.organization_id


def test_logging_sink_writes_payload(caplog):
    caplog.set_level(logging.INFO, logger="nestmap")

    LoggingAnalyticsSink().record(AnalyticsEvent(event="tour_started", user_id=9, properties={"tourKey": "admin"}))

    assert "Analytics Event" in caplog.text
    assert "'tourKey': 'admin'" in caplog.text

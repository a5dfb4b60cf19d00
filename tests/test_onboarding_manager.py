import json

import pytest

from app.core.exceptions import AnalyticsDeliveryError, ProgressStoreError
from app.models.user import UserRole
from app.services.onboarding import ONBOARDING_STEPS, OnboardingFlowManager, build_flow


def test_nothing_saved_means_not_started(manager):
    assert manager.flow is None
    assert manager.current_step is None
    assert manager.progress_percent == 0


@pytest.mark.parametrize("role", list(UserRole))
def test_initialize_starts_from_zero(manager, sink, role):
    flow = manager.initialize_onboarding(role)

    assert flow.role == role
    assert flow.completed_steps == 0
    assert flow.current_step_index == 0
    assert flow.is_complete is False
    assert flow.total_steps == len(ONBOARDING_STEPS[role])
    assert all(not step.completed for step in flow.steps)
    assert sink.events[-1].event == "onboarding_initialized"
    assert sink.events[-1].properties == {"role": role.value}


def test_initialize_does_not_share_state_with_template(manager):
    manager.initialize_onboarding(UserRole.admin)
    manager.complete_step("connect_systems")

    assert ONBOARDING_STEPS[UserRole.admin][0].completed is False


def test_traveler_walkthrough(manager, sink):
    manager.initialize_onboarding(UserRole.traveler)
    assert manager.flow.total_steps == 4

    manager.complete_step("book_demo_trip")
    assert manager.flow.completed_steps == 1
    assert manager.flow.is_complete is False

    manager.complete_step("sync_calendar")
    manager.complete_step("voice_assistant")
    manager.complete_step("feedback_survey")

    assert manager.flow.completed_steps == 4
    assert manager.flow.is_complete is True
    assert manager.progress_percent == 100
    assert sink.names().count("onboarding_completed") == 1


def test_completed_count_matches_step_states(manager):
    manager.initialize_onboarding(UserRole.admin)
    for step_id in ["invite_team", "define_policy", "invite_team"]:
        manager.complete_step(step_id)

    flow = manager.flow
    assert flow.completed_steps == sum(1 for s in flow.steps if s.completed) == 2
    assert flow.is_complete is False


def test_step_completed_event_carries_progress(manager, sink):
    manager.initialize_onboarding(UserRole.travel_manager)
    manager.complete_step("approve_trip")

    event = sink.events[-1]
    assert event.event == "onboarding_step_completed"
    assert event.user_id == 42
    assert event.organization_id == 7
    assert event.properties == {
        "step": "approve_trip",
        "role": "travel_manager",
        "completedSteps": 1,
        "totalSteps": 4,
    }


def test_complete_unknown_step_is_ignored(manager, sink, store):
    manager.initialize_onboarding(UserRole.traveler)
    before = manager.flow.model_copy(deep=True)
    saved = dict(store.items)
    emitted = len(sink.events)

    assert manager.complete_step("does_not_exist") is False
    assert manager.flow == before
    assert store.items == saved
    assert len(sink.events) == emitted


def test_operations_without_flow_are_ignored(manager, sink):
    assert manager.complete_step("book_demo_trip") is False
    assert manager.go_to_step(0) is False
    assert manager.next_step() is False
    assert manager.previous_step() is False
    assert manager.skip_step("sync_calendar") is False
    assert manager.finish_onboarding() is False
    assert manager.flow is None
    assert sink.events == []


def test_go_to_step_within_bounds(manager, sink):
    manager.initialize_onboarding(UserRole.admin)

    assert manager.go_to_step(3) is True
    assert manager.flow.current_step_index == 3
    assert manager.current_step.id == "configure_approval"
    assert sink.events[-1].event == "onboarding_step_navigated"
    assert sink.events[-1].properties["stepIndex"] == 3


@pytest.mark.parametrize("index", [-1, 5, 100])
def test_go_to_step_out_of_range_is_ignored(manager, index):
    manager.initialize_onboarding(UserRole.admin)
    manager.go_to_step(2)

    assert manager.go_to_step(index) is False
    assert manager.flow.current_step_index == 2


def test_next_and_previous_do_not_wrap(manager):
    manager.initialize_onboarding(UserRole.traveler)

    assert manager.previous_step() is False
    assert manager.flow.current_step_index == 0

    for _ in range(3):
        assert manager.next_step() is True
    assert manager.flow.current_step_index == 3

    assert manager.next_step() is False
    assert manager.flow.current_step_index == 3

    assert manager.previous_step() is True
    assert manager.flow.current_step_index == 2


def test_skip_optional_step_completes_it(manager, sink):
    manager.initialize_onboarding(UserRole.traveler)

    assert manager.skip_step("voice_assistant") is True
    assert manager.flow.find_step("voice_assistant").completed is True
    assert manager.flow.completed_steps == 1
    assert sink.names()[-2:] == ["onboarding_step_completed", "onboarding_step_skipped"]


def test_skip_required_step_is_ignored(manager):
    manager.initialize_onboarding(UserRole.traveler)

    assert manager.skip_step("book_demo_trip") is False
    assert manager.flow.find_step("book_demo_trip").completed is False
    assert manager.flow.completed_steps == 0


def test_skip_unknown_step_is_ignored(manager):
    manager.initialize_onboarding(UserRole.traveler)

    assert manager.skip_step("nope") is False
    assert manager.flow.completed_steps == 0


def test_finish_completes_required_steps_only(manager, sink):
    manager.initialize_onboarding(UserRole.traveler)
    manager.complete_step("sync_calendar")

    assert manager.finish_onboarding() is True

    flow = manager.flow
    assert flow.is_complete is True
    assert flow.find_step("book_demo_trip").completed is True
    assert flow.find_step("feedback_survey").completed is True
    assert flow.find_step("sync_calendar").completed is True
    assert flow.find_step("voice_assistant").completed is False
    assert flow.completed_steps == 3
    assert sink.events[-1].event == "onboarding_force_completed"


def test_finished_flow_stays_complete(manager, sink):
    manager.initialize_onboarding(UserRole.traveler)
    manager.finish_onboarding()

    manager.complete_step("voice_assistant")

    assert manager.flow.is_complete is True
    assert "onboarding_completed" not in sink.names()


def test_reset_clears_saved_and_in_memory_flow(manager, store, sink):
    manager.initialize_onboarding(UserRole.admin)
    assert "onboarding_42" in store.items

    manager.reset_onboarding()

    assert manager.flow is None
    assert store.items == {}
    assert sink.events[-1].event == "onboarding_reset"


def test_state_survives_reload(store, sink):
    first = OnboardingFlowManager(user_id=42, store=store, analytics=sink)
    first.initialize_onboarding(UserRole.traveler)
    first.complete_step("book_demo_trip")
    first.go_to_step(2)

    reloaded = OnboardingFlowManager(user_id=42, store=store, analytics=sink)

    assert reloaded.flow == first.flow
    assert reloaded.current_step.id == "voice_assistant"


def test_corrupt_saved_state_leaves_flow_uninitialized(store, sink):
    store.items["onboarding_42"] = "{not json"

    manager = OnboardingFlowManager(user_id=42, store=store, analytics=sink)

    assert manager.flow is None


@pytest.mark.parametrize("changes", [
    {"total_steps": 6, "current_step_index": 9},
    {"current_step_index": 4},
    {"current_step_index": -1},
    {"completed_steps": 3},
])
def test_inconsistent_saved_state_leaves_flow_uninitialized(store, sink, changes):
    state = build_flow(UserRole.traveler).model_dump(mode="json")
    state.update(changes)
    store.items["onboarding_42"] = json.dumps(state)

    manager = OnboardingFlowManager(user_id=42, store=store, analytics=sink)

    assert manager.flow is None
    assert manager.next_step() is False
    assert manager.go_to_step(2) is False
    assert store.items["onboarding_42"] == json.dumps(state)


def test_all_steps_completed_requires_complete_flag(store, sink):
    state = build_flow(UserRole.travel_manager).model_dump(mode="json")
    for step in state["steps"]:
        step["completed"] = True
    state["completed_steps"] = 4
    store.items["onboarding_42"] = json.dumps(state)

    manager = OnboardingFlowManager(user_id=42, store=store, analytics=sink)

    assert manager.flow is None


def test_finished_flow_with_pending_optional_step_reloads(store, sink):
    first = OnboardingFlowManager(user_id=42, store=store, analytics=sink)
    first.initialize_onboarding(UserRole.traveler)
    first.finish_onboarding()

    reloaded = OnboardingFlowManager(user_id=42, store=store, analytics=sink)

    assert reloaded.flow == first.flow
    assert reloaded.flow.is_complete is True


class BrokenStore:
    def load(self, user_id):
        raise ProgressStoreError("disk on fire", storage_key=f"onboarding_{user_id}")

    def save(self, user_id, flow):
        raise ProgressStoreError("disk on fire")

    def clear(self, user_id):
        raise ProgressStoreError("disk on fire")


def test_store_failures_are_not_raised(sink):
    manager = OnboardingFlowManager(user_id=1, store=BrokenStore(), analytics=sink)
    assert manager.flow is None

    manager.initialize_onboarding(UserRole.admin)
    assert manager.complete_step("invite_team") is True
    manager.reset_onboarding()
    assert manager.flow is None


class FailingSink:
    def __init__(self, error):
        self.error = error
        self.calls = 0

    def record(self, event):
        self.calls += 1
        raise self.error


@pytest.mark.parametrize("error", [
    AnalyticsDeliveryError("endpoint down", event_name="x"),
    ConnectionError("timeout"),
])
def test_analytics_failures_are_swallowed(store, error):
    sink = FailingSink(error)
    manager = OnboardingFlowManager(user_id=1, store=store, analytics=sink)

    manager.initialize_onboarding(UserRole.traveler)
    manager.complete_step("book_demo_trip")
    manager.track_event("tour_started", {"tourKey": "dashboard"})

    assert sink.calls == 3
    assert manager.flow.completed_steps == 1


def test_track_event_payload(manager, sink):
    manager.track_event("tour_step_completed", {"tourKey": "dashboard", "stepIndex": 2})

    payload = sink.events[-1].payload()
    assert payload["event"] == "tour_step_completed"
    assert payload["userId"] == 42
    assert payload["organizationId"] == 7
    assert payload["tourKey"] == "dashboard"
    assert payload["stepIndex"] == 2
    assert "timestamp" in payload

"""
Tests for application state transitions.
"""

import pytest

from yt_research import state as app_state
from yt_research.state import Action, ActionType, AppState, FilterState, reduce


def _searching(query="react hooks", request_id="req-1"):
    return reduce(AppState(), app_state.submit(query, request_id))


class TestSubmit:

    def test_submit_starts_search_and_records_history(self):
        previous = AppState(error="old error")
        state = reduce(previous, app_state.submit("react hooks", "req-1"))

        assert state.is_searching is True
        assert state.error is None
        assert state.active_request_id == "req-1"
        assert state.search_history == ("react hooks",)
        # reducer never mutates the previous state
        assert previous.error == "old error"

    def test_submit_moves_repeated_query_to_front(self):
        state = AppState(search_history=("a", "b", "c"))
        state = reduce(state, app_state.submit("b", "req-2"))
        assert state.search_history == ("b", "a", "c")

    def test_history_is_capped(self):
        state = AppState(search_history=tuple(f"q{i}" for i in range(10)))
        state = reduce(state, app_state.submit("new", "req"))
        assert len(state.search_history) == 10
        assert state.search_history[0] == "new"
        assert "q9" not in state.search_history

    def test_history_limit_is_configurable(self):
        state = AppState(search_history=("a", "b", "c"))
        state = reduce(state, app_state.submit("d", "req"), history_limit=2)
        assert state.search_history == ("d", "a")

    def test_blank_query_is_ignored(self):
        state = AppState()
        assert reduce(state, app_state.submit("   ", "req")) is state


class TestCompletion:

    def test_success_applies_result_for_active_request(self):
        state = reduce(_searching(), app_state.succeed("req-1", {"topic": "react hooks"}))

        assert state.is_searching is False
        assert state.result == {"topic": "react hooks"}
        assert state.active_request_id is None

    def test_success_resets_filters(self):
        state = _searching()
        state = reduce(state, app_state.toggle_tag("Explanation"))
        state = reduce(state, app_state.succeed("req-1", {"topic": "x"}))
        assert state.filters == FilterState()

    def test_failure_records_message(self):
        state = reduce(_searching(), app_state.fail("req-1", "Try again"))

        assert state.is_searching is False
        assert state.error == "Try again"
        assert state.result is None

    def test_failure_keeps_previous_result(self):
        state = AppState(result={"topic": "old"})
        state = reduce(state, app_state.submit("new", "req-2"))
        state = reduce(state, app_state.fail("req-2", "boom"))
        assert state.result == {"topic": "old"}

    def test_outcome_after_cancel_is_discarded(self):
        state = reduce(_searching(), app_state.cancel())
        assert state.is_searching is False

        after = reduce(state, app_state.succeed("req-1", {"topic": "late"}))
        assert after is state
        assert after.result is None

        after = reduce(state, app_state.fail("req-1", "late failure"))
        assert after.error is None

    def test_outcome_for_superseded_request_is_discarded(self):
        state = _searching(request_id="req-1")
        state = reduce(state, app_state.submit("another", "req-2"))

        stale = reduce(state, app_state.succeed("req-1", {"topic": "stale"}))
        assert stale is state

        fresh = reduce(state, app_state.succeed("req-2", {"topic": "fresh"}))
        assert fresh.result == {"topic": "fresh"}


class TestFilters:

    def test_toggle_tag_adds_and_removes(self):
        state = reduce(AppState(), app_state.toggle_tag("Common_Mistake"))
        assert state.filters.tags == ("Common_Mistake",)
        state = reduce(state, app_state.toggle_tag("Common_Mistake"))
        assert state.filters.tags == ()

    def test_toggle_creator_and_search_term(self):
        state = reduce(AppState(), app_state.toggle_creator("Bake Lab"))
        state = reduce(state, app_state.set_search_term("crumb"))
        assert state.filters == FilterState(search_term="crumb", creators=("Bake Lab",))

    def test_clear_filters(self):
        state = reduce(AppState(), app_state.toggle_creator("Bake Lab"))
        state = reduce(state, app_state.set_search_term("crumb"))
        state = reduce(state, app_state.clear_filters())
        assert state.filters == FilterState()

    def test_clear_history(self):
        state = AppState(search_history=("a", "b"))
        assert reduce(state, app_state.clear_history()).search_history == ()


def test_unknown_action_raises():
    with pytest.raises(ValueError):
        reduce(AppState(), Action(type="NOT_AN_ACTION"))


def test_action_types_are_enumerated():
    assert {t.value for t in ActionType} == {
        "SUBMIT",
        "CANCEL",
        "SUCCESS",
        "FAILURE",
        "SET_SEARCH_TERM",
        "TOGGLE_TAG",
        "TOGGLE_CREATOR",
        "CLEAR_FILTERS",
        "CLEAR_HISTORY",
    }

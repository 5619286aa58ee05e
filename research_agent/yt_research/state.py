"""
Application state and its transitions.

Every change to what the UI shows goes through ``reduce``: the search form,
the stop button, background request completion and the filter controls all
dispatch an ``Action`` instead of mutating shared state.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Optional, Tuple

from .config import DEFAULT_HISTORY_LIMIT


class ActionType(str, Enum):
    """Enumerated state transitions."""
    SUBMIT = "SUBMIT"
    CANCEL = "CANCEL"
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"
    SET_SEARCH_TERM = "SET_SEARCH_TERM"
    TOGGLE_TAG = "TOGGLE_TAG"
    TOGGLE_CREATOR = "TOGGLE_CREATOR"
    CLEAR_FILTERS = "CLEAR_FILTERS"
    CLEAR_HISTORY = "CLEAR_HISTORY"


@dataclass(frozen=True)
class FilterState:
    """Keyword, tag and creator filters applied to the current result."""
    search_term: str = ""
    tags: Tuple[str, ...] = ()
    creators: Tuple[str, ...] = ()


@dataclass(frozen=True)
class AppState:
    is_searching: bool = False
    result: Optional[dict] = None
    error: Optional[str] = None
    search_history: Tuple[str, ...] = ()
    active_request_id: Optional[str] = None
    filters: FilterState = field(default_factory=FilterState)


@dataclass(frozen=True)
class Action:
    type: ActionType
    query: Optional[str] = None
    request_id: Optional[str] = None
    result: Optional[dict] = None
    error: Optional[str] = None
    value: Any = None


def submit(query: str, request_id: str) -> Action:
    return Action(ActionType.SUBMIT, query=query, request_id=request_id)


def cancel() -> Action:
    return Action(ActionType.CANCEL)


def succeed(request_id: str, result: dict) -> Action:
    return Action(ActionType.SUCCESS, request_id=request_id, result=result)


def fail(request_id: str, error: str) -> Action:
    return Action(ActionType.FAILURE, request_id=request_id, error=error)


def set_search_term(term: str) -> Action:
    return Action(ActionType.SET_SEARCH_TERM, value=term)


def toggle_tag(tag: str) -> Action:
    return Action(ActionType.TOGGLE_TAG, value=tag)


def toggle_creator(creator: str) -> Action:
    return Action(ActionType.TOGGLE_CREATOR, value=creator)


def clear_filters() -> Action:
    return Action(ActionType.CLEAR_FILTERS)


def clear_history() -> Action:
    return Action(ActionType.CLEAR_HISTORY)


def _toggle(items: Tuple[str, ...], item: str) -> Tuple[str, ...]:
    if item in items:
        return tuple(existing for existing in items if existing != item)
    return items + (item,)


def push_history(
    history: Tuple[str, ...], query: str, limit: int = DEFAULT_HISTORY_LIMIT
) -> Tuple[str, ...]:
    """Move ``query`` to the front of ``history``, keeping at most ``limit`` entries."""
    rest = tuple(entry for entry in history if entry != query)
    return ((query,) + rest)[:limit]


def reduce(
    state: AppState, action: Action, *, history_limit: int = DEFAULT_HISTORY_LIMIT
) -> AppState:
    """
    Return the state that follows ``state`` after ``action``.

    SUCCESS and FAILURE only apply to the request currently in flight; an
    outcome for a cancelled or superseded request returns ``state`` unchanged.
    """
    kind = action.type

    if kind is ActionType.SUBMIT:
        query = (action.query or "").strip()
        if not query:
            return state
        return replace(
            state,
            is_searching=True,
            error=None,
            active_request_id=action.request_id,
            search_history=push_history(state.search_history, query, history_limit),
        )

    if kind is ActionType.CANCEL:
        return replace(state, is_searching=False, active_request_id=None)

    if kind in (ActionType.SUCCESS, ActionType.FAILURE):
        if state.active_request_id is None or action.request_id != state.active_request_id:
            return state
        if kind is ActionType.SUCCESS:
            return replace(
                state,
                is_searching=False,
                active_request_id=None,
                result=action.result,
                error=None,
                filters=FilterState(),
            )
        return replace(
            state,
            is_searching=False,
            active_request_id=None,
            error=action.error,
        )

    filters = state.filters
    if kind is ActionType.SET_SEARCH_TERM:
        return replace(state, filters=replace(filters, search_term=action.value or ""))
    if kind is ActionType.TOGGLE_TAG:
        return replace(state, filters=replace(filters, tags=_toggle(filters.tags, action.value)))
    if kind is ActionType.TOGGLE_CREATOR:
        return replace(
            state, filters=replace(filters, creators=_toggle(filters.creators, action.value))
        )
    if kind is ActionType.CLEAR_FILTERS:
        return replace(state, filters=FilterState())
    if kind is ActionType.CLEAR_HISTORY:
        return replace(state, search_history=())

    raise ValueError(f"Unknown action type: {kind!r}")


__all__ = [
    "ActionType",
    "Action",
    "AppState",
    "FilterState",
    "reduce",
    "push_history",
    "submit",
    "cancel",
    "succeed",
    "fail",
    "set_search_term",
    "toggle_tag",
    "toggle_creator",
    "clear_filters",
    "clear_history",
]

"""
Pure session transitions.

Every function here takes a Session and returns a new one. Nothing talks to
the network; the controller decides when to generate and feeds the outcome
back in as an event.
"""
from dataclasses import dataclass, replace
from typing import Union

from ..categories import Category, DEFAULT_CATEGORY
from ..models import HistoryEntry, OptionPair
from .state import Session, SessionStatus


@dataclass(frozen=True)
class CategorySelected:
    category: Category


@dataclass(frozen=True)
class GenerationStarted:
    initial_load: bool


@dataclass(frozen=True)
class GenerationSucceeded:
    pair: OptionPair


@dataclass(frozen=True)
class GenerationFailed:
    message: str


@dataclass(frozen=True)
class PreviousRequested:
    pass


@dataclass(frozen=True)
class SessionReset:
    category: Category = DEFAULT_CATEGORY


Event = Union[
    CategorySelected,
    GenerationStarted,
    GenerationSucceeded,
    GenerationFailed,
    PreviousRequested,
    SessionReset,
]

EMPTY_RESULT_MESSAGE = "Failed to fetch options: the AI returned no options."


def requires_generation(session: Session) -> bool:
    """
    True when the displayed round does not match the selected category.

    Covers the first load (no entry yet) and category changes. Never true
    while a generation is in flight.
    """
    if session.is_loading:
        return False
    entry = session.current_entry
    return entry is None or entry.category != session.selected_category


def apply(session: Session, event: Event) -> Session:
    """
    Apply one event to a session.

    :param session: Current session
    :param event: Event to apply
    :return: The next session
    """
    if isinstance(event, CategorySelected):
        return replace(session, selected_category=event.category)
    if isinstance(event, GenerationStarted):
        return start_generation(session, event.initial_load)
    if isinstance(event, GenerationSucceeded):
        return complete_generation(session, event.pair)
    if isinstance(event, GenerationFailed):
        return fail_generation(session, event.message)
    if isinstance(event, PreviousRequested):
        return go_previous(session)
    if isinstance(event, SessionReset):
        return Session(selected_category=event.category)
    raise TypeError(f"Unknown session event: {event!r}")


def start_generation(session: Session, initial_load: bool) -> Session:
    """Enter LOADING; the displayed pair stays until the call resolves."""
    if session.is_loading:
        return session
    return replace(
        session,
        status=SessionStatus.LOADING,
        last_error=None,
        initial_load=initial_load,
        pending_category=session.selected_category,
    )


def complete_generation(session: Session, pair: OptionPair) -> Session:
    """
    Record a generated pair.

    Initial load replaces history with the single new entry. Otherwise
    history is cut after the cursor and the entry appended, dropping any
    rounds ahead of the cursor.
    """
    if not session.is_loading:
        return session
    if pair.is_empty:
        return fail_generation(session, EMPTY_RESULT_MESSAGE)

    category = session.pending_category or session.selected_category
    entry = HistoryEntry(category=category, pair=pair)
    if session.initial_load:
        history = (entry,)
    else:
        history = session.history[:session.cursor + 1] + (entry,)

    return replace(
        session,
        current_pair=pair,
        status=SessionStatus.IDLE,
        last_error=None,
        history=history,
        cursor=len(history) - 1,
        initial_load=False,
        pending_category=None,
    )


def fail_generation(session: Session, message: str) -> Session:
    """Clear the panels and show the error; history and cursor are untouched."""
    if not session.is_loading:
        return session
    return replace(
        session,
        current_pair=OptionPair.empty(),
        status=SessionStatus.ERRORED,
        last_error=message,
        initial_load=False,
        pending_category=None,
    )


def go_previous(session: Session) -> Session:
    """Step the cursor back one round and replay it. No-op at the start or while loading."""
    if not session.can_go_previous:
        return session
    cursor = session.cursor - 1
    entry = session.history[cursor]
    return replace(
        session,
        cursor=cursor,
        selected_category=entry.category,
        current_pair=entry.pair,
        status=SessionStatus.IDLE,
        last_error=None,
    )

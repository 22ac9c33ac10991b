"""
Session state.

Tracks the player's round explicitly: selected category, displayed pair,
status, and the history of generated rounds with a cursor into it.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from ..categories import Category, DEFAULT_CATEGORY
from ..models import HistoryEntry, OptionPair


class SessionStatus(Enum):
    """Where the session is in the generation cycle."""
    IDLE = "idle"
    LOADING = "loading"
    ERRORED = "errored"


@dataclass(frozen=True)
class Session:
    """
    Immutable snapshot of one player's session.

    Transitions build a new Session instead of mutating this one.
    """
    selected_category: Category = DEFAULT_CATEGORY
    current_pair: OptionPair = OptionPair.empty()
    status: SessionStatus = SessionStatus.IDLE
    last_error: Optional[str] = None
    history: Tuple[HistoryEntry, ...] = ()
    cursor: int = -1  # -1 until the first successful generation
    # Only meaningful while LOADING
    initial_load: bool = False
    pending_category: Optional[Category] = None

    def __post_init__(self):
        if not -1 <= self.cursor < len(self.history):
            raise ValueError(
                f"cursor {self.cursor} out of range for history of length {len(self.history)}"
            )

    @property
    def is_loading(self) -> bool:
        return self.status is SessionStatus.LOADING

    @property
    def current_entry(self) -> Optional[HistoryEntry]:
        """History entry under the cursor, or None before the first round."""
        if self.cursor == -1:
            return None
        return self.history[self.cursor]

    @property
    def can_go_previous(self) -> bool:
        return self.cursor > 0 and not self.is_loading

    def to_dict(self) -> Dict[str, Any]:
        """View state for the browser."""
        return {
            "category": self.selected_category.value,
            "first": self.current_pair.first,
            "second": self.current_pair.second,
            "status": self.status.value,
            "is_loading": self.is_loading,
            "error": self.last_error,
            "cursor": self.cursor,
            "history_length": len(self.history),
            "can_go_previous": self.can_go_previous,
            "can_go_next": not self.is_loading,
        }

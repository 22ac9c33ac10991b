"""
Session layer: state, pure transitions, controller and per-browser registry.
"""
from .state import Session, SessionStatus
from .transitions import requires_generation
from .controller import SessionController
from .registry import SessionRegistry

__all__ = [
    "Session",
    "SessionStatus",
    "SessionController",
    "SessionRegistry",
    "requires_generation",
]

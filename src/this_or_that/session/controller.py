"""
Session Controller - Manages round generation and history navigation.

The controller owns a Session and is the only place that calls the
generation client. The state rules live in transitions.py; this class
decides when to generate and feeds the outcome back as events.
"""
import logging
import threading
from typing import Any, Dict, Optional, Protocol

from ..categories import Category
from ..exceptions import USER_HINT
from ..gemini_client import GenerationResult
from .state import Session, SessionStatus
from .transitions import (
    CategorySelected,
    Event,
    GenerationFailed,
    GenerationStarted,
    GenerationSucceeded,
    PreviousRequested,
    SessionReset,
    EMPTY_RESULT_MESSAGE,
    apply,
    requires_generation,
)

logger = logging.getLogger(__name__)


class GenerationClient(Protocol):
    def generate(self, category: Category) -> GenerationResult:
        ...


class SessionController:
    """
    Controller for one player's session.

    This class is responsible for:
    - Issuing at most one generation at a time
    - Regenerating when the selected category no longer matches the round shown
    - Replaying earlier rounds without touching the network
    """

    def __init__(self, client: GenerationClient, session: Optional[Session] = None):
        """
        :param client: Object with a generate(category) -> GenerationResult method
        :param session: Starting session (defaults to a fresh one)
        """
        self._client = client
        self._session = session if session is not None else Session()
        self._lock = threading.Lock()

    @property
    def session(self) -> Session:
        return self._session

    def snapshot(self) -> Dict[str, Any]:
        """Current view state for display."""
        return self._session.to_dict()

    def ensure_loaded(self) -> Session:
        """
        Generate the first round when nothing matching is displayed yet.

        Called when the page loads; does nothing if a matching round is shown.
        """
        if requires_generation(self._session):
            self._generate(initial_load=self._session.cursor == -1)
        return self._session

    def select_category(self, category: Category) -> Session:
        """
        Switch category and regenerate if the displayed round no longer matches.

        Selecting the category of the round under the cursor does not generate.
        While a generation is in flight the selection is recorded and checked
        again once that call resolves.
        """
        self._dispatch(CategorySelected(category))
        if requires_generation(self._session):
            self._generate(initial_load=self._session.cursor == -1)
        return self._session

    def request_next(self) -> Session:
        """Always generate a new round for the selected category."""
        self._generate(initial_load=False)
        return self._session

    def request_previous(self) -> Session:
        """Step back one round. No network call; no-op at the first round or while loading."""
        self._dispatch(PreviousRequested())
        return self._session

    def reset(self, category: Optional[Category] = None) -> Session:
        event = SessionReset() if category is None else SessionReset(category)
        self._dispatch(event)
        return self._session

    def _dispatch(self, event: Event) -> Session:
        with self._lock:
            self._session = apply(self._session, event)
            logger.debug(
                f"{type(event).__name__} -> status={self._session.status.value}, "
                f"cursor={self._session.cursor}, history={len(self._session.history)}"
            )
            return self._session

    def _generate(self, initial_load: bool) -> bool:
        """
        Run one generation, then one follow-up per category change made meanwhile.

        :return: False if a generation was already in flight and nothing was issued
        """
        if not self._begin(initial_load):
            logger.debug("Generation already in flight; trigger not issued")
            return False

        while True:
            category = self._session.pending_category
            try:
                result = self._client.generate(category)
            except Exception:
                # Leave LOADING before propagating
                self._dispatch(GenerationFailed(f"Failed to fetch options: unexpected error. {USER_HINT}"))
                raise
            succeeded = self._finish(result)

            # A selection applied while loading is re-evaluated exactly once
            if not succeeded or not requires_generation(self._session):
                return True
            if not self._begin(initial_load=False):
                return True

    def _begin(self, initial_load: bool) -> bool:
        with self._lock:
            if self._session.is_loading:
                return False
            self._session = apply(self._session, GenerationStarted(initial_load))
            logger.debug(
                f"Generation started - Category: {self._session.pending_category.value}, "
                f"initial_load={initial_load}"
            )
            return True

    def _finish(self, result: GenerationResult) -> bool:
        if result.ok and not result.pair.is_empty:
            before = self._session
            after = self._dispatch(GenerationSucceeded(result.pair))
            # Ignored if the session was reset while the call was out
            return after is not before and after.status is SessionStatus.IDLE

        message = result.error_message or EMPTY_RESULT_MESSAGE
        self._dispatch(GenerationFailed(message))
        return False

"""
Session registry.

Keeps one SessionController per browser session id, in memory only.
"""
import logging
import threading
from collections import OrderedDict
from typing import Callable

from ..categories import Category, DEFAULT_CATEGORY
from .controller import GenerationClient, SessionController
from .state import Session

logger = logging.getLogger(__name__)


class SessionRegistry:
    """
    Manages session controllers per session ID.

    Nothing is persisted. When more than ``max_sessions`` sessions are held,
    the least recently used one is dropped.
    """

    def __init__(
        self,
        client_factory: Callable[[], GenerationClient],
        default_category: Category = DEFAULT_CATEGORY,
        max_sessions: int = 1000,
    ):
        """
        :param client_factory: Returns the generation client for new controllers
        :param default_category: Category selected in a fresh session
        :param max_sessions: Upper bound on sessions kept in memory
        """
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        self._client_factory = client_factory
        self._default_category = default_category
        self._max_sessions = max_sessions
        self._controllers: "OrderedDict[str, SessionController]" = OrderedDict()
        self._lock = threading.Lock()

    def get_controller(self, session_id: str) -> SessionController:
        """
        Get or create the controller for a session.

        :param session_id: Session identifier
        :return: SessionController instance
        """
        with self._lock:
            controller = self._controllers.get(session_id)
            if controller is not None:
                self._controllers.move_to_end(session_id)
                return controller

            controller = SessionController(
                self._client_factory(),
                Session(selected_category=self._default_category),
            )
            self._controllers[session_id] = controller
            while len(self._controllers) > self._max_sessions:
                evicted, _ = self._controllers.popitem(last=False)
                logger.info(f"Evicted idle session - Session: {evicted}")
            return controller

    def has_session(self, session_id: str) -> bool:
        return session_id in self._controllers

    def __len__(self) -> int:
        return len(self._controllers)

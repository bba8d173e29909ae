"""In-memory layout sessions keyed by browser session id"""

import logging
import threading
from typing import Optional
from uuid import uuid4

from photolayout import LayoutSession
from photolayout.paper import CanvasConfig

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Owns one LayoutSession per browser session.

    Nothing is persisted; sessions live until evicted or the process exits.
    Oldest sessions are evicted first once max_sessions is reached.
    """

    def __init__(self, default_canvas: Optional[CanvasConfig] = None, max_sessions: int = 256):
        self.default_canvas = default_canvas or CanvasConfig()
        self.max_sessions = max_sessions
        self._sessions: dict[str, LayoutSession] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def create(self) -> tuple[str, LayoutSession]:
        session_id = uuid4().hex
        session = LayoutSession(self.default_canvas)
        with self._lock:
            while len(self._sessions) >= self.max_sessions:
                evicted = next(iter(self._sessions))
                del self._sessions[evicted]
                logger.info(f"Evicted layout session {evicted}")
            self._sessions[session_id] = session
        logger.info(f"Created layout session {session_id}")
        return session_id, session

    def get(self, session_id: Optional[str]) -> Optional[LayoutSession]:
        if not session_id:
            return None
        with self._lock:
            return self._sessions.get(session_id)

    def get_or_create(self, session_id: Optional[str]) -> tuple[str, LayoutSession]:
        session = self.get(session_id)
        if session is not None:
            return session_id, session
        return self.create()

"""Thread-safe in-memory store of search-box sessions served over HTTP."""

import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable

from models.search_query import SearchQuery
from orchestrator.engine import SearchBoxEngine
from orchestrator.navigation import RecordingNavigator


@dataclass
class SearchSession:
    """
    One remote search box: its engine plus the sink output the client still has to act on.

    Attributes:
        session_id: Identifier used in the URL
        engine: Engine owning this session's state
        navigator: Collects URLs the client should open
        submitted_queries: Queries delivered to the local sink
    """

    session_id: str
    engine: SearchBoxEngine
    navigator: RecordingNavigator
    submitted_queries: list[SearchQuery] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


SessionEngineBuilder = Callable[[RecordingNavigator, Callable[[SearchQuery], None], str | None], SearchBoxEngine]


class SearchSessionStore:
    """
    Keeps one SearchSession per id.

    The engine factory is injected so the FastAPI layer never imports
    provider or configuration details.
    """

    def __init__(self, engine_factory: SessionEngineBuilder, max_sessions: int = 1000):
        self._lock = threading.Lock()
        self._sessions: dict[str, SearchSession] = {}
        self._engine_factory = engine_factory
        self.max_sessions = max_sessions

    def create(self, initial_input_value: str | None = None) -> SearchSession:
        navigator = RecordingNavigator()
        submitted: list[SearchQuery] = []
        engine = self._engine_factory(navigator, submitted.append, initial_input_value)
        session = SearchSession(
            session_id=str(uuid.uuid4()),
            engine=engine,
            navigator=navigator,
            submitted_queries=submitted,
        )
        with self._lock:
            if len(self._sessions) >= self.max_sessions:
                oldest = min(self._sessions.values(), key=lambda s: s.created_at)
                self._sessions.pop(oldest.session_id, None)
            self._sessions[session.session_id] = session
        return session

    def get(self, session_id: str) -> SearchSession | None:
        with self._lock:
            return self._sessions.get(session_id)

    def remove(self, session_id: str) -> SearchSession | None:
        with self._lock:
            return self._sessions.pop(session_id, None)

    def clear_all(self) -> None:
        """Clear all sessions (for testing)."""
        with self._lock:
            self._sessions.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

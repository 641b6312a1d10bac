"""In-memory store of finished analyses — no database required."""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime

from find_unused.models import AnalysisResult


@dataclass
class AnalysisSession:
    result: AnalysisResult
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    failed: bool = False  # fail_on_unused was set and unused files were found
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())


class AppState:
    """Sessions keyed by id; each holds the result of one finished run."""

    def __init__(self):
        self._sessions: dict[str, AnalysisSession] = {}
        self._lock = threading.Lock()

    def add(self, session: AnalysisSession) -> None:
        with self._lock:
            self._sessions[session.id] = session

    def get(self, session_id: str) -> AnalysisSession | None:
        return self._sessions.get(session_id)

    def delete(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def __len__(self) -> int:
        return len(self._sessions)


# Module-level store shared by the routes
state = AppState()

"""
In-memory session registry.

Sessions are process-local and disappear on restart. Creating a session
first drops sessions idle past ``session_idle_hours``, then the least
recently active ones until there is room under ``max_sessions``. A
session with a generator call in flight is never evicted; when every
session is busy the registry goes over the limit.
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from mathsheet.ai.types import Difficulty
from mathsheet.config import Settings, get_settings
from mathsheet.curriculum import CurriculumCatalog, get_catalog
from mathsheet.logging_config import get_logger
from mathsheet.orchestration.session import WorksheetSession
from mathsheet.worksheet.options import GenerationOptions

logger = get_logger(__name__)


def default_options(settings: Settings) -> GenerationOptions:
    """Initial selection for a new session: default grade, no units."""
    return GenerationOptions(
        grade=settings.default_grade,
        difficulty_distribution={
            Difficulty.CONCEPTUAL: settings.default_conceptual_count,
            Difficulty.APPLIED: settings.default_applied_count,
            Difficulty.ADVANCED: settings.default_advanced_count,
        },
    )


class SessionRegistry:
    """Holds worksheet sessions by id."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        catalog: Optional[CurriculumCatalog] = None,
    ):
        self.settings = settings or get_settings()
        self.catalog = catalog or get_catalog()
        self._sessions: Dict[str, WorksheetSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self) -> WorksheetSession:
        self.evict_idle()
        excess = len(self._sessions) - self.settings.max_sessions + 1
        if excess > 0:
            idle = sorted(
                (s for s in self._sessions.values() if not s.is_loading),
                key=lambda s: s.last_active_at,
            )
            for oldest in idle[:excess]:
                del self._sessions[oldest.id]
                logger.info("Evicted session to stay under limit", extra={"session_id": oldest.id})
            if len(idle) < excess:
                logger.warning(
                    "Session limit exceeded; all sessions have calls in flight",
                    extra={"sessions": len(self._sessions), "max_sessions": self.settings.max_sessions},
                )

        session = WorksheetSession(default_options(self.settings), catalog=self.catalog)
        self._sessions[session.id] = session
        logger.info("Session created", extra={"session_id": session.id})
        return session

    def get(self, session_id: str) -> Optional[WorksheetSession]:
        return self._sessions.get(session_id)

    def delete(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def evict_idle(self, now: Optional[datetime] = None) -> int:
        """Drop sessions idle longer than ``session_idle_hours``. Busy ones are kept."""
        now = now or datetime.now(timezone.utc)
        cutoff = now - timedelta(hours=self.settings.session_idle_hours)
        stale = [
            sid for sid, s in self._sessions.items()
            if s.last_active_at < cutoff and not s.is_loading
        ]
        for sid in stale:
            del self._sessions[sid]
        if stale:
            logger.info("Evicted idle sessions", extra={"count": len(stale)})
        return len(stale)

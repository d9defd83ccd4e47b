"""
Worksheet session - owns the options model, the problem set and the single
user-visible error slot, and drives the generator.

This is the catch boundary for generation errors: failures are turned into
``error``/``error_status`` and never leave the previous problem set
half-applied.

Ordering of asynchronous completions:
- every bulk generate takes the next ``bulk_request_seq``; only the latest
  one may apply its result (last write wins, stale results are dropped)
- the set is cleared while a bulk generate is pending; the last set that
  was actually shown is kept as a restore point and put back if the latest
  request fails
- a replacement whose target has left the set is dropped
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Tuple

from mathsheet.ai.generator import GeneratorPort
from mathsheet.ai.types import Difficulty
from mathsheet.curriculum import CurriculumCatalog, get_catalog
from mathsheet.errors import GENERATE_FAILED, REPLACE_FAILED, MathSheetError, ValidationError
from mathsheet.export import export_problem_set
from mathsheet.logging_config import bind_session, get_logger
from mathsheet.worksheet.models import Problem
from mathsheet.worksheet.options import GenerationOptions
from mathsheet.worksheet.problem_set import ProblemSet
from mathsheet.worksheet.spec_builder import build_generation_spec

logger = get_logger(__name__)
NOTHING_TO_EXPORT = "다운로드할 문제가 없습니다."


class Outcome(str, Enum):
    """What happened to an operation's result."""
    APPLIED = "applied"
    DISCARDED = "discarded"  # superseded or orphaned; state untouched
    FAILED = "failed"        # error slot set; state untouched


class WorksheetSession:
    """In-memory state of one teacher's worksheet."""

    def __init__(
        self,
        options: GenerationOptions,
        catalog: Optional[CurriculumCatalog] = None,
        session_id: Optional[str] = None,
    ):
        self.id = session_id or str(uuid.uuid4())
        self.options = options
        self.catalog = catalog or get_catalog()
        self.problems = ProblemSet()

        self.error: Optional[str] = None
        self.error_status: Optional[int] = None

        self.bulk_request_seq = 0
        self.pending_bulk = 0
        self.pending_replacements = 0
        self._restore_point: Optional[Tuple[Tuple[Problem, ...], Optional[str]]] = None

        self.created_at = datetime.now(timezone.utc)
        self.last_active_at = self.created_at

    # ── State ─────────────────────────────────────────────────────────

    @property
    def is_generating(self) -> bool:
        return self.pending_bulk > 0

    @property
    def is_loading(self) -> bool:
        return self.pending_bulk > 0 or self.pending_replacements > 0

    @property
    def can_create(self) -> bool:
        """Whether the set-level create action should be offered."""
        return (
            not self.is_generating
            and bool(self.options.units)
            and self.options.total_count > 0
        )

    def touch(self) -> None:
        self.last_active_at = datetime.now(timezone.utc)

    def clear_error(self) -> None:
        self.error = None
        self.error_status = None

    def _fail(self, exc: Exception, fallback: str) -> None:
        if isinstance(exc, MathSheetError):
            self.error = exc.message or fallback
            self.error_status = exc.status_code
            log = logger.warning if isinstance(exc, ValidationError) else logger.error
            log(
                "%s: %s",
                type(exc).__name__,
                self.error,
                extra={"session_id": self.id},
            )
        else:
            self.error = fallback
            self.error_status = 500
            logger.exception("Unexpected generator failure", extra={"session_id": self.id})

    # ── Bulk generate ─────────────────────────────────────────────────

    async def create_problems(self, generator: GeneratorPort) -> Outcome:
        """Generate a new set from the current options."""
        self.touch()
        try:
            spec = build_generation_spec(self.options, self.catalog)
        except ValidationError as exc:
            self._fail(exc, GENERATE_FAILED)
            return Outcome.FAILED

        self.bulk_request_seq += 1
        seq = self.bulk_request_seq
        if self._restore_point is None:
            self._restore_point = (self.problems.snapshot(), self.problems.selected_id)
        self.clear_error()
        self.problems.replace_all(())
        self.pending_bulk += 1

        try:
            with bind_session(self.id):
                generated = await generator.generate_set(spec)
        except Exception as exc:
            if seq != self.bulk_request_seq:
                logger.info(
                    "Ignoring failure of superseded bulk request",
                    extra={"session_id": self.id, "request_seq": seq},
                )
                return Outcome.DISCARDED
            self._restore_previous_set()
            self._fail(exc, GENERATE_FAILED)
            return Outcome.FAILED
        finally:
            self.pending_bulk -= 1

        if seq != self.bulk_request_seq:
            logger.info(
                "Discarding stale bulk result",
                extra={"session_id": self.id, "request_seq": seq, "latest_seq": self.bulk_request_seq},
            )
            return Outcome.DISCARDED

        self.problems.replace_all(generated)
        self._restore_point = None
        logger.info(
            "Problem set replaced",
            extra={"session_id": self.id, "request_seq": seq, "count": len(generated)},
        )
        return Outcome.APPLIED

    def _restore_previous_set(self) -> None:
        if self._restore_point is None:
            return
        problems, selected_id = self._restore_point
        self.problems.replace_all(problems)
        if selected_id is not None:
            self.problems.select(selected_id)
        self._restore_point = None

    # ── Single item ───────────────────────────────────────────────────

    async def replace_problem(
        self,
        problem_id: str,
        difficulty: Difficulty,
        generator: GeneratorPort,
    ) -> Outcome:
        """Swap one problem for a freshly generated one at ``difficulty``."""
        self.touch()
        target = self.problems.get(problem_id)
        if target is None:
            return Outcome.DISCARDED

        self.clear_error()
        self.pending_replacements += 1
        try:
            with bind_session(self.id):
                new_problem = await generator.replace_one(target, difficulty)
        except Exception as exc:
            self._fail(exc, REPLACE_FAILED)
            return Outcome.FAILED
        finally:
            self.pending_replacements -= 1

        if not self.problems.replace_by_id(problem_id, new_problem):
            logger.info(
                "Discarding replacement for a problem no longer in the set",
                extra={"session_id": self.id, "problem_id": problem_id},
            )
            return Outcome.DISCARDED
        return Outcome.APPLIED

    def remove_problem(self, problem_id: str) -> bool:
        self.touch()
        return self.problems.remove_by_id(problem_id)

    def select_problem(self, problem_id: Optional[str]) -> Optional[str]:
        self.touch()
        return self.problems.select(problem_id)

    # ── Export ────────────────────────────────────────────────────────

    def export_document(self) -> Optional[bytes]:
        """DOCX bytes for the current set, or None (with the error slot set)."""
        self.touch()
        snapshot = self.problems.snapshot()
        if not snapshot:
            self._fail(ValidationError(NOTHING_TO_EXPORT), NOTHING_TO_EXPORT)
            return None
        return export_problem_set(snapshot)

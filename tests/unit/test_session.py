"""
Unit tests for the worksheet session orchestrator.

Covers the ordering rules for overlapping asynchronous calls: latest bulk
request wins, failed bulk requests restore the previous set, and
replacements for removed problems are dropped.
"""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from mathsheet.ai.types import Difficulty
from mathsheet.config import Settings
from mathsheet.errors import (
    GENERATE_FAILED,
    REPLACE_FAILED,
    ConfigurationError,
    MalformedResponseError,
    TransportError,
)
from mathsheet.logging_config import current_session_id
from mathsheet.orchestration import Outcome, SessionRegistry, WorksheetSession, default_options
from mathsheet.orchestration.session import NOTHING_TO_EXPORT
from mathsheet.worksheet.options import NO_UNIT_SELECTED
from tests.fakes import FakeGenerator, make_problem, settle


@pytest.fixture
def session() -> WorksheetSession:
    session = WorksheetSession(default_options(Settings(_env_file=None)))
    session.options.toggle_unit("곱셈", "1학기", True)
    return session


@pytest.fixture
def manual_generator() -> FakeGenerator:
    return FakeGenerator(manual=True)


class TestCreateProblems:
    """Bulk generation."""

    async def test_applies_generated_set(self, session, fake_generator):
        outcome = await session.create_problems(fake_generator)

        assert outcome == Outcome.APPLIED
        assert len(session.problems) == 10
        assert session.error is None
        assert not session.is_generating
        assert fake_generator.generate_calls[0].unit_targets[0].unit == "곱셈"

    async def test_validation_failure_never_calls_generator(self, fake_generator):
        session = WorksheetSession(default_options(Settings(_env_file=None)))

        outcome = await session.create_problems(fake_generator)

        assert outcome == Outcome.FAILED
        assert session.error == NO_UNIT_SELECTED
        assert session.error_status == 400
        assert fake_generator.generate_calls == []
        assert session.bulk_request_seq == 0

    async def test_set_is_cleared_while_pending(self, session, manual_generator, sample_problems):
        session.problems.replace_all(sample_problems)

        task = asyncio.create_task(session.create_problems(manual_generator))
        await settle()

        assert len(session.problems) == 0
        assert session.is_generating
        assert session.is_loading
        assert not session.can_create

        manual_generator.pending[0].set_result([make_problem()])
        assert await task == Outcome.APPLIED
        assert not session.is_generating
        assert session.can_create

    async def test_latest_request_wins_when_it_resolves_first(self, session, manual_generator):
        first = asyncio.create_task(session.create_problems(manual_generator))
        await settle()
        second = asyncio.create_task(session.create_problems(manual_generator))
        await settle()

        latest = [make_problem(question="최신")]
        manual_generator.pending[1].set_result(latest)
        assert await second == Outcome.APPLIED

        manual_generator.pending[0].set_result([make_problem(question="이전")])
        assert await first == Outcome.DISCARDED

        assert [p.question for p in session.problems] == ["최신"]
        assert session.pending_bulk == 0

    async def test_stale_result_arriving_first_is_dropped(self, session, manual_generator):
        first = asyncio.create_task(session.create_problems(manual_generator))
        await settle()
        second = asyncio.create_task(session.create_problems(manual_generator))
        await settle()

        manual_generator.pending[0].set_result([make_problem(question="이전")])
        assert await first == Outcome.DISCARDED
        assert len(session.problems) == 0
        assert session.is_generating

        manual_generator.pending[1].set_result([make_problem(question="최신")])
        assert await second == Outcome.APPLIED
        assert [p.question for p in session.problems] == ["최신"]

    async def test_failure_restores_previous_set_and_cursor(self, session, fake_generator, sample_problems):
        session.problems.replace_all(sample_problems)
        session.select_problem(sample_problems[1].id)
        fake_generator.error = TransportError()

        outcome = await session.create_problems(fake_generator)

        assert outcome == Outcome.FAILED
        assert session.problems.snapshot() == tuple(sample_problems)
        assert session.problems.selected_id == sample_problems[1].id
        assert session.error == TransportError.default_message
        assert session.error_status == 502
        assert not session.is_generating

    async def test_failure_restores_set_from_before_overlapping_requests(
        self, session, manual_generator, sample_problems
    ):
        session.problems.replace_all(sample_problems)
        first = asyncio.create_task(session.create_problems(manual_generator))
        await settle()
        second = asyncio.create_task(session.create_problems(manual_generator))
        await settle()

        manual_generator.pending[1].set_exception(MalformedResponseError())
        assert await second == Outcome.FAILED
        manual_generator.pending[0].set_result([make_problem()])
        assert await first == Outcome.DISCARDED

        assert session.problems.snapshot() == tuple(sample_problems)

    async def test_failure_after_overlap_keeps_last_applied_set(self, session, manual_generator):
        """B applies while A is pending; C then fails and B comes back."""
        first = asyncio.create_task(session.create_problems(manual_generator))
        await settle()
        second = asyncio.create_task(session.create_problems(manual_generator))
        await settle()

        applied = [make_problem(question="B")]
        manual_generator.pending[1].set_result(applied)
        assert await second == Outcome.APPLIED

        third = asyncio.create_task(session.create_problems(manual_generator))
        await settle()
        assert len(session.problems) == 0

        manual_generator.pending[2].set_exception(TransportError())
        assert await third == Outcome.FAILED
        assert [p.question for p in session.problems] == ["B"]

        manual_generator.pending[0].set_result([make_problem(question="A")])
        assert await first == Outcome.DISCARDED
        assert [p.question for p in session.problems] == ["B"]
        assert session.error == TransportError.default_message
        assert session.pending_bulk == 0

    async def test_generator_logs_carry_session_id(self, session):
        """Generator code sees the session id in the logging context."""
        seen = []

        class RecordingGenerator(FakeGenerator):
            async def generate_set(self, spec):
                seen.append(current_session_id())
                return await super().generate_set(spec)

        await session.create_problems(RecordingGenerator())

        assert seen == [session.id]
        assert current_session_id() is None

    async def test_superseded_failure_is_ignored(self, session, manual_generator):
        first = asyncio.create_task(session.create_problems(manual_generator))
        await settle()
        second = asyncio.create_task(session.create_problems(manual_generator))
        await settle()

        manual_generator.pending[0].set_exception(TransportError())
        assert await first == Outcome.DISCARDED
        assert session.error is None

        manual_generator.pending[1].set_result([make_problem()])
        assert await second == Outcome.APPLIED

    async def test_configuration_error_message(self, session, fake_generator):
        fake_generator.error = ConfigurationError()
        await session.create_problems(fake_generator)
        assert session.error == "Server configuration error: API key not found."
        assert session.error_status == 500

    async def test_unexpected_error_uses_fallback(self, session, fake_generator):
        fake_generator.error = RuntimeError("boom")
        assert await session.create_problems(fake_generator) == Outcome.FAILED
        assert session.error == GENERATE_FAILED
        assert session.error_status == 500

    async def test_new_request_clears_previous_error(self, session, fake_generator):
        fake_generator.error = TransportError()
        await session.create_problems(fake_generator)
        fake_generator.error = None

        assert await session.create_problems(fake_generator) == Outcome.APPLIED
        assert session.error is None


class TestReplaceProblem:
    """Single-problem replacement."""

    async def test_replaces_in_place_and_selects(self, session, fake_generator, sample_problems):
        session.problems.replace_all(sample_problems)
        target = sample_problems[1]

        outcome = await session.replace_problem(target.id, Difficulty.ADVANCED, fake_generator)

        assert outcome == Outcome.APPLIED
        replaced = session.problems.snapshot()[1]
        assert replaced.id != target.id
        assert replaced.difficulty == Difficulty.ADVANCED
        assert replaced.sub_topic == target.sub_topic
        assert session.problems.selected_id == replaced.id
        assert len(session.problems) == 3

    async def test_unknown_target_is_discarded(self, session, fake_generator):
        outcome = await session.replace_problem("missing", Difficulty.APPLIED, fake_generator)
        assert outcome == Outcome.DISCARDED
        assert fake_generator.replace_calls == []

    async def test_target_removed_while_pending(self, session, manual_generator, sample_problems):
        session.problems.replace_all(sample_problems)
        target = sample_problems[0]

        task = asyncio.create_task(session.replace_problem(target.id, Difficulty.APPLIED, manual_generator))
        await settle()
        assert session.is_loading
        assert not session.is_generating

        session.remove_problem(target.id)
        manual_generator.pending[0].set_result(make_problem())

        assert await task == Outcome.DISCARDED
        assert [p.id for p in session.problems] == [sample_problems[1].id, sample_problems[2].id]
        assert session.pending_replacements == 0

    async def test_target_gone_after_bulk_regenerate(self, session, manual_generator, sample_problems):
        session.problems.replace_all(sample_problems)
        replace = asyncio.create_task(
            session.replace_problem(sample_problems[0].id, Difficulty.APPLIED, manual_generator)
        )
        await settle()
        bulk = asyncio.create_task(session.create_problems(manual_generator))
        await settle()

        fresh = [make_problem(question="새 세트")]
        manual_generator.pending[1].set_result(fresh)
        assert await bulk == Outcome.APPLIED
        manual_generator.pending[0].set_result(make_problem(question="늦은 교체"))
        assert await replace == Outcome.DISCARDED

        assert [p.question for p in session.problems] == ["새 세트"]

    async def test_failure_keeps_original(self, session, fake_generator, sample_problems):
        session.problems.replace_all(sample_problems)
        fake_generator.error = RuntimeError("boom")

        outcome = await session.replace_problem(sample_problems[2].id, Difficulty.CONCEPTUAL, fake_generator)

        assert outcome == Outcome.FAILED
        assert session.problems.snapshot() == tuple(sample_problems)
        assert session.error == REPLACE_FAILED
        assert not session.is_loading

    async def test_two_replacements_in_flight(self, session, manual_generator, sample_problems):
        session.problems.replace_all(sample_problems)
        a = asyncio.create_task(session.replace_problem(sample_problems[0].id, Difficulty.APPLIED, manual_generator))
        b = asyncio.create_task(session.replace_problem(sample_problems[2].id, Difficulty.ADVANCED, manual_generator))
        await settle()
        assert session.pending_replacements == 2

        manual_generator.pending[1].set_result(make_problem(question="B", difficulty=Difficulty.ADVANCED))
        manual_generator.pending[0].set_result(make_problem(question="A", difficulty=Difficulty.APPLIED))
        assert await a == Outcome.APPLIED
        assert await b == Outcome.APPLIED

        assert [p.question for p in session.problems] == ["A", "문제 2", "B"]
        assert session.pending_replacements == 0


class TestExport:
    """Export from a session."""

    def test_empty_set_fails(self, session):
        assert session.export_document() is None
        assert session.error == NOTHING_TO_EXPORT
        assert session.error_status == 400

    def test_export_returns_docx_bytes(self, session, sample_problems):
        session.problems.replace_all(sample_problems)
        data = session.export_document()
        assert data[:2] == b"PK"


class TestSessionRegistry:
    """In-memory session registry."""

    def test_defaults(self):
        registry = SessionRegistry(Settings(_env_file=None))
        session = registry.create()
        assert session.options.grade == "3학년"
        assert session.options.units == []
        assert session.options.difficulty_distribution == {
            Difficulty.CONCEPTUAL: 5,
            Difficulty.APPLIED: 5,
            Difficulty.ADVANCED: 0,
        }
        assert registry.get(session.id) is session

    def test_delete(self):
        registry = SessionRegistry(Settings(_env_file=None))
        session = registry.create()
        assert registry.delete(session.id)
        assert registry.get(session.id) is None
        assert not registry.delete(session.id)

    def test_capacity_evicts_least_recently_active(self):
        registry = SessionRegistry(Settings(_env_file=None, max_sessions=2))
        first = registry.create()
        second = registry.create()
        second.last_active_at = first.last_active_at - timedelta(minutes=5)

        third = registry.create()

        assert len(registry) == 2
        assert registry.get(second.id) is None
        assert registry.get(first.id) is first
        assert registry.get(third.id) is third

    def test_capacity_eviction_spares_busy_sessions(self):
        registry = SessionRegistry(Settings(_env_file=None, max_sessions=2))
        busy = registry.create()
        idle = registry.create()
        busy.pending_bulk = 1
        busy.last_active_at = idle.last_active_at - timedelta(minutes=5)

        newest = registry.create()

        assert registry.get(busy.id) is busy
        assert registry.get(idle.id) is None
        assert registry.get(newest.id) is newest

    def test_capacity_exceeded_when_every_session_is_busy(self):
        registry = SessionRegistry(Settings(_env_file=None, max_sessions=1))
        busy = registry.create()
        busy.pending_replacements = 1

        newest = registry.create()

        assert len(registry) == 2
        assert registry.get(busy.id) is busy
        assert registry.get(newest.id) is newest

    def test_idle_sessions_evicted(self):
        registry = SessionRegistry(Settings(_env_file=None, session_idle_hours=1))
        session = registry.create()
        later = datetime.now(timezone.utc) + timedelta(hours=2)

        assert registry.evict_idle(now=later) == 1
        assert registry.get(session.id) is None

    def test_busy_sessions_survive_idle_eviction(self):
        registry = SessionRegistry(Settings(_env_file=None, session_idle_hours=1))
        session = registry.create()
        session.pending_replacements = 1
        later = datetime.now(timezone.utc) + timedelta(hours=2)

        assert registry.evict_idle(now=later) == 0
        assert registry.get(session.id) is session

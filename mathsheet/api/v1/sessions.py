"""
Worksheet session endpoints.

Every mutating endpoint answers with the full session state. When an
operation fails the state still comes back, with the error message in
``error`` and the error's HTTP status.
"""

from io import BytesIO
from typing import Optional

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import JSONResponse, StreamingResponse

from mathsheet.api.deps import AppSettings, Catalog, Generator, Registry, Session
from mathsheet.export import DOCX_MEDIA_TYPE
from mathsheet.logging_config import get_logger
from mathsheet.orchestration import Outcome, WorksheetSession
from mathsheet.schemas.common import ErrorResponse
from mathsheet.schemas.session import (
    DifficultyUpdate,
    GradeUpdate,
    ReplaceRequest,
    SelectionUpdate,
    SessionStateResponse,
    SubTopicToggle,
    SubTopicsUpdate,
    UnitToggle,
)

router = APIRouter(responses={404: {"model": ErrorResponse}})
logger = get_logger(__name__)


def _state(session: WorksheetSession, outcome: Optional[Outcome] = None):
    body = SessionStateResponse.from_session(session, outcome)
    if outcome == Outcome.FAILED and session.error_status:
        return JSONResponse(
            status_code=session.error_status,
            content=body.model_dump(mode="json", by_alias=True),
        )
    return body


def _require_unit(catalog: Catalog, session: WorksheetSession, semester: str, unit: str) -> None:
    if not catalog.has_unit(session.options.grade, semester, unit):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown unit for {session.options.grade} {semester}: {unit}",
        )


def _require_sub_topics(catalog: Catalog, session: WorksheetSession, semester: str, unit: str, topics) -> None:
    known = set(catalog.sub_topics(session.options.grade, semester, unit))
    unknown = [t for t in topics if t not in known]
    if unknown:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown sub-topics for {unit}: {', '.join(unknown)}",
        )


# ── Lifecycle ────────────────────────────────────────────────────────


@router.post("", response_model=SessionStateResponse, status_code=status.HTTP_201_CREATED)
async def create_session(registry: Registry):
    """Start a worksheet session with the default options."""
    return SessionStateResponse.from_session(registry.create())


@router.get("/{session_id}", response_model=SessionStateResponse)
async def get_session(session: Session):
    return SessionStateResponse.from_session(session)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(session: Session, registry: Registry):
    registry.delete(session.id)


# ── Options ──────────────────────────────────────────────────────────


@router.put("/{session_id}/grade", response_model=SessionStateResponse)
async def set_grade(body: GradeUpdate, session: Session, catalog: Catalog):
    """Change grade. Selected units are dropped."""
    if not catalog.has_grade(body.grade):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown grade: {body.grade}",
        )
    session.touch()
    session.options.set_grade(body.grade)
    return SessionStateResponse.from_session(session)


@router.put("/{session_id}/units", response_model=SessionStateResponse)
async def toggle_unit(body: UnitToggle, session: Session, catalog: Catalog):
    if body.selected:
        _require_unit(catalog, session, body.semester, body.unit)
    session.touch()
    session.options.toggle_unit(body.unit, body.semester, body.selected)
    return SessionStateResponse.from_session(session)


@router.put("/{session_id}/units/sub-topics", response_model=SessionStateResponse)
async def set_sub_topics(body: SubTopicsUpdate, session: Session, catalog: Catalog):
    """Replace a selected unit's sub-topic filter. Empty means the whole unit."""
    _require_sub_topics(catalog, session, body.semester, body.unit, body.sub_topics)
    session.touch()
    session.options.set_sub_topics(body.unit, body.semester, body.sub_topics)
    return SessionStateResponse.from_session(session)


@router.post("/{session_id}/units/sub-topics/toggle", response_model=SessionStateResponse)
async def toggle_sub_topic(body: SubTopicToggle, session: Session, catalog: Catalog):
    _require_sub_topics(catalog, session, body.semester, body.unit, [body.sub_topic])
    session.touch()
    session.options.toggle_sub_topic(body.unit, body.semester, body.sub_topic)
    return SessionStateResponse.from_session(session)


@router.put("/{session_id}/difficulty", response_model=SessionStateResponse)
async def set_difficulty(body: DifficultyUpdate, session: Session, settings: AppSettings):
    """Set one tier's count, clamped to 0..DIFFICULTY_COUNT_MAX."""
    count = max(0, min(body.count, settings.difficulty_count_max))
    session.touch()
    session.options.set_difficulty_count(body.difficulty, count)
    return SessionStateResponse.from_session(session)


# ── Problems ─────────────────────────────────────────────────────────


@router.post("/{session_id}/generate", response_model=SessionStateResponse)
async def generate(session: Session, generator: Generator):
    """Generate a new problem set from the current options."""
    outcome = await session.create_problems(generator)
    return _state(session, outcome)


@router.post("/{session_id}/problems/{problem_id}/replace", response_model=SessionStateResponse)
async def replace_problem(problem_id: str, body: ReplaceRequest, session: Session, generator: Generator):
    """Regenerate one problem at the chosen difficulty, in place."""
    if problem_id not in session.problems:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Problem not found",
        )
    outcome = await session.replace_problem(problem_id, body.difficulty, generator)
    return _state(session, outcome)


@router.delete("/{session_id}/problems/{problem_id}", response_model=SessionStateResponse)
async def remove_problem(problem_id: str, session: Session):
    if not session.remove_problem(problem_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Problem not found",
        )
    return SessionStateResponse.from_session(session)


@router.put("/{session_id}/selection", response_model=SessionStateResponse)
async def select_problem(body: SelectionUpdate, session: Session):
    """Expand a problem; selecting the expanded one collapses it."""
    session.select_problem(body.problem_id)
    return SessionStateResponse.from_session(session)


# ── Export ───────────────────────────────────────────────────────────


@router.get("/{session_id}/export")
async def export_worksheet(session: Session, settings: AppSettings):
    """Download the current set as a .docx worksheet with answer key."""
    document = session.export_document()
    if document is None:
        return _state(session, Outcome.FAILED)

    logger.info(
        "Worksheet exported",
        extra={"session_id": session.id, "count": len(session.problems), "bytes": len(document)},
    )
    return StreamingResponse(
        BytesIO(document),
        media_type=DOCX_MEDIA_TYPE,
        headers={
            "Content-Disposition": f'attachment; filename="{settings.export_filename}"'
        },
    )

"""
Session API schemas.

Problems and options keep their camelCase wire form (``subTopic``,
``difficultyDistribution``); envelope fields are snake_case like the rest of
the API.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from mathsheet.ai.types import Difficulty
from mathsheet.orchestration import Outcome, WorksheetSession
from mathsheet.worksheet.models import Problem
from mathsheet.worksheet.options import GenerationOptions


class SessionStateResponse(BaseModel):
    """Everything a client needs to render a worksheet session."""

    id: str
    options: GenerationOptions
    total_count: int
    problems: List[Problem]
    selected_id: Optional[str] = None
    is_generating: bool = False
    is_loading: bool = False
    can_create: bool = False
    error: Optional[str] = None
    outcome: Optional[Outcome] = None

    @classmethod
    def from_session(
        cls,
        session: WorksheetSession,
        outcome: Optional[Outcome] = None,
    ) -> "SessionStateResponse":
        return cls(
            id=session.id,
            options=session.options,
            total_count=session.options.total_count,
            problems=list(session.problems.snapshot()),
            selected_id=session.problems.selected_id,
            is_generating=session.is_generating,
            is_loading=session.is_loading,
            can_create=session.can_create,
            error=session.error,
            outcome=outcome,
        )


class GradeUpdate(BaseModel):
    grade: str


class UnitToggle(BaseModel):
    unit: str
    semester: str
    selected: bool = True


class SubTopicsUpdate(BaseModel):
    unit: str
    semester: str
    sub_topics: List[str] = Field(default_factory=list)


class SubTopicToggle(BaseModel):
    unit: str
    semester: str
    sub_topic: str


class DifficultyUpdate(BaseModel):
    """Count for one tier. Out-of-range values are clamped, not rejected."""

    difficulty: Difficulty
    count: int


class ReplaceRequest(BaseModel):
    difficulty: Difficulty


class SelectionUpdate(BaseModel):
    """Problem to expand; the active id or null collapses."""

    problem_id: Optional[str] = None

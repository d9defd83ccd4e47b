"""
Worksheet domain records.

JSON field names are camelCase (``subTopic``, ``totalCount``) because the same
shapes travel to and from the generator; Python attributes stay snake_case.
"""

import uuid
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from mathsheet.ai.types import Difficulty


class WireModel(BaseModel):
    """Base for records exchanged as camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProblemDraft(WireModel):
    """A problem as the generator returns it, before an id is assigned."""

    model_config = ConfigDict(frozen=True)

    question: str
    answer: str
    grade: str
    semester: str
    unit: str
    sub_topic: str
    difficulty: Difficulty


class Problem(ProblemDraft):
    """A generated problem. Immutable; replacement creates a new one."""

    id: str

    @classmethod
    def from_draft(
        cls,
        draft: ProblemDraft,
        difficulty: Optional[Difficulty] = None,
    ) -> "Problem":
        """Assign a fresh id, optionally forcing the difficulty."""
        data = draft.model_dump(exclude={"id"})
        if difficulty is not None:
            data["difficulty"] = difficulty
        return cls(id=str(uuid.uuid4()), **data)

    def to_payload(self) -> dict:
        """Wire form without the id."""
        return self.model_dump(mode="json", by_alias=True, exclude={"id"})


class UnitSelection(WireModel):
    """A selected (unit, semester) pair. Empty sub_topics means the whole unit."""

    unit: str
    semester: str
    sub_topics: List[str] = Field(default_factory=list)

    @property
    def key(self) -> Tuple[str, str]:
        return (self.unit, self.semester)


class UnitTarget(WireModel):
    """A unit with its effective sub-topics, as sent to the generator."""

    semester: str
    unit: str
    sub_topics: List[str] = Field(default_factory=list)


class GenerationSpec(WireModel):
    """Everything the generator needs for one bulk request."""

    grade: str
    total_count: int
    unit_targets: List[UnitTarget]
    difficulty_counts: Dict[Difficulty, int]

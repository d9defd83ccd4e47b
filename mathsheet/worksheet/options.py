"""
Options model - the teacher's current selection of grade, units and
difficulty counts.
"""

from typing import Dict, List, Optional

from pydantic import Field, field_validator

from mathsheet.ai.types import Difficulty
from mathsheet.errors import ValidationError
from mathsheet.worksheet.models import UnitSelection, WireModel

NO_UNIT_SELECTED = "하나 이상의 단원을 선택해주세요."
NO_PROBLEMS_REQUESTED = "하나 이상의 문제를 생성하도록 설정해주세요."


def _default_distribution() -> Dict[Difficulty, int]:
    return {level: 0 for level in Difficulty}


class GenerationOptions(WireModel):
    """
    Mutable selection state owned by one worksheet session.

    Units are unique per (unit, semester) and are scoped to the grade:
    changing the grade drops them.
    """

    grade: str
    units: List[UnitSelection] = Field(default_factory=list)
    difficulty_distribution: Dict[Difficulty, int] = Field(default_factory=_default_distribution)

    @field_validator("difficulty_distribution")
    @classmethod
    def _complete_distribution(cls, value: Dict[Difficulty, int]) -> Dict[Difficulty, int]:
        for count in value.values():
            if count < 0:
                raise ValueError("difficulty counts must be non-negative")
        return {level: value.get(level, 0) for level in Difficulty}

    @property
    def total_count(self) -> int:
        return sum(self.difficulty_distribution.values())

    def find_unit(self, unit: str, semester: str) -> Optional[UnitSelection]:
        for selection in self.units:
            if selection.key == (unit, semester):
                return selection
        return None

    def set_grade(self, grade: str) -> None:
        """Switch grade. Unit selections belong to the old grade and are dropped."""
        self.grade = grade
        self.units = []

    def toggle_unit(self, unit: str, semester: str, selected: bool) -> None:
        """Select or deselect a unit. Idempotent in both directions."""
        present = self.find_unit(unit, semester) is not None
        if selected and not present:
            self.units.append(UnitSelection(unit=unit, semester=semester))
        elif not selected and present:
            self.units = [u for u in self.units if u.key != (unit, semester)]

    def set_sub_topics(self, unit: str, semester: str, sub_topics: List[str]) -> None:
        selection = self.find_unit(unit, semester)
        if selection is None:
            return
        # dict.fromkeys keeps first-seen order while dropping repeats
        selection.sub_topics = list(dict.fromkeys(sub_topics))

    def toggle_sub_topic(self, unit: str, semester: str, sub_topic: str) -> None:
        selection = self.find_unit(unit, semester)
        if selection is None:
            return
        if sub_topic in selection.sub_topics:
            remaining = [t for t in selection.sub_topics if t != sub_topic]
        else:
            remaining = selection.sub_topics + [sub_topic]
        self.set_sub_topics(unit, semester, remaining)

    def set_difficulty_count(self, level: Difficulty, count: int) -> None:
        """Set one tier's count. Range clamping is the caller's job."""
        if count < 0:
            raise ValueError(f"difficulty count must be non-negative, got {count}")
        self.difficulty_distribution[Difficulty(level)] = count


def validate_options(options: GenerationOptions) -> None:
    """Raise ValidationError unless the options can produce a request."""
    if not options.units:
        raise ValidationError(NO_UNIT_SELECTED)
    if options.total_count <= 0:
        raise ValidationError(NO_PROBLEMS_REQUESTED)

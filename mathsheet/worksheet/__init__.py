"""Worksheet state - options model, request builder and problem set store."""

from mathsheet.worksheet.models import GenerationSpec, Problem, ProblemDraft, UnitSelection, UnitTarget
from mathsheet.worksheet.options import GenerationOptions, validate_options
from mathsheet.worksheet.problem_set import ProblemSet
from mathsheet.worksheet.spec_builder import build_generation_spec

__all__ = [
    "GenerationOptions",
    "GenerationSpec",
    "Problem",
    "ProblemDraft",
    "ProblemSet",
    "UnitSelection",
    "UnitTarget",
    "build_generation_spec",
    "validate_options",
]

"""Curriculum catalog - static grade/semester/unit/sub-topic lookup."""

from mathsheet.curriculum.catalog import CurriculumCatalog, MATH_CONCEPTS, get_catalog

__all__ = [
    "CurriculumCatalog",
    "MATH_CONCEPTS",
    "get_catalog",
]

"""Curriculum endpoints."""

from fastapi import APIRouter, HTTPException, status

from mathsheet.ai.types import Difficulty
from mathsheet.api.deps import Catalog

router = APIRouter()


@router.get("/curriculum/grades")
async def list_grades(catalog: Catalog):
    """Grades in curriculum order."""
    return {"grades": catalog.grades}


@router.get("/curriculum/grades/{grade}")
async def get_grade(grade: str, catalog: Catalog):
    """Semester -> unit -> sub-topics for one grade."""
    if not catalog.has_grade(grade):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown grade: {grade}",
        )
    return {"grade": grade, "semesters": catalog.to_dict(grade)}


@router.get("/curriculum/difficulties")
async def list_difficulties():
    return {
        "difficulties": [
            {"value": level.value, "label": level.label, "description": level.description}
            for level in Difficulty
        ]
    }

"""
API v1 routes.
"""

from fastapi import APIRouter

from mathsheet.api.v1 import curriculum, generator, sessions

router = APIRouter()

router.include_router(curriculum.router, tags=["Curriculum"])
router.include_router(sessions.router, prefix="/sessions", tags=["Sessions"])
router.include_router(generator.router, tags=["Generator"])

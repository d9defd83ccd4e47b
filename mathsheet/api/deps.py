"""
FastAPI dependencies for settings, the session registry and the generator.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from mathsheet.ai.generator import GeneratorPort, create_generator
from mathsheet.ai.openai_generator import OpenAIGenerator
from mathsheet.config import Settings, get_settings
from mathsheet.curriculum import CurriculumCatalog, get_catalog
from mathsheet.orchestration import SessionRegistry, WorksheetSession


AppSettings = Annotated[Settings, Depends(get_settings)]
Catalog = Annotated[CurriculumCatalog, Depends(get_catalog)]


def get_registry(request: Request) -> SessionRegistry:
    """Session registry created in the app lifespan."""
    registry = getattr(request.app.state, "registry", None)
    if registry is None:
        registry = request.app.state.registry = SessionRegistry(get_settings(), get_catalog())
    return registry


Registry = Annotated[SessionRegistry, Depends(get_registry)]


def get_generator(request: Request, settings: AppSettings) -> GeneratorPort:
    """Generator adapter chosen by GENERATOR_BACKEND, built once per app."""
    generator = getattr(request.app.state, "generator", None)
    if generator is None:
        generator = request.app.state.generator = create_generator(settings)
    return generator


Generator = Annotated[GeneratorPort, Depends(get_generator)]


def get_service_generator(request: Request, settings: AppSettings) -> GeneratorPort:
    """
    Generator behind the /generator endpoint.

    Always the direct OpenAI adapter: this endpoint is what the remote
    adapter talks to.
    """
    generator = getattr(request.app.state, "service_generator", None)
    if generator is None:
        generator = request.app.state.service_generator = OpenAIGenerator(settings)
    return generator


ServiceGenerator = Annotated[GeneratorPort, Depends(get_service_generator)]


def get_session_or_404(session_id: str, registry: Registry) -> WorksheetSession:
    session = registry.get(session_id)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session not found",
        )
    return session


Session = Annotated[WorksheetSession, Depends(get_session_or_404)]

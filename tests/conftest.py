"""
Pytest fixtures for worksheet service tests.
"""

import os
from typing import List

# Before any settings are read
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["GENERATOR_BACKEND"] = "openai"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from mathsheet.config import get_settings

get_settings.cache_clear()

from mathsheet.ai.types import Difficulty
from mathsheet.worksheet.models import Problem
from tests.fakes import FakeGenerator, make_problem


@pytest.fixture
def fake_generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture
def sample_problems() -> List[Problem]:
    return [
        make_problem(question="문제 1", answer="3 x 4 = 12. 답: 12개"),
        make_problem(question="문제 2", answer="5cm", difficulty=Difficulty.APPLIED),
        make_problem(question="문제 3", answer="20 - 8 = 12. 답: 12명", difficulty=Difficulty.ADVANCED),
    ]


@pytest_asyncio.fixture
async def client(fake_generator: FakeGenerator):
    """Async client against the app with the generator replaced by a fake."""
    from mathsheet.api.deps import get_generator, get_service_generator
    from mathsheet.main import app
    from mathsheet.orchestration import SessionRegistry

    app.state.registry = SessionRegistry(get_settings())
    app.dependency_overrides[get_generator] = lambda: fake_generator
    app.dependency_overrides[get_service_generator] = lambda: fake_generator
    try:
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()

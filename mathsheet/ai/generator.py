"""
Generator port - the only way the worksheet core talks to an LLM.

Adapters:
- OpenAIGenerator: calls OpenAI directly (server side, needs OPENAI_API_KEY)
- RemoteGenerator: posts {action, payload} to a deployed /generator endpoint
"""

from collections import Counter
from typing import List, Optional, Protocol

from mathsheet.ai.types import Difficulty
from mathsheet.config import Settings, get_settings
from mathsheet.logging_config import get_logger
from mathsheet.worksheet.models import GenerationSpec, Problem

logger = get_logger(__name__)


class GeneratorPort(Protocol):
    """Capability interface for problem generation."""

    async def generate_set(self, spec: GenerationSpec) -> List[Problem]:
        """Generate a whole problem set. Ids are freshly assigned."""
        ...

    async def replace_one(self, problem: Problem, difficulty: Difficulty) -> Problem:
        """Generate one problem for the same sub-topic at ``difficulty``."""
        ...


def log_distribution_drift(spec: GenerationSpec, problems: List[Problem]) -> None:
    """
    Warn when the generator did not honour the requested counts.

    Count fidelity is the generator's responsibility; nothing is repaired.
    """
    produced = Counter(p.difficulty for p in problems)
    requested = {level: count for level, count in spec.difficulty_counts.items() if count}
    if len(problems) == spec.total_count and all(
        produced.get(level, 0) == requested.get(level, 0) for level in Difficulty
    ):
        return
    logger.warning(
        "Generator output differs from requested distribution",
        extra={
            "requested_total": spec.total_count,
            "produced_total": len(problems),
            "requested": {level.value: count for level, count in requested.items()},
            "produced": {level.value: count for level, count in produced.items()},
        },
    )


def create_generator(settings: Optional[Settings] = None) -> GeneratorPort:
    """Build the adapter selected by ``settings.generator_backend``."""
    settings = settings or get_settings()
    backend = settings.generator_backend.lower()
    if backend == "remote":
        from mathsheet.ai.remote_generator import RemoteGenerator
        return RemoteGenerator(
            settings.generator_service_url,
            timeout=settings.generator_service_timeout_seconds,
        )
    if backend != "openai":
        raise ValueError(f"Unknown generator backend: {settings.generator_backend}")
    from mathsheet.ai.openai_generator import OpenAIGenerator
    return OpenAIGenerator(settings)

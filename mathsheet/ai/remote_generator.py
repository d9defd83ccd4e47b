"""
Remote adapter for the generator port.

Posts ``{"action": ..., "payload": ...}`` to a deployed generator endpoint
(see ``mathsheet.api.v1.generator``) and validates what comes back. Lets a
front-end host run without holding the OpenAI key itself.
"""

from typing import Any, List, Optional

import httpx

from mathsheet.ai.generator import log_distribution_drift
from mathsheet.ai.parsing import parse_problem_set, parse_replacement
from mathsheet.ai.types import Difficulty
from mathsheet.errors import GENERATE_FAILED, REPLACE_FAILED, MalformedResponseError, TransportError
from mathsheet.logging_config import get_logger
from mathsheet.worksheet.models import GenerationSpec, Problem

logger = get_logger(__name__)


class RemoteGenerator:
    """Problem generator that delegates to a generator service over HTTP."""

    def __init__(
        self,
        url: str,
        timeout: float = 90.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.timeout = timeout
        self._transport = transport

    async def _call(self, action: str, payload: Any, fallback_message: str) -> Any:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.url, json={"action": action, "payload": payload})
        except httpx.HTTPError as exc:
            logger.error("Generator service unreachable: %s", exc, extra={"action": action})
            raise TransportError() from exc

        try:
            data = response.json()
        except ValueError:
            data = None

        if not response.is_success:
            message = data.get("message") if isinstance(data, dict) else None
            logger.error(
                "Generator service returned HTTP %s",
                response.status_code,
                extra={"action": action, "service_message": message},
            )
            raise TransportError(message or fallback_message)

        if data is None:
            logger.error("Generator service returned non-JSON body", extra={"action": action})
            raise MalformedResponseError()
        return data

    async def generate_set(self, spec: GenerationSpec) -> List[Problem]:
        data = await self._call(
            "generate",
            spec.model_dump(mode="json", by_alias=True),
            GENERATE_FAILED,
        )
        # The service answers with a bare array of problems.
        if isinstance(data, list):
            data = {"problems": data}
        problems = parse_problem_set(data)
        log_distribution_drift(spec, problems)
        return problems

    async def replace_one(self, problem: Problem, difficulty: Difficulty) -> Problem:
        data = await self._call(
            "replace",
            {"problem": problem.to_payload(), "newDifficulty": difficulty.value},
            REPLACE_FAILED,
        )
        return parse_replacement(data, difficulty)

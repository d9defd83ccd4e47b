"""
OpenAI adapter for the generator port.

Uses Chat Completions with a strict JSON-schema response format so the model
returns only the problem shape. Failures map onto the error taxonomy:
missing key -> ConfigurationError, API/network failure -> TransportError,
bad payload -> MalformedResponseError.
"""

from typing import Any, Dict, List, Optional

import openai
from openai import AsyncOpenAI

from mathsheet.ai.generator import log_distribution_drift
from mathsheet.ai.parsing import load_json, parse_problem_set, parse_replacement
from mathsheet.ai.prompts import (
    PROBLEM_SCHEMA,
    PROBLEM_SET_SCHEMA,
    SYSTEM_PROMPT,
    build_generation_prompt,
    build_replacement_prompt,
    json_schema_format,
)
from mathsheet.ai.types import Difficulty
from mathsheet.config import Settings, get_settings
from mathsheet.errors import ConfigurationError, TransportError
from mathsheet.logging_config import get_logger
from mathsheet.worksheet.models import GenerationSpec, Problem

logger = get_logger(__name__)


class OpenAIGenerator:
    """Problem generator backed by the OpenAI API."""

    def __init__(self, settings: Optional[Settings] = None, client: Optional[AsyncOpenAI] = None):
        self.settings = settings or get_settings()
        self._client = client

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self.settings.generator_configured:
                logger.error("OPENAI_API_KEY is not set on the server")
                raise ConfigurationError()
            self._client = AsyncOpenAI(
                api_key=self.settings.openai_api_key,
                timeout=self.settings.openai_timeout_seconds,
                max_retries=0,
            )
        return self._client

    async def _complete(
        self,
        prompt: str,
        response_format: Dict[str, Any],
        temperature: float,
    ) -> str:
        client = self._get_client()
        try:
            response = await client.chat.completions.create(
                model=self.settings.openai_model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=temperature,
                response_format=response_format,
            )
        except openai.APIStatusError as exc:
            logger.error("OpenAI returned HTTP %s: %s", exc.status_code, exc.message)
            raise TransportError() from exc
        except openai.APIError as exc:
            logger.error("OpenAI request failed: %s", exc)
            raise TransportError() from exc
        return response.choices[0].message.content or ""

    async def generate_set(self, spec: GenerationSpec) -> List[Problem]:
        raw_text = await self._complete(
            build_generation_prompt(spec),
            json_schema_format("problem_set", PROBLEM_SET_SCHEMA),
            self.settings.generation_temperature,
        )
        problems = parse_problem_set(load_json(raw_text))
        log_distribution_drift(spec, problems)
        logger.info(
            "Generated %d problems",
            len(problems),
            extra={"grade": spec.grade, "requested_total": spec.total_count},
        )
        return problems

    async def replace_one(self, problem: Problem, difficulty: Difficulty) -> Problem:
        raw_text = await self._complete(
            build_replacement_prompt(problem, difficulty),
            json_schema_format("problem", PROBLEM_SCHEMA),
            self.settings.replacement_temperature,
        )
        return parse_replacement(load_json(raw_text), difficulty)

"""
Validation of generator output into typed problems.
"""

import json
from typing import Any, List

from pydantic import ValidationError as SchemaValidationError

from mathsheet.ai.types import Difficulty
from mathsheet.errors import MalformedResponseError
from mathsheet.logging_config import get_logger
from mathsheet.worksheet.models import Problem, ProblemDraft

logger = get_logger(__name__)

_SNIPPET_CHARS = 300


def load_json(raw_text: str) -> Any:
    """Parse generator text as JSON, raising MalformedResponseError otherwise."""
    try:
        return json.loads((raw_text or "").strip())
    except json.JSONDecodeError as exc:
        logger.error(
            "Generator returned non-JSON output: %s",
            exc,
            extra={"snippet": (raw_text or "")[:_SNIPPET_CHARS]},
        )
        raise MalformedResponseError() from exc


def _draft(item: Any) -> ProblemDraft:
    if not isinstance(item, dict):
        raise MalformedResponseError()
    try:
        return ProblemDraft.model_validate(item)
    except SchemaValidationError as exc:
        logger.error(
            "Generator problem failed schema validation: %s",
            exc.errors(include_url=False),
            extra={"snippet": json.dumps(item, ensure_ascii=False)[:_SNIPPET_CHARS]},
        )
        raise MalformedResponseError() from exc


def parse_problem_set(data: Any) -> List[Problem]:
    """
    Turn ``{"problems": [...]}`` into problems with fresh ids.

    Ids present in the response are ignored.
    """
    if not isinstance(data, dict) or not isinstance(data.get("problems"), list):
        logger.error(
            "Generator response has no 'problems' array",
            extra={"response_type": type(data).__name__},
        )
        raise MalformedResponseError(
            "Invalid response format from API: 'problems' array not found."
        )
    return [Problem.from_draft(_draft(item)) for item in data["problems"]]


def parse_replacement(data: Any, difficulty: Difficulty) -> Problem:
    """
    Turn a single problem object into a Problem with a fresh id.

    The difficulty is forced to the one that was requested; the field the
    generator echoes back is not trusted, so it is overwritten before
    validation.
    """
    if isinstance(data, dict):
        data = {**data, "difficulty": difficulty.value}
    return Problem.from_draft(_draft(data), difficulty=difficulty)

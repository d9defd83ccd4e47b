"""
Generator endpoint schemas.

The endpoint speaks the wire format used by ``RemoteGenerator``:
``{"action": "generate" | "replace", "payload": ...}`` in, bare problem JSON
(without ids) or ``{"message": ...}`` out.
"""

from typing import Any

from pydantic import BaseModel

from mathsheet.ai.types import Difficulty
from mathsheet.worksheet.models import ProblemDraft, WireModel


class GeneratorRequest(BaseModel):
    action: str
    payload: Any = None


class ReplacePayload(WireModel):
    problem: ProblemDraft
    new_difficulty: Difficulty


class GeneratorMessage(BaseModel):
    message: str

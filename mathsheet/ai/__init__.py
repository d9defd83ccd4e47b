"""
AI layer - generator port, adapters, prompts and response validation.

Import adapters from their modules; this package only re-exports the shared
types so that domain models can depend on it without import cycles.
"""

from mathsheet.ai.types import DIFFICULTY_DESCRIPTIONS, DIFFICULTY_LABELS, Difficulty

__all__ = [
    "DIFFICULTY_DESCRIPTIONS",
    "DIFFICULTY_LABELS",
    "Difficulty",
]

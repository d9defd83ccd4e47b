"""Session orchestration - per-user worksheet state and its registry."""

from mathsheet.orchestration.registry import SessionRegistry, default_options
from mathsheet.orchestration.session import Outcome, WorksheetSession

__all__ = [
    "Outcome",
    "SessionRegistry",
    "WorksheetSession",
    "default_options",
]

"""
Shared AI types - difficulty tiers used by prompts, models and the API.
"""

from enum import Enum
from typing import Dict


class Difficulty(str, Enum):
    """Difficulty tier of a generated problem."""
    CONCEPTUAL = "Conceptual"
    APPLIED = "Applied"
    ADVANCED = "Advanced"

    @property
    def label(self) -> str:
        return DIFFICULTY_LABELS[self]

    @property
    def description(self) -> str:
        return DIFFICULTY_DESCRIPTIONS[self]


DIFFICULTY_LABELS: Dict[Difficulty, str] = {
    Difficulty.CONCEPTUAL: "1단계: 개념",
    Difficulty.APPLIED: "2단계: 응용",
    Difficulty.ADVANCED: "3단계: 심화",
}

# Definitions handed to the generator so each tier means the same thing on
# every request.
DIFFICULTY_DESCRIPTIONS: Dict[Difficulty, str] = {
    Difficulty.CONCEPTUAL: (
        "단원의 핵심 개념이나 기본 계산 한 가지를 그대로 적용하면 해결되는 문제. "
        "문장이 짧고 필요한 정보가 모두 드러나 있다."
    ),
    Difficulty.APPLIED: (
        "실생활 상황을 식으로 바꾸어 두세 단계의 계산을 거쳐야 하는 문제. "
        "단위 변환이나 두 가지 연산의 결합이 포함될 수 있다."
    ),
    Difficulty.ADVANCED: (
        "조건이 여러 개이거나 거꾸로 생각하기, 규칙 찾기, 경우 나누기 등 "
        "사고력이 필요한 문제. 풀이 과정을 스스로 설계해야 한다."
    ),
}

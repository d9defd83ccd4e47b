"""Unit tests for generator response validation."""

import pytest

from mathsheet.ai.parsing import load_json, parse_problem_set, parse_replacement
from mathsheet.ai.prompts import build_generation_prompt, build_replacement_prompt
from mathsheet.ai.types import Difficulty
from mathsheet.errors import MalformedResponseError
from mathsheet.worksheet.models import GenerationSpec, UnitTarget
from tests.fakes import make_problem


def _item(**overrides) -> dict:
    item = {
        "question": "연필이 24자루 있습니다. 3명이 똑같이 나누면 몇 자루씩 가질까요?",
        "answer": "24 ÷ 3 = 8. 답: 8자루",
        "grade": "3학년",
        "semester": "1학기",
        "unit": "나눗셈",
        "subTopic": "똑같이 나누기",
        "difficulty": "Conceptual",
    }
    item.update(overrides)
    return item


class TestLoadJson:
    """Tests for load_json."""

    def test_valid(self):
        assert load_json(' {"problems": []} \n') == {"problems": []}

    def test_not_json(self):
        with pytest.raises(MalformedResponseError):
            load_json("Here are your problems: ...")

    def test_empty(self):
        with pytest.raises(MalformedResponseError):
            load_json("")


class TestParseProblemSet:
    """Tests for parse_problem_set."""

    def test_assigns_fresh_ids(self):
        problems = parse_problem_set({"problems": [_item(), _item(id="from-model")]})
        assert len(problems) == 2
        assert problems[1].id != "from-model"
        assert problems[0].id != problems[1].id
        assert problems[0].sub_topic == "똑같이 나누기"

    def test_keeps_response_order(self):
        problems = parse_problem_set({"problems": [_item(question="a"), _item(question="b")]})
        assert [p.question for p in problems] == ["a", "b"]

    def test_empty_array_is_valid(self):
        assert parse_problem_set({"problems": []}) == []

    @pytest.mark.parametrize("data", [[_item()], "problems", None, {"items": []}, {"problems": "x"}])
    def test_missing_problems_array(self, data):
        with pytest.raises(MalformedResponseError) as exc_info:
            parse_problem_set(data)
        assert "'problems' array not found" in exc_info.value.message

    def test_invalid_difficulty(self):
        with pytest.raises(MalformedResponseError):
            parse_problem_set({"problems": [_item(difficulty="Expert")]})

    def test_missing_field(self):
        item = _item()
        del item["answer"]
        with pytest.raises(MalformedResponseError):
            parse_problem_set({"problems": [item]})

    def test_non_object_element(self):
        with pytest.raises(MalformedResponseError):
            parse_problem_set({"problems": ["just text"]})


class TestParseReplacement:
    """Tests for parse_replacement."""

    def test_forces_requested_difficulty(self):
        """Whatever difficulty the generator echoes, the requested one is kept."""
        problem = parse_replacement(_item(difficulty="Conceptual"), Difficulty.ADVANCED)
        assert problem.difficulty == Difficulty.ADVANCED

    def test_overrides_invalid_echoed_difficulty(self):
        problem = parse_replacement(_item(difficulty="???"), Difficulty.APPLIED)
        assert problem.difficulty == Difficulty.APPLIED

    def test_not_an_object(self):
        with pytest.raises(MalformedResponseError):
            parse_replacement([_item()], Difficulty.APPLIED)


class TestPrompts:
    """Tests for prompt construction."""

    def test_generation_prompt_lists_units_and_counts(self):
        spec = GenerationSpec(
            grade="3학년",
            total_count=4,
            unit_targets=[
                UnitTarget(semester="1학기", unit="나눗셈", sub_topics=["똑같이 나누기"]),
                UnitTarget(semester="2학기", unit="원", sub_topics=[]),
            ],
            difficulty_counts={Difficulty.CONCEPTUAL: 3, Difficulty.APPLIED: 1, Difficulty.ADVANCED: 0},
        )
        prompt = build_generation_prompt(spec)
        assert "3학년" in prompt
        assert "나눗셈" in prompt and "똑같이 나누기" in prompt
        assert "All sub-topics within the unit" in prompt
        assert "Total Problems to Generate:** 4" in prompt

    def test_replacement_prompt_carries_original(self):
        original = make_problem()
        prompt = build_replacement_prompt(original, Difficulty.ADVANCED)
        assert original.question in prompt
        assert original.sub_topic in prompt
        assert "Advanced" in prompt

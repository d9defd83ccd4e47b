"""Unit tests for DOCX export."""

from io import BytesIO

import pytest
from docx import Document
from docx.enum.section import WD_SECTION
from docx.oxml.ns import qn

from mathsheet.export import build_worksheet_layout, export_problem_set, extract_quick_answer
from tests.fakes import make_problem


def _columns(section) -> str:
    cols = section._sectPr.find(qn("w:cols"))
    return cols.get(qn("w:num")) if cols is not None else "1"


class TestExtractQuickAnswer:
    """Tests for the quick-answer rule."""

    @pytest.mark.parametrize("answer, expected", [
        ("3 x 4 = 12. 답: 12개", "12개"),
        ("12개", "12개"),
        ("계산하면 5입니다. 답: ", "계산하면 5입니다. 답: "),
        ("답: 3 / 답: 4", "3 / "),
    ])
    def test_examples(self, answer, expected):
        assert extract_quick_answer(answer) == expected


class TestWorksheetLayout:
    """Tests for build_worksheet_layout."""

    def test_numbering_is_shared_and_one_based(self, sample_problems):
        layout = build_worksheet_layout(sample_problems)
        assert [q.number for q in layout.questions] == [1, 2, 3]
        assert [s.number for s in layout.solutions] == [1, 2, 3]
        assert layout.questions[1].text == "문제 2"
        assert layout.solutions[0].text == "3 x 4 = 12. 답: 12개"

    def test_quick_answer_line(self, sample_problems):
        layout = build_worksheet_layout(sample_problems)
        assert layout.quick_answer_line == "1. 12개   2. 5cm   3. 12명"

    def test_is_deterministic(self, sample_problems):
        assert build_worksheet_layout(sample_problems) == build_worksheet_layout(sample_problems)


class TestRenderDocx:
    """Tests for the rendered document."""

    def _open(self, problems):
        return Document(BytesIO(export_problem_set(problems)))

    def test_two_sections_first_two_columns(self, sample_problems):
        doc = self._open(sample_problems)
        assert len(doc.sections) == 2
        assert _columns(doc.sections[0]) == "2"
        assert _columns(doc.sections[1]) == "1"
        assert doc.sections[1].start_type == WD_SECTION.NEW_PAGE

    def test_contents(self, sample_problems):
        texts = [p.text for p in self._open(sample_problems).paragraphs]
        assert "수학 문장제 문제지" in texts
        assert "정답 및 풀이" in texts
        assert "빠른 정답" in texts
        assert "상세 풀이" in texts
        assert "1. 12개   2. 5cm   3. 12명" in texts

    def test_each_problem_numbered_in_both_parts(self, sample_problems):
        texts = [p.text for p in self._open(sample_problems).paragraphs]
        for n, problem in enumerate(sample_problems, 1):
            assert f"{n}. {problem.question}" in texts
            assert f"{n}. {problem.answer}" in texts

    def test_questions_precede_answer_key(self, sample_problems):
        texts = [p.text for p in self._open(sample_problems).paragraphs]
        assert texts.index("3. 문제 3") < texts.index("정답 및 풀이")

    def test_single_problem(self):
        doc = self._open([make_problem(question="하나", answer="1")])
        texts = [p.text for p in doc.paragraphs]
        assert "1. 하나" in texts
        assert "1. 1" in texts

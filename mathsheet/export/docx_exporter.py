"""
Worksheet export - DOCX generation.

Layout is built first as a plain description (``WorksheetLayout``), then
rendered with python-docx:
- Question sheet: title, numbered questions, two columns, writing room
  after each question
- Answer key on a new page: quick answers on one line, then full solutions

Numbering is the 1-based position in the problem set and is shared by both
sections.
"""

from dataclasses import dataclass
from io import BytesIO
from typing import Iterable, Tuple

from docx import Document
from docx.enum.section import WD_SECTION
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Pt

from mathsheet.worksheet.models import Problem

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

ANSWER_MARKER = "답: "
QUICK_ANSWER_SEPARATOR = "   "

WORKSHEET_TITLE = "수학 문장제 문제지"
ANSWER_KEY_TITLE = "정답 및 풀이"
QUICK_ANSWER_HEADING = "빠른 정답"
SOLUTION_HEADING = "상세 풀이"

BODY_FONT = "맑은 고딕"
BODY_SIZE = Pt(10)
QUESTION_SPACE_AFTER = Pt(50)   # room for working
SOLUTION_SPACE_AFTER = Pt(10)
COLUMN_SPACE_TWIPS = 720        # 0.5 inch


def extract_quick_answer(answer: str) -> str:
    """
    Final answer for the quick-answer line.

    '3 x 4 = 12. 답: 12개' -> '12개'. Without the marker (or with nothing
    after it) the whole answer is used.
    """
    parts = answer.split(ANSWER_MARKER)
    if len(parts) > 1 and parts[1]:
        return parts[1]
    return answer


@dataclass(frozen=True)
class NumberedItem:
    number: int
    text: str

    @property
    def label(self) -> str:
        return f"{self.number}. "


@dataclass(frozen=True)
class WorksheetLayout:
    """Deterministic description of the exported document."""
    questions: Tuple[NumberedItem, ...]
    quick_answers: Tuple[NumberedItem, ...]
    solutions: Tuple[NumberedItem, ...]
    title: str = WORKSHEET_TITLE
    answer_key_title: str = ANSWER_KEY_TITLE

    @property
    def quick_answer_line(self) -> str:
        return QUICK_ANSWER_SEPARATOR.join(
            f"{item.label}{item.text}" for item in self.quick_answers
        )


def build_worksheet_layout(problems: Iterable[Problem]) -> WorksheetLayout:
    ordered = list(problems)
    return WorksheetLayout(
        questions=tuple(NumberedItem(i, p.question) for i, p in enumerate(ordered, 1)),
        quick_answers=tuple(
            NumberedItem(i, extract_quick_answer(p.answer)) for i, p in enumerate(ordered, 1)
        ),
        solutions=tuple(NumberedItem(i, p.answer) for i, p in enumerate(ordered, 1)),
    )


def _set_columns(section, count: int, space_twips: int = COLUMN_SPACE_TWIPS) -> None:
    sect_pr = section._sectPr
    cols = sect_pr.find(qn("w:cols"))
    if cols is None:
        cols = OxmlElement("w:cols")
        sect_pr.append(cols)
    cols.set(qn("w:num"), str(count))
    cols.set(qn("w:space"), str(space_twips))


def _use_korean_font(document) -> None:
    normal = document.styles["Normal"]
    normal.font.name = BODY_FONT
    normal.element.rPr.rFonts.set(qn("w:eastAsia"), BODY_FONT)


def _add_heading(document, text: str, level: int, before: int = 0, after: int = 0, center: bool = False):
    heading = document.add_heading(text, level)
    if center:
        heading.alignment = WD_ALIGN_PARAGRAPH.CENTER
    heading.paragraph_format.space_before = Pt(before)
    heading.paragraph_format.space_after = Pt(after)
    return heading


def _add_numbered(document, item: NumberedItem, space_after):
    paragraph = document.add_paragraph()
    number = paragraph.add_run(item.label)
    number.bold = True
    number.font.size = BODY_SIZE
    body = paragraph.add_run(item.text)
    body.font.size = BODY_SIZE
    paragraph.paragraph_format.space_after = space_after
    return paragraph


def render_docx(layout: WorksheetLayout) -> bytes:
    """Write the layout with python-docx and return the file bytes."""
    doc = Document()
    _use_korean_font(doc)

    # Question sheet
    questions_section = doc.sections[0]
    questions_section.start_type = WD_SECTION.CONTINUOUS
    _set_columns(questions_section, 2)

    _add_heading(doc, layout.title, 1, after=24, center=True)
    for item in layout.questions:
        _add_numbered(doc, item, QUESTION_SPACE_AFTER)

    # Answer key; add_section returns the new last section, which inherits
    # the two-column setting and has to be reset.
    answers_section = doc.add_section(WD_SECTION.NEW_PAGE)
    _set_columns(answers_section, 1)

    _add_heading(doc, layout.answer_key_title, 1, before=30, after=20, center=True)
    _add_heading(doc, QUICK_ANSWER_HEADING, 2, before=20, after=10)
    quick = doc.add_paragraph()
    quick.add_run(layout.quick_answer_line).font.size = BODY_SIZE
    quick.paragraph_format.space_after = Pt(30)

    _add_heading(doc, SOLUTION_HEADING, 2, before=20, after=10)
    for item in layout.solutions:
        _add_numbered(doc, item, SOLUTION_SPACE_AFTER)

    buffer = BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


def export_problem_set(problems: Iterable[Problem]) -> bytes:
    """Render an ordered problem set snapshot to .docx bytes."""
    return render_docx(build_worksheet_layout(problems))

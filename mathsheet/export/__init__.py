"""Document export."""

from mathsheet.export.docx_exporter import (
    DOCX_MEDIA_TYPE,
    WorksheetLayout,
    build_worksheet_layout,
    export_problem_set,
    extract_quick_answer,
    render_docx,
)

__all__ = [
    "DOCX_MEDIA_TYPE",
    "WorksheetLayout",
    "build_worksheet_layout",
    "export_problem_set",
    "extract_quick_answer",
    "render_docx",
]

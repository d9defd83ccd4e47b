"""
Generate a worksheet in-process and write the .docx, bypassing the API.

Usage:
    python scripts/generate_worksheet.py 3학년 1학기 "덧셈과 뺄셈" [out.docx]

Uses the generator selected by GENERATOR_BACKEND (.env is read).
"""
import asyncio
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from mathsheet.ai.generator import create_generator
from mathsheet.config import get_settings
from mathsheet.logging_config import configure_logging
from mathsheet.orchestration import Outcome, SessionRegistry


async def main(grade: str, semester: str, unit: str, out_path: str) -> int:
    settings = get_settings()
    configure_logging(log_level="INFO", environment="development")

    session = SessionRegistry(settings).create()
    session.options.set_grade(grade)
    session.options.toggle_unit(unit, semester, True)
    print(f"Requesting {session.options.total_count} problems for {grade} {semester} {unit}")

    outcome = await session.create_problems(create_generator(settings))
    if outcome != Outcome.APPLIED:
        print(f"Generation failed: {session.error}")
        return 1

    for i, problem in enumerate(session.problems, 1):
        print(f"  {i}. [{problem.difficulty.label}] {problem.sub_topic}: {problem.question[:60]}")

    document = session.export_document()
    with open(out_path, "wb") as fh:
        fh.write(document)
    print(f"Wrote {out_path} ({len(document)} bytes)")
    return 0


if __name__ == "__main__":
    if len(sys.argv) < 4:
        print(__doc__)
        sys.exit(2)
    out = sys.argv[4] if len(sys.argv) > 4 else get_settings().export_filename
    sys.exit(asyncio.run(main(sys.argv[1], sys.argv[2], sys.argv[3], out)))

"""
Generation request builder - turns the options model into a GenerationSpec.
"""

from typing import Optional

from mathsheet.curriculum import CurriculumCatalog, get_catalog
from mathsheet.worksheet.models import GenerationSpec, UnitTarget
from mathsheet.worksheet.options import GenerationOptions, validate_options


def build_generation_spec(
    options: GenerationOptions,
    catalog: Optional[CurriculumCatalog] = None,
) -> GenerationSpec:
    """
    Resolve effective sub-topics and counts for one bulk request.

    Counts are not partitioned across units here; the generator is asked to
    spread the problems evenly and to honour the per-difficulty counts.

    Raises:
        ValidationError: no unit selected, or zero problems requested
    """
    validate_options(options)
    catalog = catalog or get_catalog()

    targets = []
    for selection in options.units:
        sub_topics = selection.sub_topics or catalog.sub_topics(
            options.grade, selection.semester, selection.unit
        )
        targets.append(UnitTarget(
            semester=selection.semester,
            unit=selection.unit,
            sub_topics=list(sub_topics),
        ))

    return GenerationSpec(
        grade=options.grade,
        total_count=options.total_count,
        unit_targets=targets,
        difficulty_counts=dict(options.difficulty_distribution),
    )

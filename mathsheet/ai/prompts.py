"""
Prompt and response-schema definitions for problem generation.
"""

from typing import Any, Dict

from mathsheet.ai.types import Difficulty
from mathsheet.worksheet.models import GenerationSpec, Problem

SYSTEM_PROMPT = (
    "You are an expert AI specializing in creating age-appropriate math word "
    "problems for Korean elementary school students. Output only JSON matching "
    "the requested schema, with no surrounding prose or markdown."
)

PROBLEM_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "question": {"type": "string", "description": "The math word problem text."},
        "answer": {
            "type": "string",
            "description": (
                "The detailed answer, including the formula and the final result "
                "with units (e.g., '3 x 4 = 12. 답: 12개')."
            ),
        },
        "grade": {"type": "string"},
        "semester": {"type": "string"},
        "unit": {"type": "string"},
        "subTopic": {"type": "string", "description": "The specific sub-topic from the curriculum."},
        "difficulty": {"type": "string", "enum": [d.value for d in Difficulty]},
    },
    "required": ["question", "answer", "grade", "semester", "unit", "subTopic", "difficulty"],
    "additionalProperties": False,
}

PROBLEM_SET_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "problems": {"type": "array", "items": PROBLEM_SCHEMA},
    },
    "required": ["problems"],
    "additionalProperties": False,
}


def json_schema_format(name: str, schema: Dict[str, Any]) -> Dict[str, Any]:
    """Chat Completions ``response_format`` for a strict JSON schema."""
    return {
        "type": "json_schema",
        "json_schema": {"name": name, "schema": schema, "strict": True},
    }


def build_generation_prompt(spec: GenerationSpec) -> str:
    unit_lines = "\n".join(
        f"    - Semester: {t.semester}, Unit: {t.unit} "
        f"(Sub-topics: {', '.join(t.sub_topics) or 'All sub-topics within the unit'})"
        for t in spec.unit_targets
    )
    difficulty_lines = "\n".join(
        f"    - **{level.label}** ({level.value}): {count} 문제\n"
        f"      - *정의:* {level.description}"
        for level, count in spec.difficulty_counts.items()
        if count > 0
    )
    total = spec.total_count

    return f"""
Your task is to generate a set of problems based on the user's specifications.

**Generation Criteria:**
1.  **Total Problems to Generate:** {total}
2.  **Grade Level:** {spec.grade}
3.  **Target Semesters, Units, and Sub-topics:**
{unit_lines}
4.  **Difficulty Level Distribution & Definitions:**
{difficulty_lines}

**Instructions:**
- Create a total of {total} distinct math word problems that fit all the criteria above.
- Strictly adhere to the number of problems required for each difficulty level.
- Ensure the problems are creative, engaging, and contextually relevant for Korean elementary students.
- The numbers used in the problems should be appropriate for the specified grade level.
- The answer must include both the calculation process and the final answer with the correct units, ending with '답: <final answer>'.
- Distribute the problems evenly across the selected units and sub-topics.
- The output MUST be a JSON object containing a single key "problems" which is an array of problem objects. Do not output any other text or markdown.
"""


def build_replacement_prompt(problem: Problem, difficulty: Difficulty) -> str:
    return f"""
Your task is to create a new, unique math problem that is different from the one provided below, but covers the same learning objective with a new difficulty.

**Original Problem (for reference, do not copy):**
"{problem.question}"

**Criteria for the New Problem:**
1.  **Grade Level:** {problem.grade}
2.  **Semester:** {problem.semester}
3.  **Unit:** {problem.unit}
4.  **Specific Sub-topic:** {problem.sub_topic}
5.  **NEW Difficulty Level:** {difficulty.value}
    - **Definition:** {difficulty.description}

**Instructions:**
- Generate exactly ONE new word problem with the new difficulty: {difficulty.value}.
- The new problem must be thematically and numerically different from the original.
- The answer must include the calculation process and end with '답: <final answer>'.
- The output must be a single JSON object. Do not output any other text or markdown.
"""

"""
Model Response Extraction

Turns the free-text completion returned by the grading model into a
structured grading record. The parser is intentionally permissive: it looks
for the first ``grade: <number>`` phrase for the overall grade and, for each
rubric criterion, the first ``<criteria> ...: <number> [points]`` phrase.

Criterion labels are matched as plain substrings, so a short label can match
inside a longer word ("Art" in "Article"). Rubric authors are expected to use
distinctive labels.

Example:
    >>> result = extract_grading("Grade: 85\\nClarity: 40 points.", rubric, 100)
    >>> result.overall_grade
    85.0
"""

import re
from typing import List, Optional

from pydantic import BaseModel, Field

GRADE_PATTERN = re.compile(r"grade:?\s*(\d+\.?\d*)", re.IGNORECASE)

# Sentence ends at ., ! or ? followed by whitespace
SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+")


class RubricGrade(BaseModel):
    """Score and feedback for one rubric criterion."""
    criteria: str
    score: float = Field(allow_inf_nan=False)
    feedback: str = ""


class GradingExtraction(BaseModel):
    """Structured result of parsing a grading completion."""
    overall_grade: Optional[float] = None
    feedback: str = ""
    rubric_grades: List[RubricGrade] = Field(default_factory=list)


def criterion_pattern(criteria: str) -> re.Pattern:
    """Pattern for a criterion label followed by its numeric score."""
    return re.compile(
        re.escape(criteria) + r"[^:]*:?\s*(\d+\.?\d*)\s*(?:points|point|pts|pt)?",
        re.IGNORECASE,
    )


def split_sentences(text: str) -> List[str]:
    return [s for s in SENTENCE_BOUNDARY.split(text.strip()) if s]


def extract_overall_grade(text: str) -> Optional[float]:
    """First ``grade`` figure in the text, unvalidated, or None."""
    match = GRADE_PATTERN.search(text)
    if not match:
        return None
    return float(match.group(1))


def extract_rubric_grades(text: str, rubric) -> List[RubricGrade]:
    """Per-criterion scores in rubric order; unmatched criteria are omitted."""
    rubric_grades = []
    sentences = None

    for item in rubric:
        criteria = item["criteria"]
        match = criterion_pattern(criteria).search(text)
        if not match:
            continue

        if sentences is None:
            sentences = split_sentences(text)
        label = criteria.lower()
        relevant = [sentence for sentence in sentences if label in sentence.lower()]

        rubric_grades.append(RubricGrade(
            criteria=criteria,
            score=float(match.group(1)),
            feedback=" ".join(relevant),
        ))

    return rubric_grades


def extract_grading(raw_text: str, rubric, total_points: float) -> GradingExtraction:
    """
    Parse a grading completion into an overall grade, feedback and rubric grades.

    Args:
        raw_text: The model's completion, unmodified.
        rubric: Ordered rubric items (dicts with a ``criteria`` key, or
            :class:`~gradebook.models.RubricItem` instances).
        total_points: The assignment's maximum score. Not used to clamp or
            reject the extracted grade; range checks belong to the caller.

    Returns:
        GradingExtraction whose ``feedback`` is the full raw text. A missing
        grade is ``None`` and a criterion without a score is left out; neither
        raises.
    """
    items = [item.model_dump() if isinstance(item, BaseModel) else item for item in rubric or []]
    return GradingExtraction(
        overall_grade=extract_overall_grade(raw_text),
        feedback=raw_text,
        rubric_grades=extract_rubric_grades(raw_text, items),
    )

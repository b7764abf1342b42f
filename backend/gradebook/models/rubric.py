"""Rubric items attached to assignments."""

from typing import Optional

from pydantic import BaseModel, Field


class RubricItem(BaseModel):
    """A single weighted grading criterion.

    Weights are points for the criterion and are not required to sum to 100.
    """
    criteria: str = Field(..., min_length=1)
    weight: float = Field(..., allow_inf_nan=False)
    description: Optional[str] = None


def validate_rubric(rubric):
    """Validate rubric structure.

    Returns a ``(is_valid, message)`` tuple. An empty rubric is valid; an
    assignment may be graded without per-criterion scores.
    """
    seen = set()
    for i, item in enumerate(rubric):
        if not isinstance(item, dict):
            return False, f"Rubric item {i} must be a dictionary"

        for field in ('criteria', 'weight'):
            if field not in item:
                return False, f"Rubric item {i} missing required field: {field}"

        label = item['criteria']
        if not isinstance(label, str) or not label.strip():
            return False, f"Rubric item {i} criteria must be a non-empty string"
        if label in seen:
            return False, f"Duplicate rubric criteria: {label}"
        seen.add(label)

        if isinstance(item['weight'], bool) or not isinstance(item['weight'], (int, float)):
            return False, f"Rubric item {i} weight must be a number"

    return True, "Valid rubric"

"""Prompt construction for AI grading and feedback."""

GRADING_SYSTEM_PROMPT = (
    "You are an experienced teaching assistant who provides fair and detailed grading. "
    "Your feedback should be constructive, highlight strengths, and offer suggestions for improvement."
)

FEEDBACK_SYSTEM_PROMPT = (
    "You are an empathetic, experienced educator who provides personalized, constructive feedback "
    "to help students improve. Your feedback should be specific, actionable, and encouraging."
)


def _format_points(value) -> str:
    """Render 100.0 as "100" and 12.5 as "12.5"."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_rubric(rubric) -> str:
    """One line per rubric item: ``- criteria (weight points): description``."""
    return "\n".join(
        f"- {item['criteria']} ({_format_points(item['weight'])} points): {item.get('description') or ''}"
        for item in rubric
    )


def build_grading_prompt(assignment, content: str) -> str:
    """Compose the grading instruction for one submission.

    The submission content is forwarded verbatim and never truncated.
    """
    total = _format_points(assignment.total_points)
    return (
        "I have a student submission for an assignment. Please grade it based on the rubric.\n"
        "\n"
        f"ASSIGNMENT TITLE: {assignment.title}\n"
        f"ASSIGNMENT DESCRIPTION: {assignment.description}\n"
        f"TOTAL POINTS: {total}\n"
        "\n"
        "RUBRIC:\n"
        f"{format_rubric(assignment.rubric or [])}\n"
        "\n"
        "STUDENT SUBMISSION:\n"
        f"{content}\n"
        "\n"
        "Please provide:\n"
        f"1. A grade out of {total} points\n"
        "2. Detailed feedback for the student\n"
        "3. Scores for each rubric criteria with specific feedback for each\n"
    )


def build_feedback_prompt(submission, assignment, student_name: str) -> str:
    """Compose the request for personalized feedback on a graded submission."""
    grade = "not graded" if submission.grade is None else _format_points(submission.grade)
    return (
        f"I need to provide detailed, personalized feedback to a student named {student_name} "
        "on their assignment submission.\n"
        "\n"
        f"ASSIGNMENT TITLE: {assignment.title}\n"
        f"ASSIGNMENT DESCRIPTION: {assignment.description}\n"
        "\n"
        "STUDENT SUBMISSION:\n"
        f"{submission.content}\n"
        "\n"
        f"CURRENT GRADE: {grade} out of {_format_points(assignment.total_points)}\n"
        "\n"
        "CURRENT FEEDBACK:\n"
        f"{submission.feedback}\n"
        "\n"
        "Please generate an improved, personalized feedback that:\n"
        "1. Addresses the student by name\n"
        "2. Highlights specific strengths in their submission\n"
        "3. Provides constructive criticism on areas for improvement\n"
        "4. Offers specific suggestions to help them enhance their learning\n"
        "5. Ends with an encouraging note\n"
    )

"""AI grading: prompt building, response extraction and submission transitions."""
from .extractor import GradingExtraction, RubricGrade, extract_grading
from .prompt import build_grading_prompt, build_feedback_prompt
from .state import create_submission, apply_ai_grade, apply_teacher_grade
from .client import CompletionClient
from .service import GradingService
from .bulk import BulkGradingOrchestrator

__all__ = [
    'GradingExtraction',
    'RubricGrade',
    'extract_grading',
    'build_grading_prompt',
    'build_feedback_prompt',
    'create_submission',
    'apply_ai_grade',
    'apply_teacher_grade',
    'CompletionClient',
    'GradingService',
    'BulkGradingOrchestrator',
]

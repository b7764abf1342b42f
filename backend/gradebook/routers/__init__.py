"""HTTP routers."""
from .courses import router as courses_router
from .assignments import router as assignments_router
from .submissions import router as submissions_router
from .ai import router as ai_router

__all__ = [
    'courses_router',
    'assignments_router',
    'submissions_router',
    'ai_router',
]

"""FastAPI dependencies wiring services to the request."""
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from .config import get_grading_config
from .database import get_db, get_db_session
from .grading import BulkGradingOrchestrator, CompletionClient, GradingService


@lru_cache
def get_completion_client() -> CompletionClient:
    """Process-wide completion client built from the environment."""
    return CompletionClient(get_grading_config())


def get_grading_service(
    db: Session = Depends(get_db),
    client: CompletionClient = Depends(get_completion_client),
) -> GradingService:
    return GradingService(db, client)


def get_bulk_orchestrator(
    client: CompletionClient = Depends(get_completion_client),
) -> BulkGradingOrchestrator:
    return BulkGradingOrchestrator(
        client=client,
        session_scope=get_db_session,
        delay_seconds=client.config.bulk_delay_seconds,
    )

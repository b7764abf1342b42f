from fastapi import FastAPI, Depends, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session
import os
import logging
from contextlib import asynccontextmanager

from .config import CORS_ORIGINS
from .database import get_db, check_database_connection, create_tables
from .errors import GradebookError
from .auth import auth_router
from .routers import courses_router, assignments_router, submissions_router, ai_router

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Check the database and create tables before serving."""
    logger.info("Starting up Gradebook API...")
    if os.getenv("PYTEST_CURRENT_TEST") is not None:
        logger.info("Skipping DB connectivity check during tests")
    else:
        if not check_database_connection():
            logger.error("Database connection failed")
            raise RuntimeError("Cannot connect to database")
        create_tables()
    yield
    logger.info("Shutting down Gradebook API...")

app = FastAPI(
    title="Gradebook API",
    description="Course assignments, submissions and AI-assisted grading",
    version=VERSION,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(GradebookError)
async def gradebook_error_handler(request: Request, exc: GradebookError):
    """Map service errors to JSON responses."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

# Routers
app.include_router(auth_router)
app.include_router(courses_router)
app.include_router(assignments_router)
app.include_router(submissions_router)
app.include_router(ai_router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "Gradebook API", "version": VERSION}


@app.get("/health")
async def health_check(db: Session = Depends(get_db)):
    """Health check endpoint with database connectivity test."""
    try:
        db.execute(text("SELECT 1"))
        return {
            "status": "healthy",
            "database": "connected",
            "version": VERSION
        }
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return {
            "status": "unhealthy",
            "database": "disconnected",
            "error": str(e),
            "version": VERSION
        }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)

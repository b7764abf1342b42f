"""Runtime configuration read from the environment."""

import os
from typing import Optional

from pydantic import BaseModel, Field

# JWT Configuration
SECRET_KEY = os.getenv("SECRET_KEY", "change-me-in-production")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")


class GradingModelConfig(BaseModel):
    """Configuration for the completion model used for AI grading.

    Any OpenAI-compatible endpoint can be used by setting `api_base`; local
    servers usually accept an arbitrary `api_key`.
    """
    model_name: str = Field(
        default="gpt-4o",
        description="Model name/identifier"
    )
    api_base: Optional[str] = Field(
        default=None,
        description="Base URL for the API (for local models or custom endpoints)"
    )
    api_key: Optional[str] = Field(
        default=None,
        description="API key (leave empty for local models)"
    )
    temperature: float = Field(
        default=0.7,
        description="Sampling temperature (0-2)"
    )
    max_tokens: int = Field(
        default=1500,
        description="Maximum number of tokens to generate"
    )
    timeout: float = Field(
        default=60.0,
        description="Timeout in seconds for API requests"
    )
    bulk_delay_seconds: float = Field(
        default=1.0,
        ge=0,
        description="Pause between consecutive model calls during bulk grading"
    )


def get_grading_config() -> GradingModelConfig:
    """Build the grading configuration from environment variables."""
    return GradingModelConfig(
        model_name=os.getenv("GRADING_MODEL", "gpt-4o"),
        api_base=os.getenv("OPENAI_BASE_URL") or None,
        api_key=os.getenv("OPENAI_API_KEY") or None,
        temperature=float(os.getenv("GRADING_TEMPERATURE", "0.7")),
        max_tokens=int(os.getenv("GRADING_MAX_TOKENS", "1500")),
        timeout=float(os.getenv("GRADING_TIMEOUT", "60")),
        bulk_delay_seconds=float(os.getenv("BULK_GRADING_DELAY", "1.0")),
    )

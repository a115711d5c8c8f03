"""Session configuration with environment variable loading.

Pydantic-based configuration for the knowledge search session: which
answering agent and knowledge base to use, where the service lives, and how
the upload progress bar behaves.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator, model_validator

# Load environment variables from .env file
load_dotenv()


class SessionConfig(BaseModel):
    """Configuration consumed by a knowledge search session.

    Attributes:
        agent_id: Identifier of the answering agent.
        knowledge_base_id: Identifier of the knowledge base receiving uploads.
        api_base_url: Base URL of the answering and upload service.
        request_timeout: HTTP timeout in seconds.
        upload_tick_interval: Seconds between progress bar increments.
        upload_max_increment: Largest single progress increment, in percent.
        upload_progress_cap: Progress ceiling while the upload is outstanding.
        upload_reset_delay: Seconds the bar stays at 100% before resetting.
    """

    agent_id: str = Field(
        default_factory=lambda: os.getenv("AGENT_ID", "695e1b6528a3f341188e0149"),
        description="Answering agent identifier",
    )
    knowledge_base_id: str = Field(
        default_factory=lambda: os.getenv("KNOWLEDGE_BASE_ID", "695e1b5e1fd00875a2eb6b4f"),
        description="Knowledge base identifier for uploaded documents",
    )
    api_base_url: str = Field(
        default_factory=lambda: os.getenv("API_BASE_URL", "http://localhost:8000"),
        description="Base URL of the answering service",
    )
    request_timeout: float = Field(
        default_factory=lambda: float(os.getenv("REQUEST_TIMEOUT", "120")),
        gt=0.0,
        description="HTTP request timeout in seconds",
    )
    upload_tick_interval: float = Field(
        default_factory=lambda: float(os.getenv("UPLOAD_TICK_INTERVAL", "0.2")),
        gt=0.0,
        description="Seconds between simulated progress increments",
    )
    upload_max_increment: int = Field(
        default_factory=lambda: int(os.getenv("UPLOAD_MAX_INCREMENT", "30")),
        ge=1,
        le=99,
        description="Largest single simulated progress increment",
    )
    upload_progress_cap: int = Field(
        default_factory=lambda: int(os.getenv("UPLOAD_PROGRESS_CAP", "90")),
        ge=1,
        le=99,
        description="Progress ceiling before the upload resolves",
    )
    upload_reset_delay: float = Field(
        default_factory=lambda: float(os.getenv("UPLOAD_RESET_DELAY", "1.0")),
        ge=0.0,
        description="Seconds to show 100% before resetting the bar",
    )

    @field_validator("agent_id", "knowledge_base_id")
    @classmethod
    def validate_identifier(cls, v: str) -> str:
        """Validate that identifiers are provided and non-empty."""
        if not v or not v.strip():
            raise ValueError("Identifier required. Set AGENT_ID and KNOWLEDGE_BASE_ID in .env")
        return v.strip()

    @field_validator("api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the base URL so paths can be appended directly."""
        return v.strip().rstrip("/")

    @model_validator(mode="after")
    def validate_increment_below_cap(self) -> "SessionConfig":
        """A single increment may not jump past the progress cap."""
        if self.upload_max_increment > self.upload_progress_cap:
            raise ValueError("upload_max_increment must not exceed upload_progress_cap")
        return self


def get_session_config() -> SessionConfig:
    """Create session configuration from environment.

    Returns:
        Configured SessionConfig instance.

    Raises:
        ValueError: If an identifier is blank or a value is out of range.
    """
    return SessionConfig()

"""FastAPI application factory hosting the knowledge search page.

The NiceGUI page is mounted onto this app by ``src.main``; the app itself
only adds lifecycle logging, CORS and a health check.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src import __version__
from src.agent.config import get_session_config

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application startup and shutdown lifecycle.

    Validates the session configuration on startup so a bad environment
    fails fast instead of on the first page load.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    config = get_session_config()
    logger.info(f"Starting Knowledge Search (agent {config.agent_id}, api {config.api_base_url})")
    yield
    logger.info("Shutting down Knowledge Search...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="Knowledge Search",
        description=(
            "Document-grounded question answering. Upload PDFs and ask questions; "
            "answers come back with cited sources, confidence and follow-ups."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "knowledge-search"}

    return application


app = create_app()

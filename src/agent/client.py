"""HTTP client for the upload and answering service.

Implements both session collaborators (``DocumentUploader`` and
``AnsweringAgent``) over httpx. Transport failures are reported as
unsuccessful results rather than raised, so the session records them in
``last_error`` the same way as logical failures.

Endpoints:
    - POST /upload/pdf: one multipart request per file, returns page count
    - POST /agent/query: JSON question, returns the agent result envelope
"""

import logging
from collections.abc import Sequence
from typing import Any

import httpx
from pydantic import ValidationError

from src.agent.config import SessionConfig
from src.models.schemas import FileBlob, QueryResult, UploadResult
from src.session.errors import MalformedResponse

logger = logging.getLogger(__name__)


def _error_detail(response: httpx.Response) -> str:
    """Extract a readable error from an HTTP error response."""
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    if isinstance(body, dict):
        detail = body.get("detail") or body.get("error")
        if isinstance(detail, str) and detail:
            return detail
    return f"HTTP {response.status_code}"


class AgentApiClient:
    """Async client for the knowledge search service.

    Owns its httpx client unless one is injected, in which case closing is
    left to the caller.
    """

    def __init__(
        self,
        config: SessionConfig,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Session configuration (base URL, timeout, knowledge base).
            http_client: Optional preconfigured client, e.g. with a mock transport.
        """
        self._config = config
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            base_url=config.api_base_url,
            timeout=config.request_timeout,
        )

    async def upload_documents(self, files: Sequence[FileBlob]) -> UploadResult:
        """Upload PDFs to the knowledge base, stopping at the first failure.

        Args:
            files: Already-filtered PDF files.

        Returns:
            UploadResult with page counts reported by the service.
        """
        pages: dict[str, int] = {}

        for file in files:
            try:
                response = await self._client.post(
                    "/upload/pdf",
                    files={"file": (file.name, file.content, file.content_type)},
                    data={"knowledge_base_id": self._config.knowledge_base_id},
                )
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                detail = _error_detail(e.response)
                logger.warning(f"Upload of {file.name} rejected: {detail}")
                return UploadResult(success=False, error=f"{file.name}: {detail}", pages=pages)
            except httpx.RequestError as e:
                logger.error(f"Upload of {file.name} failed: {e}")
                return UploadResult(success=False, error=f"Connection failed: {e}", pages=pages)

            try:
                body = self._decode(response)
            except MalformedResponse as e:
                return UploadResult(success=False, error=f"{file.name}: {e}", pages=pages)
            if isinstance(body, dict):
                if body.get("success") is False:
                    return UploadResult(
                        success=False,
                        error=body.get("error") or f"{file.name}: upload failed",
                        pages=pages,
                    )
                if isinstance(body.get("pages"), int):
                    pages[file.name] = body["pages"]

        return UploadResult(success=True, pages=pages)

    async def query_agent(self, text: str, agent_id: str) -> QueryResult:
        """Ask the answering agent a question.

        Args:
            text: The user's question.
            agent_id: Answering agent identifier.

        Returns:
            QueryResult envelope with the untrusted response payload.

        Raises:
            MalformedResponse: If the body is not a valid result envelope.
        """
        try:
            response = await self._client.post(
                "/agent/query",
                json={
                    "message": text,
                    "agent_id": agent_id,
                    "knowledge_base_id": self._config.knowledge_base_id,
                },
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            return QueryResult(success=False, error=_error_detail(e.response))
        except httpx.RequestError as e:
            logger.error(f"Agent query failed: {e}")
            return QueryResult(success=False, error=f"Connection failed: {e}")

        body = self._decode(response)
        try:
            return QueryResult.model_validate(body)
        except ValidationError as e:
            raise MalformedResponse("Unexpected response format from the answering service") from e

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponse("Response from the service is not valid JSON") from e

import uuid
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def new_id() -> str:
    """Generate a collision-resistant identifier for documents and entries."""
    return str(uuid.uuid4())


class Role(str, Enum):
    """Speaker of a conversation entry."""

    USER = "user"
    AGENT = "agent"


class FileBlob(BaseModel):
    """A file selected by the user, ready to hand to the upload collaborator.

    Attributes:
        name: Original file name.
        content: Raw file bytes.
        content_type: MIME type reported by the picker or drop zone.
    """

    name: str
    content: bytes
    content_type: str = "application/pdf"

    @property
    def size(self) -> int:
        return len(self.content)


class Document(BaseModel):
    """An uploaded document in the session's working set.

    Attributes:
        id: Unique identifier for the session lifetime.
        name: Original file name.
        size_bytes: File size in bytes.
        uploaded_at: When the upload completed.
        page_count: Number of pages, if known.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    name: str
    size_bytes: int = Field(ge=0)
    uploaded_at: datetime = Field(default_factory=datetime.now)
    page_count: int | None = Field(default=None, ge=0)


class Evidence(BaseModel):
    """A cited source backing an agent answer.

    Relevance is expected in [0, 1] but is not enforced here: out-of-range
    values come from the answering service and are displayed as-is.
    """

    title: str
    url: str | None = None
    relevance: float
    excerpt: str | None = None


class ConversationEntry(BaseModel):
    """A single entry in the conversation log.

    Attributes:
        id: Unique identifier for the session lifetime.
        role: Who produced the entry.
        text: Message or answer text.
        created_at: Creation timestamp.
        evidence: Sources backing an agent answer (always empty for users).
        confidence: Answer confidence, if reported.
        related_topics: Related topics, if reported.
        follow_ups: Suggested follow-up questions, if reported.
    """

    id: str = Field(default_factory=new_id)
    role: Role
    text: str
    created_at: datetime = Field(default_factory=datetime.now)
    evidence: list[Evidence] = Field(default_factory=list)
    confidence: float | None = None
    related_topics: list[str] | None = None
    follow_ups: list[str] | None = None

    @property
    def is_user(self) -> bool:
        return self.role is Role.USER


class SessionState(BaseModel):
    """Mutable state of one open session.

    Attributes:
        documents: Uploaded documents in upload order.
        history: Conversation entries in chronological order.
        pending_input: Text currently in the query box.
        submission_in_flight: Whether a query is awaiting the answering service.
        upload_in_flight: Whether an upload is awaiting the upload service.
        upload_progress: Simulated upload progress percentage.
        last_error: User-facing message for the most recent failure.
    """

    documents: list[Document] = Field(default_factory=list)
    history: list[ConversationEntry] = Field(default_factory=list)
    pending_input: str = ""
    submission_in_flight: bool = False
    upload_in_flight: bool = False
    upload_progress: int = Field(default=0, ge=0, le=100)
    last_error: str | None = None


class UploadResult(BaseModel):
    """Outcome reported by the upload collaborator.

    Attributes:
        success: Whether every file was accepted.
        error: Error message if the upload failed.
        pages: Page counts by file name, when the collaborator knows them.
    """

    success: bool
    error: str | None = None
    pages: dict[str, int] = Field(default_factory=dict)


class QueryResult(BaseModel):
    """Outcome reported by the answering collaborator.

    The ``response`` payload is untrusted: it may be a structured object,
    a bare string, or missing entirely.
    """

    success: bool
    error: str | None = None
    response: Any = None

    @field_validator("error", mode="before")
    @classmethod
    def blank_error_to_none(cls, v: Any) -> Any:
        """Treat an empty error string as no error message."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

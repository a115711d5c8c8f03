"""Pydantic models for session state and collaborator results.

Provides type safety and validation for everything the session controller
reads from or hands to its collaborators.

Models:
    - Document: An uploaded PDF in the working set
    - Evidence: A cited source backing an answer
    - ConversationEntry: A user question or agent answer
    - SessionState: The live state of one open session
    - FileBlob: A file handed to the upload collaborator
    - UploadResult / QueryResult: Collaborator outcomes
"""

from src.models.schemas import (
    ConversationEntry,
    Document,
    Evidence,
    FileBlob,
    QueryResult,
    Role,
    SessionState,
    UploadResult,
    new_id,
)

__all__ = [
    "ConversationEntry",
    "Document",
    "Evidence",
    "FileBlob",
    "QueryResult",
    "Role",
    "SessionState",
    "UploadResult",
    "new_id",
]

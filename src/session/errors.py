"""Error kinds recovered at the session boundary."""


class SessionError(Exception):
    """Base class for failures that end up in ``SessionState.last_error``."""

    pass


class UploadFailed(SessionError):
    """Raised when the upload collaborator rejects or fails to transport files."""

    pass


class QueryFailed(SessionError):
    """Raised when the answering collaborator fails or reports a logical failure."""

    pass


class MalformedResponse(SessionError):
    """Raised when a response payload is neither an object nor a string."""

    pass

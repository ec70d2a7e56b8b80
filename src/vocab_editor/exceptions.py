"""Custom exception hierarchy for vocab-editor."""


class VocabEditorError(Exception):
    """Base exception for all vocab-editor errors."""


class ValidationError(VocabEditorError):
    """Draft input rejected before any request is made."""


class ConflictError(VocabEditorError):
    """Server reported a duplicate (status 409)."""


class RequestError(VocabEditorError):
    """Server answered with a non-success status other than 409."""

    def __init__(self, message: str, status: int | None = None) -> None:
        self.status = status
        super().__init__(message)


class TransportError(VocabEditorError):
    """Request never produced a decodable envelope (network, timeout, bad JSON)."""


class EntityNotFoundError(VocabEditorError):
    """Word or definition is not present in the loaded vocabulary."""


class ConfigError(VocabEditorError):
    """Configuration file is unreadable or invalid."""

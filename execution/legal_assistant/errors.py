"""
Error types for the Legal Assistant.

Every failure raised by the core derives from LegalAssistantError so the
use case boundary can catch one type and turn it into an OperationResult.
"""

from typing import Optional


class LegalAssistantError(Exception):
    """Base class for all Legal Assistant errors."""


class NotFoundError(LegalAssistantError):
    """A source file or stored record does not exist."""

    def __init__(self, message: str, resource: Optional[str] = None):
        super().__init__(message)
        self.resource = resource


class ExtractionError(LegalAssistantError):
    """Source bytes could not be parsed as the expected format."""


class GenerationError(LegalAssistantError):
    """The external text-generation provider failed."""


class ValidationError(LegalAssistantError):
    """A request carried a malformed value (e.g. an unknown enum string)."""


class StorageError(LegalAssistantError):
    """The persistence backend failed."""

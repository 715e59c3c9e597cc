"""Exceptions raised by the extraction pipeline."""
from __future__ import annotations

from typing import Optional


class ReferenceExtractorError(Exception):
    """Base class for all extractor failures."""


class CatalogError(ReferenceExtractorError):
    """The symbol catalog configuration is invalid."""


class UnmatchedTokenError(ReferenceExtractorError):
    """No catalog symbol matches a token."""

    def __init__(self, token: str, source: Optional[str] = None):
        self.token = token
        self.source = source
        message = f"No symbol matches token {token!r}"
        if source:
            message += f" in {source}"
        super().__init__(message)


class AnnotationError(ReferenceExtractorError):
    """A tagged training line is malformed."""

    def __init__(self, message: str, source: Optional[str] = None, position: Optional[int] = None):
        self.source = source
        self.position = position
        location = source or "<tagged text>"
        if position is not None:
            location += f", column {position + 1}"
        super().__init__(f"{location}: {message}")


class InsufficientDataError(ReferenceExtractorError):
    """A state has no training observations to normalize."""

    def __init__(self, state: str, table: str = "emission"):
        self.state = state
        self.table = table
        super().__init__(
            f"State {state!r} has no observations in the training data ({table} table)"
        )


class EmptyInputError(ReferenceExtractorError):
    """Decoding was requested for an empty symbol sequence."""

    def __init__(self, message: str = "Cannot decode an empty reference"):
        super().__init__(message)


class ModelFormatError(ReferenceExtractorError):
    """Persisted model parameters are malformed."""


class CatalogMismatchError(ReferenceExtractorError):
    """Model parameters were trained with a different symbol catalog."""

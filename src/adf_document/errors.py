"""Typed exceptions for loading and converting local documents."""

from typing import Optional

from src.confluence_client.errors import SyncError


class DocumentError(SyncError):
    """Base exception for all document-related errors."""
    pass


class InvalidSourceError(DocumentError):
    """Raised when a document source is empty, missing or unreadable."""

    def __init__(self, source: str, reason: Optional[str] = None):
        source_label = source if source else "<empty>"
        message = f"Invalid document source: {source_label}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)
        self.source = source
        self.reason = reason


class ConversionError(DocumentError):
    """Raised when Markdown cannot be converted to ADF."""

    def __init__(self, message: str):
        super().__init__(message)

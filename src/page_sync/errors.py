"""Typed exceptions raised by the page sync engine."""

from src.confluence_client.errors import SyncError


class PageSyncError(SyncError):
    """Base exception for sync engine errors."""
    pass


class MissingDocumentError(PageSyncError):
    """Raised when an operation needs a bound document and none was given."""

    def __init__(self, operation: str):
        super().__init__(f"Document is required for {operation} command")
        self.operation = operation


class LocalFileNotFoundError(PageSyncError):
    """Raised when a local attachment path does not resolve to a readable file."""

    def __init__(self, file_path: str):
        super().__init__(f"File not found: {file_path}")
        self.file_path = file_path

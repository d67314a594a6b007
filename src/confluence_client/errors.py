"""Typed exception hierarchy for Confluence-related errors.

Every failure surfaced by the page directory or the attachment store is a
ConfluenceError subclass, so callers can catch remote failures as one family
while still telling authentication, not-found and network problems apart.
"""


class SyncError(Exception):
    """Base exception for all md-page-sync errors.

    Use this to catch any application-level error from the sync tool.
    """
    pass


class ConfluenceError(SyncError):
    """Base exception for all Confluence-related (remote) errors."""
    pass


class InvalidCredentialsError(ConfluenceError):
    """Raised when API credentials are missing, invalid or rejected."""

    def __init__(self, user: str, endpoint: str):
        super().__init__(
            f"API key is invalid (user: {user}, endpoint: {endpoint})"
        )
        self.user = user
        self.endpoint = endpoint


class PageNotFoundError(ConfluenceError):
    """Raised when a requested page does not exist."""

    def __init__(self, page_id: str):
        super().__init__(f"Page {page_id} not found")
        self.page_id = page_id


class AttachmentNotFoundError(ConfluenceError):
    """Raised when a requested attachment does not exist."""

    def __init__(self, attachment_id: str):
        super().__init__(f"Attachment {attachment_id} not found")
        self.attachment_id = attachment_id


class APIUnreachableError(ConfluenceError):
    """Raised when the Confluence API is not available or unreachable."""

    def __init__(self, endpoint: str):
        super().__init__(f"API is not available at {endpoint}")
        self.endpoint = endpoint


class APIAccessError(ConfluenceError):
    """Raised when an API call fails for any other reason (conflict, 4xx, 5xx)."""

    def __init__(self, message: str = "Confluence API failure"):
        super().__init__(message)

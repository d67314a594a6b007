"""Confluence client library for page publishing.

This package provides Python abstractions over the Confluence Cloud REST API,
covering the page and attachment calls the sync engine needs.
"""

from .auth import Authenticator, Credentials
from .api_wrapper import APIWrapper
from .errors import (
    SyncError,
    ConfluenceError,
    InvalidCredentialsError,
    PageNotFoundError,
    AttachmentNotFoundError,
    APIUnreachableError,
    APIAccessError,
)

__all__ = [
    "Authenticator",
    "Credentials",
    "APIWrapper",
    "SyncError",
    "ConfluenceError",
    "InvalidCredentialsError",
    "PageNotFoundError",
    "AttachmentNotFoundError",
    "APIUnreachableError",
    "APIAccessError",
]

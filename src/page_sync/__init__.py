"""Publish local documents to Confluence pages.

This package holds the sync engine, which finds or creates a page by title,
uploads locally referenced images as attachments, re-links them in the ADF
tree and pushes the result as the next page version.
"""

from .attachment_store import AttachmentStore
from .errors import PageSyncError, MissingDocumentError, LocalFileNotFoundError
from .models import AttachmentHandle, MediaReference, PageHandle, SyncConfig, SyncResult
from .page_directory import PageDirectory
from .sync_engine import PageSync

__all__ = [
    'PageSync',
    'PageDirectory',
    'AttachmentStore',
    'PageHandle',
    'AttachmentHandle',
    'MediaReference',
    'SyncConfig',
    'SyncResult',
    'PageSyncError',
    'MissingDocumentError',
    'LocalFileNotFoundError',
]

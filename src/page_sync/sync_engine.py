"""Synchronization engine: publish a local document to one Confluence page.

A run moves through these states, strictly in sequence:

    Start -> Locating -> (Creating | Found) -> [ResolvingMedia] -> Updating -> Done

Locating looks the page up by exact title in the configured space. Creating
happens on a miss; Found re-reads the page so the version used for the final
update is fresh. ResolvingMedia (``sync`` only) uploads each local image one
at a time and rewrites its media node in place. Any remote failure aborts the
run; re-running is safe because rewritten nodes no longer count as local.
"""

import logging
import os
from typing import List, Optional, Tuple

from src.adf_document.document import AdfDocument
from src.confluence_client.api_wrapper import APIWrapper
from src.confluence_client.auth import Authenticator
from src.confluence_client.errors import APIAccessError
from .attachment_store import AttachmentStore
from .errors import MissingDocumentError
from .media import collect_local_media, resolve_media_path, rewrite_media_node
from .models import AttachmentHandle, PageHandle, SyncConfig, SyncResult
from .page_directory import PageDirectory

logger = logging.getLogger(__name__)


class PageSync:
    """Publishes an AdfDocument to the page with the same title.

    Usage:
        doc = AdfDocument.from_markdown_file("docs/Spec.md")
        engine = PageSync(SyncConfig(space_id="98765"), document=doc)

        # Create or update "Spec", uploading ./images referenced by the doc
        result = engine.sync()

        # Same, without touching images
        result = engine.sync_content()
    """

    def __init__(
        self,
        config: SyncConfig,
        document: Optional[AdfDocument] = None,
        pages: Optional[PageDirectory] = None,
        attachments: Optional[AttachmentStore] = None,
        api: Optional[APIWrapper] = None,
    ):
        """Initialize the engine.

        Args:
            config: Target space and optional parent page
            document: Document to publish; required by sync and create
            pages: Page directory. If None, built from ``api``.
            attachments: Attachment store. If None, built from ``api``.
            api: APIWrapper used for missing collaborators. If None, one is
                 created with default authentication.
        """
        if (pages is None or attachments is None) and api is None:
            api = APIWrapper(Authenticator())
        self.config = config
        self.document = document
        self.pages = pages if pages is not None else PageDirectory(api)
        self.attachments = attachments if attachments is not None else AttachmentStore(api)

    def _require_document(self, operation: str) -> AdfDocument:
        if self.document is None:
            raise MissingDocumentError(operation)
        return self.document

    @staticmethod
    def _change_message(document: AdfDocument) -> str:
        return f"Updated from {document.source_file or 'ADF document'}"

    def find_page_by_title(self, title: str) -> Optional[PageHandle]:
        return self.pages.find_by_title(title, self.config.space_id)

    def get_page(self, page_id: str) -> PageHandle:
        return self.pages.get_by_id(page_id)

    def list_pages(self) -> List[PageHandle]:
        return self.pages.list_in_space(self.config.space_id)

    def create_page(self, document: AdfDocument) -> PageHandle:
        return self.pages.create(
            space_id=self.config.space_id,
            title=document.title,
            adf_value=document.get_content_as_string(),
            parent_id=self.config.parent_page_id,
        )

    def update_page(self, page: PageHandle, document: AdfDocument) -> PageHandle:
        """Push the document's current tree as version ``page.version + 1``.

        ``page`` must be the freshest known state of the page.
        """
        return self.pages.update(
            page_id=page.id,
            title=document.title,
            adf_value=document.get_content_as_string(),
            version_number=page.version + 1,
            message=self._change_message(document),
        )

    def force_create_page(self) -> PageHandle:
        """Create a new page for the document without looking for an existing one.

        Raises:
            MissingDocumentError: If no document is bound
        """
        document = self._require_document("create")
        return self.create_page(document)

    def find_or_create_page(self, document: AdfDocument) -> Tuple[PageHandle, bool]:
        """Locate the document's page by title, creating it on a miss.

        On a hit the page is re-read by id, so the returned version is the
        current one.

        Returns:
            Tuple of (page, created)
        """
        logger.debug(f"Locating page '{document.title}' in space {self.config.space_id}")
        current = self.find_page_by_title(document.title)

        if current is None:
            return self.create_page(document), True

        logger.debug(f"Found page {current.id} (version {current.version})")
        return self.get_page(current.id), False

    def sync_content(self) -> SyncResult:
        """Create or update the page, without attachment handling.

        Raises:
            MissingDocumentError: If no document is bound
        """
        document = self._require_document("sync")

        current = self.find_page_by_title(document.title)
        if current is None:
            page = self.create_page(document)
            logger.info(f"Created page '{page.title}' ({page.id})")
            return SyncResult(page=page, created=True)

        page = self.update_page(current, document)
        logger.info(f"Updated page '{page.title}' ({page.id}) to version {page.version}")
        return SyncResult(page=page, created=False)

    def sync(self) -> SyncResult:
        """Create or update the page, uploading local images first.

        The page is found or created, every local image is uploaded to it
        and its node rewritten, then the rewritten tree is pushed as the
        next version.

        Raises:
            MissingDocumentError: If no document is bound
            LocalFileNotFoundError: If a referenced image does not exist
            ConfluenceError: On any remote failure, including an uploaded
                             attachment that has no fileId
        """
        document = self._require_document("sync")

        page, created = self.find_or_create_page(document)
        uploaded = self._resolve_media(document, page.id)

        updated = self.update_page(page, document)
        logger.info(
            f"Synced '{updated.title}' ({updated.id}) to version {updated.version}, "
            f"{len(uploaded)} image(s) uploaded"
        )
        return SyncResult(page=updated, created=created, uploaded=uploaded)

    def publish_to_page(self, page_id: str) -> SyncResult:
        """Upload local images to a known page and replace its content.

        Raises:
            MissingDocumentError: If no document is bound
        """
        document = self._require_document("publish")

        uploaded = self._resolve_media(document, page_id)

        # Version is read after the uploads, right before the update
        page = self.get_page(page_id)
        updated = self.update_page(page, document)
        return SyncResult(page=updated, created=False, uploaded=uploaded)

    def _resolve_media(self, document: AdfDocument, page_id: str) -> List[AttachmentHandle]:
        """Upload every local image and rewrite its media node.

        References are collected in one walk, then processed one by one:
        each node needs its attachment's file id before it can be rewritten.
        """
        references = collect_local_media(document)
        if not references:
            logger.debug("No local images to upload")
            return []

        logger.info(f"Uploading {len(references)} local image(s) to page {page_id}")
        base_path = document.base_path
        uploaded: List[AttachmentHandle] = []

        for reference in references:
            file_path = resolve_media_path(base_path, reference.url)
            file_name = os.path.basename(file_path)

            upload = self.attachments.upload(page_id, file_path)
            info = self.attachments.get_by_id(upload.id)
            if not info.file_id:
                raise APIAccessError(f"Attachment {info.id} has no fileId")

            rewrite_media_node(reference.media, info.file_id, page_id, file_name)
            logger.debug(f"Linked {reference.url} to attachment {info.id} (file {info.file_id})")
            uploaded.append(info)

        return uploaded

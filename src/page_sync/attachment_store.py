"""Attachment upload and lookup for Confluence pages."""

import logging
import os
from typing import List, Optional

from src.confluence_client.api_wrapper import APIWrapper
from src.confluence_client.errors import APIAccessError
from .errors import LocalFileNotFoundError
from .models import AttachmentHandle

logger = logging.getLogger(__name__)


class AttachmentStore:
    """Uploads local files to a page and reads attachment details back.

    Upload results carry the attachment id; the ``file_id`` that ADF media
    nodes need comes from ``get_by_id``.
    """

    def __init__(self, api: APIWrapper):
        self.api = api

    def upload(
        self,
        page_id: str,
        file_path: str,
        comment: Optional[str] = None,
        minor_edit: bool = False,
    ) -> AttachmentHandle:
        """Upload one file to a page.

        Args:
            page_id: Page the attachment belongs to
            file_path: Local path of the file
            comment: Optional attachment comment
            minor_edit: Suppress watcher notifications

        Raises:
            LocalFileNotFoundError: If the path is not a readable file (no
                                    remote call is made)
            APIAccessError: If Confluence returns no attachment
        """
        if not os.path.isfile(file_path) or not os.access(file_path, os.R_OK):
            raise LocalFileNotFoundError(file_path)

        logger.info(f"Uploading {file_path} to page {page_id}")
        data = self.api.upload_attachment(
            page_id=page_id,
            file_path=file_path,
            comment=comment,
            minor_edit=minor_edit,
        )

        # Created attachments come back wrapped in "results"
        if isinstance(data, dict) and "results" in data:
            results = data.get("results") or []
            if not results:
                raise APIAccessError(
                    f"Upload of {os.path.basename(file_path)} to page {page_id} returned no attachment"
                )
            data = results[0]

        attachment = AttachmentHandle.from_api(data)
        if attachment.page_id is None:
            attachment.page_id = str(page_id)
        logger.debug(f"Uploaded attachment {attachment.id} ({attachment.title})")
        return attachment

    def get_by_id(self, attachment_id: str) -> AttachmentHandle:
        return AttachmentHandle.from_api(self.api.get_attachment(attachment_id))

    def list_for_page(self, page_id: str) -> List[AttachmentHandle]:
        return [
            AttachmentHandle.from_api(attachment)
            for attachment in self.api.get_page_attachments(page_id)
        ]

"""Data models for page sync operations.

Handles returned by the page directory and the attachment store, the sync
configuration, and the outcome of a sync run.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from src.adf_document.models import AdfNode


@dataclass
class SyncConfig:
    """Where documents are published.

    Attributes:
        space_id: Numeric id of the Confluence space (namespace for title lookup)
        parent_page_id: Parent for newly created pages (space root when None)
    """
    space_id: str
    parent_page_id: Optional[str] = None


@dataclass
class PageHandle:
    """A Confluence page as known to the sync engine.

    The id is always a string, even though Confluence ids are numeric. The
    version is assigned by Confluence; the engine only ever sends
    ``version + 1``.

    Attributes:
        id: Page id
        title: Page title
        version: Current version number
        space_id: Space the page lives in
        parent_id: Parent page id, if any
        status: Page status (``current`` for live pages)
        body: ADF body as a JSON string, when it was requested
    """
    id: str
    title: str
    version: int
    space_id: Optional[str] = None
    parent_id: Optional[str] = None
    status: Optional[str] = None
    body: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "PageHandle":
        """Build a handle from a v2 page payload."""
        version = data.get("version") or {}
        body = ((data.get("body") or {}).get("atlas_doc_format") or {}).get("value")
        space_id = data.get("spaceId")
        parent_id = data.get("parentId")
        return cls(
            id=str(data["id"]),
            title=data.get("title", ""),
            version=int(version.get("number") or 0),
            space_id=str(space_id) if space_id is not None else None,
            parent_id=str(parent_id) if parent_id is not None else None,
            status=data.get("status"),
            body=body,
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "version": self.version,
        }
        if self.space_id is not None:
            result["spaceId"] = self.space_id
        if self.parent_id is not None:
            result["parentId"] = self.parent_id
        if self.status is not None:
            result["status"] = self.status
        if self.body is not None:
            result["body"] = self.body
        return result


@dataclass
class AttachmentHandle:
    """An attachment on a Confluence page.

    ``id`` addresses the attachment in the REST API; ``file_id`` is the media
    identifier that ADF ``media`` nodes link to. They are not interchangeable.
    """
    id: str
    title: str
    file_id: Optional[str] = None
    media_type: Optional[str] = None
    file_size: Optional[int] = None
    page_id: Optional[str] = None
    download_link: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "AttachmentHandle":
        """Build a handle from a v2 attachment payload or a v1 upload result."""
        extensions = data.get("extensions") or {}
        links = data.get("_links") or {}
        file_id = data.get("fileId") or extensions.get("fileId")
        page_id = data.get("pageId")
        return cls(
            id=str(data["id"]),
            title=data.get("title", ""),
            file_id=str(file_id) if file_id is not None else None,
            media_type=data.get("mediaType") or extensions.get("mediaType"),
            file_size=data.get("fileSize") or extensions.get("fileSize"),
            page_id=str(page_id) if page_id is not None else None,
            download_link=data.get("downloadLink") or links.get("download"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "fileId": self.file_id,
            "mediaType": self.media_type,
            "fileSize": self.file_size,
            "pageId": self.page_id,
            "downloadLink": self.download_link,
        }


@dataclass
class MediaReference:
    """A local image found in the content tree.

    Holds the live ``media`` child of a ``mediaSingle``, not a copy, so
    rewriting ``media.attrs`` changes the document itself.
    """
    media: AdfNode
    url: str


@dataclass
class SyncResult:
    """Outcome of one sync run.

    Attributes:
        page: The page as returned by the final create or update call
        created: True if the page did not exist before the run
        uploaded: Attachments uploaded during the run, in document order
    """
    page: PageHandle
    created: bool = False
    uploaded: List[AttachmentHandle] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "page": self.page.to_dict(),
            "created": self.created,
            "uploaded": [attachment.to_dict() for attachment in self.uploaded],
        }

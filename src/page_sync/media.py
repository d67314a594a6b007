"""Discovery and rewriting of local images in an ADF tree."""

import os
from typing import List

from src.adf_document.document import AdfDocument
from src.adf_document.local_reference import is_local_reference
from src.adf_document.models import AdfNode, AdfNodeType
from .models import MediaReference

# Confluence renders file media at these dimensions unless the page says otherwise
DEFAULT_MEDIA_WIDTH = "860"
DEFAULT_MEDIA_HEIGHT = "860"


def collect_local_media(document: AdfDocument) -> List[MediaReference]:
    """Find every ``mediaSingle`` whose first child points at a local file.

    A ``mediaSingle`` without children, or whose first child has no ``url``
    or a remote one, is skipped. The returned references share nodes with
    the document, in document order.
    """
    references: List[MediaReference] = []

    def collect(node: AdfNode) -> None:
        if node.type != AdfNodeType.MEDIA_SINGLE.value:
            return
        media = node.first_child
        if media is None:
            return
        url = media.attrs.get("url")
        if not is_local_reference(url):
            return
        references.append(MediaReference(media=media, url=url))

    document.traverse(collect)
    return references


def resolve_media_path(base_path: str, url: str) -> str:
    """Resolve a media url against the directory of the source document."""
    return os.path.normpath(os.path.join(base_path, os.path.expanduser(url)))


def rewrite_media_node(media: AdfNode, file_id: str, page_id: str, file_name: str) -> None:
    """Point a media node at an uploaded attachment, in place.

    Existing attributes are kept unless overwritten here; ``url`` is cleared
    so the node is no longer classified as local.
    """
    media.attrs.update({
        "id": file_id,
        "collection": f"contentId-{page_id}",
        "width": DEFAULT_MEDIA_WIDTH,
        "height": DEFAULT_MEDIA_HEIGHT,
        "type": "file",
        "alt": file_name,
        "url": "",
    })

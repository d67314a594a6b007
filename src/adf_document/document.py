"""Local document bound to one Confluence page.

An AdfDocument pairs a page title with an ADF content tree and remembers the
file it was read from, so relative image paths can be resolved against it.
"""

import json
import logging
import os
from typing import Any, Callable, Dict, List, Optional

from .errors import InvalidSourceError
from .markdown_converter import markdown_to_adf
from .models import AdfNode, AdfNodeType, doc_to_dict

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled"


class AdfDocument:
    """A titled ADF content tree.

    Title and source file are read-only after construction. The content tree
    is only mutated by the sync engine when it rewrites local images.

    Attributes:
        title: Page title (file name minus extension unless overridden)
        content: Root ADF node (type ``doc``)
        source_file: Path the document was read from, if any

    Example:
        >>> doc = AdfDocument.from_markdown_file("docs/Spec.md")
        >>> doc.title
        'Spec'
        >>> doc.list_images()
        ['./diagram.png']
    """

    def __init__(self, title: str, content: AdfNode, source_file: Optional[str] = None):
        self._title = title
        self._source_file = source_file
        self.content = content

    @property
    def title(self) -> str:
        return self._title

    @property
    def source_file(self) -> Optional[str]:
        return self._source_file

    @property
    def base_path(self) -> str:
        """Directory relative image paths are resolved against."""
        if not self._source_file:
            return os.getcwd()
        return os.path.dirname(os.path.abspath(self._source_file))

    @classmethod
    def from_markdown_file(cls, file_path: str, title: Optional[str] = None) -> "AdfDocument":
        """Read a Markdown file and convert it to ADF.

        Args:
            file_path: Path to the Markdown file
            title: Optional page title; derived from the file name when omitted

        Raises:
            InvalidSourceError: If the path is empty, missing or unreadable
        """
        if not file_path or not file_path.strip():
            raise InvalidSourceError(file_path, "no file path given")

        resolved_path = os.path.abspath(file_path)
        try:
            with open(resolved_path, "r", encoding="utf-8") as f:
                markdown_content = f.read()
        except FileNotFoundError:
            raise InvalidSourceError(file_path, "file not found")
        except IsADirectoryError:
            raise InvalidSourceError(file_path, "path is a directory")
        except PermissionError:
            raise InvalidSourceError(file_path, "permission denied")
        except (OSError, UnicodeDecodeError) as e:
            raise InvalidSourceError(file_path, str(e)) from e

        logger.debug(f"Converting {file_path} ({len(markdown_content)} chars) to ADF")
        content = markdown_to_adf(markdown_content)

        return cls(
            title=title or cls.title_from_path(file_path),
            content=content,
            source_file=file_path,
        )

    @classmethod
    def from_dict(
        cls,
        title: str,
        adf: Dict[str, Any],
        source_file: Optional[str] = None,
    ) -> "AdfDocument":
        """Build a document from already-parsed ADF JSON."""
        return cls(title=title, content=AdfNode.from_dict(adf or {}), source_file=source_file)

    @staticmethod
    def title_from_path(file_path: str) -> str:
        """Derive a page title from a file name, dropping the extension."""
        stem, ext = os.path.splitext(os.path.basename(file_path))
        # ".md" splits into (".md", ""): the whole name is an extension
        if not ext and stem.startswith("."):
            stem = ""
        return stem or DEFAULT_TITLE

    def traverse(self, visitor: Callable[[AdfNode], Any]) -> None:
        """Call ``visitor`` once per node, in pre-order.

        The walk is synchronous and keeps no state between calls. Visitors
        that want to act on nodes later should collect references here and
        process them after the walk.
        """
        for node in self.content.iter_nodes():
            visitor(node)

    def list_images(self) -> List[str]:
        """Return the ``url`` of every media node, in document order."""
        images: List[str] = []

        def collect(node: AdfNode) -> None:
            if node.type == AdfNodeType.MEDIA.value and node.attrs.get("url"):
                images.append(node.attrs["url"])

        self.traverse(collect)
        return images

    def to_dict(self) -> Dict[str, Any]:
        return doc_to_dict(self.content)

    def get_content_as_string(self) -> str:
        """Serialize the current tree to the JSON string Confluence expects."""
        return json.dumps(self.to_dict(), ensure_ascii=False)

"""Data models for ADF (Atlassian Document Format) content trees.

ADF is Confluence's JSON-based document format. A document is a tree of typed
nodes; block nodes hold child nodes in ``content``, text leaves hold ``text``
and optional ``marks``. Nodes are plain mutable dataclasses so the sync engine
can rewrite ``attrs`` in place and every holder of a node sees the change.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional


class AdfNodeType(Enum):
    """ADF node types the document and sync code look for."""

    DOC = "doc"
    MEDIA_SINGLE = "mediaSingle"
    MEDIA = "media"


@dataclass
class AdfMark:
    """A text mark (formatting) such as strong, em, code or link.

    Marks are opaque to the sync engine; they are only carried through
    parsing and serialization.
    """

    type: str
    attrs: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"type": self.type}
        if self.attrs:
            result["attrs"] = self.attrs
        return result


@dataclass
class AdfNode:
    """A node in the ADF tree.

    Attributes:
        type: Node type discriminator (paragraph, mediaSingle, media, text, ...)
        content: Ordered child nodes; empty for leaves
        text: Text payload (text nodes only)
        attrs: Node attributes (url, id, collection, ... on media nodes)
        marks: Text formatting marks
    """

    type: str
    content: List["AdfNode"] = field(default_factory=list)
    text: Optional[str] = None
    attrs: Dict[str, Any] = field(default_factory=dict)
    marks: List[AdfMark] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AdfNode":
        """Build a node tree from parsed ADF JSON.

        Missing ``content``, ``attrs`` and ``marks`` are treated as empty;
        non-dict children are dropped.
        """
        marks = [
            AdfMark(type=m.get("type", "unknown"), attrs=dict(m.get("attrs") or {}))
            for m in data.get("marks") or []
            if isinstance(m, dict)
        ]
        content = [
            cls.from_dict(child)
            for child in data.get("content") or []
            if isinstance(child, dict)
        ]
        return cls(
            type=data.get("type", "unknown"),
            content=content,
            text=data.get("text"),
            attrs=dict(data.get("attrs") or {}),
            marks=marks,
        )

    @property
    def first_child(self) -> Optional["AdfNode"]:
        return self.content[0] if self.content else None

    def iter_nodes(self) -> Iterator["AdfNode"]:
        """Yield this node and all descendants in pre-order.

        Each call starts a fresh walk.
        """
        yield self
        for child in self.content:
            yield from child.iter_nodes()

    def to_dict(self) -> Dict[str, Any]:
        """Convert this node back to ADF JSON format."""
        result: Dict[str, Any] = {"type": self.type}

        if self.text is not None:
            result["text"] = self.text

        if self.attrs:
            result["attrs"] = self.attrs

        if self.marks:
            result["marks"] = [m.to_dict() for m in self.marks]

        if self.content:
            result["content"] = [child.to_dict() for child in self.content]

        return result


def new_doc(content: Optional[List[AdfNode]] = None) -> AdfNode:
    """Create an empty (or pre-filled) ADF root node."""
    return AdfNode(type=AdfNodeType.DOC.value, content=list(content or []), attrs={})


def doc_to_dict(root: AdfNode) -> Dict[str, Any]:
    """Serialize a root node, adding the schema version ADF requires on ``doc``."""
    result = root.to_dict()
    if root.type == AdfNodeType.DOC.value:
        result = {"version": 1, **result}
        result.setdefault("content", [])
    return result

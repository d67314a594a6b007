"""Markdown to ADF conversion using mistune AST parsing.

mistune parses Markdown into a token tree; this module walks the tokens and
builds the equivalent ADF nodes. Images become ``mediaSingle``/``media``
block pairs that keep their original ``url`` so the sync engine can decide
later whether they need uploading.
"""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import unquote

import mistune

from .errors import ConversionError
from .local_reference import is_local_reference
from .models import AdfMark, AdfNode, new_doc

logger = logging.getLogger(__name__)

Token = Dict[str, Any]

# Inline token type -> ADF mark type
_MARK_TOKENS = {
    "strong": "strong",
    "emphasis": "em",
    "strikethrough": "strike",
}


def _text(text: str, marks: List[AdfMark]) -> AdfNode:
    return AdfNode(type="text", text=text, marks=list(marks))


def _paragraph(content: List[AdfNode]) -> AdfNode:
    return AdfNode(type="paragraph", content=content)


def media_single(url: str, alt: Optional[str] = None) -> AdfNode:
    """Build an external image block referencing ``url``."""
    attrs: Dict[str, Any] = {"type": "external", "url": url}
    if alt:
        attrs["alt"] = alt
    return AdfNode(
        type="mediaSingle",
        attrs={"layout": "center"},
        content=[AdfNode(type="media", attrs=attrs)],
    )


class AdfConverter:
    """Converts Markdown text to an ADF ``doc`` node.

    Example:
        >>> converter = AdfConverter()
        >>> doc = converter.convert("# Title\\n\\n![diagram](./diagram.png)")
        >>> [node.type for node in doc.content]
        ['heading', 'mediaSingle']
    """

    def __init__(self):
        self._markdown = mistune.create_markdown(
            renderer="ast", plugins=["table", "strikethrough"]
        )

    def convert(self, markdown_text: str) -> AdfNode:
        """Convert Markdown to an ADF root node.

        Raises:
            ConversionError: If mistune fails to parse the input
        """
        try:
            tokens = self._markdown(markdown_text or "")
        except Exception as e:
            raise ConversionError(f"Failed to parse Markdown: {e}") from e

        return new_doc(self._blocks(tokens))

    # Block level

    def _blocks(self, tokens: List[Token]) -> List[AdfNode]:
        nodes: List[AdfNode] = []
        for token in tokens:
            nodes.extend(self._block(token))
        return nodes

    def _block(self, token: Token) -> List[AdfNode]:
        token_type = token.get("type")

        if token_type in ("paragraph", "block_text"):
            return self._split_paragraph(self._inline(token.get("children", []), []))

        if token_type == "heading":
            level = token.get("attrs", {}).get("level", 1)
            return [AdfNode(
                type="heading",
                attrs={"level": level},
                content=self._inline_only(token.get("children", [])),
            )]

        if token_type == "block_code":
            info = (token.get("attrs") or {}).get("info")
            code = token.get("raw", "").rstrip("\n")
            node = AdfNode(type="codeBlock")
            if info:
                node.attrs["language"] = info.split()[0]
            if code:
                node.content = [AdfNode(type="text", text=code)]
            return [node]

        if token_type == "block_quote":
            return [AdfNode(type="blockquote", content=self._blocks(token.get("children", [])))]

        if token_type == "list":
            return [self._list(token)]

        if token_type == "thematic_break":
            return [AdfNode(type="rule")]

        if token_type == "table":
            return [self._table(token)]

        if token_type in ("block_html", "block_error"):
            raw = token.get("raw", "").strip()
            return [_paragraph([AdfNode(type="text", text=raw)])] if raw else []

        if token_type == "blank_line":
            return []

        logger.debug(f"Skipping unsupported Markdown block: {token_type}")
        return []

    def _split_paragraph(self, inline_nodes: List[AdfNode]) -> List[AdfNode]:
        """Wrap inline nodes in paragraphs, hoisting images out as blocks.

        An image in the middle of text splits the paragraph in two so the
        document order is unchanged.
        """
        blocks: List[AdfNode] = []
        pending: List[AdfNode] = []

        for node in inline_nodes:
            if node.type == "mediaSingle":
                if self._has_visible_content(pending):
                    blocks.append(_paragraph(pending))
                pending = []
                blocks.append(node)
            else:
                pending.append(node)

        if self._has_visible_content(pending) or not blocks:
            blocks.append(_paragraph(pending))
        return blocks

    @staticmethod
    def _has_visible_content(nodes: List[AdfNode]) -> bool:
        return any(
            node.type != "text" or (node.text or "").strip()
            for node in nodes
            if node.type != "hardBreak"
        )

    def _list(self, token: Token) -> AdfNode:
        attrs = token.get("attrs") or {}
        ordered = attrs.get("ordered", False)
        node = AdfNode(type="orderedList" if ordered else "bulletList")
        if ordered:
            node.attrs["order"] = attrs.get("start", 1) or 1

        for item in token.get("children", []):
            node.content.append(
                AdfNode(type="listItem", content=self._blocks(item.get("children", [])))
            )
        return node

    def _table(self, token: Token) -> AdfNode:
        table = AdfNode(type="table")
        for section in token.get("children", []):
            if section.get("type") == "table_head":
                table.content.append(self._table_row(section.get("children", []), header=True))
            elif section.get("type") == "table_body":
                for row in section.get("children", []):
                    table.content.append(self._table_row(row.get("children", []), header=False))
        return table

    def _table_row(self, cells: List[Token], header: bool) -> AdfNode:
        cell_type = "tableHeader" if header else "tableCell"
        return AdfNode(
            type="tableRow",
            content=[
                AdfNode(
                    type=cell_type,
                    content=self._split_paragraph(self._inline(cell.get("children", []), [])),
                )
                for cell in cells
            ],
        )

    # Inline level

    def _inline_only(self, tokens: List[Token]) -> List[AdfNode]:
        """Inline nodes for containers that cannot hold media (headings)."""
        nodes = []
        for node in self._inline(tokens, []):
            if node.type == "mediaSingle":
                media = node.content[0]
                nodes.append(_text(media.attrs.get("alt") or media.attrs["url"], []))
            else:
                nodes.append(node)
        return nodes

    def _inline(self, tokens: List[Token], marks: List[AdfMark]) -> List[AdfNode]:
        nodes: List[AdfNode] = []
        for token in tokens:
            token_type = token.get("type")

            if token_type == "text":
                raw = token.get("raw", "")
                if raw:
                    nodes.append(_text(raw, marks))
            elif token_type in _MARK_TOKENS:
                nested = marks + [AdfMark(type=_MARK_TOKENS[token_type])]
                nodes.extend(self._inline(token.get("children", []), nested))
            elif token_type == "codespan":
                nodes.append(_text(token.get("raw", ""), marks + [AdfMark(type="code")]))
            elif token_type == "link":
                href = (token.get("attrs") or {}).get("url", "")
                link_mark = AdfMark(type="link", attrs={"href": href})
                for node in self._inline(token.get("children", []), marks + [link_mark]):
                    if node.type == "mediaSingle":
                        # Linked images keep the link on the media node
                        node.content[0].marks.append(link_mark)
                    nodes.append(node)
            elif token_type == "image":
                url = (token.get("attrs") or {}).get("url", "")
                # Local paths are file names; remote URLs stay encoded
                if is_local_reference(url):
                    url = unquote(url)
                alt = "".join(
                    child.get("raw", "") for child in token.get("children", [])
                )
                nodes.append(media_single(url, alt or None))
            elif token_type == "linebreak":
                nodes.append(AdfNode(type="hardBreak"))
            elif token_type == "softbreak":
                nodes.append(_text(" ", marks))
            elif token_type == "inline_html":
                nodes.append(_text(token.get("raw", ""), marks))
            else:
                logger.debug(f"Skipping unsupported Markdown inline: {token_type}")
        return nodes


def markdown_to_adf(markdown_text: str) -> AdfNode:
    """Convert Markdown text to an ADF root node."""
    return AdfConverter().convert(markdown_text)

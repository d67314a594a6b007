"""Unit tests for local media discovery and rewriting."""

import os

from src.adf_document.document import AdfDocument
from src.adf_document.models import AdfNode
from src.page_sync.media import collect_local_media, resolve_media_path, rewrite_media_node
from tests.fixtures.adf_fixtures import create_adf_doc, create_media_single, create_paragraph


def make_document(content):
    return AdfDocument.from_dict("Doc", create_adf_doc(content))


class TestCollectLocalMedia:
    """Test cases for collect_local_media."""

    def test_collects_local_references_in_order(self):
        """Only local urls are collected, in document order."""
        doc = make_document([
            create_media_single("./a.png"),
            create_paragraph("text"),
            create_media_single("https://x/remote.png"),
            {"type": "blockquote", "content": [create_media_single("../b.png")]},
        ])

        references = collect_local_media(doc)

        assert [ref.url for ref in references] == ["./a.png", "../b.png"]

    def test_references_share_nodes_with_document(self):
        """Rewriting a reference's media node changes the document tree."""
        doc = make_document([create_media_single("./a.png")])

        reference = collect_local_media(doc)[0]

        assert reference.media is doc.content.content[0].content[0]

    def test_skips_malformed_media_single(self):
        """Empty containers and media without url are ignored."""
        doc = make_document([
            {"type": "mediaSingle"},
            {"type": "mediaSingle", "content": [{"type": "media"}]},
            create_media_single(None),
            create_media_single(""),
        ])

        assert collect_local_media(doc) == []

    def test_bare_media_outside_media_single_is_ignored(self):
        """Only media wrapped in mediaSingle are candidates."""
        doc = make_document([
            {"type": "mediaGroup", "content": [
                {"type": "media", "attrs": {"type": "external", "url": "./a.png"}}
            ]},
        ])

        assert collect_local_media(doc) == []


class TestResolveMediaPath:
    """Test cases for resolve_media_path."""

    def test_relative_to_base(self):
        base = os.path.join(os.sep, "docs")

        assert resolve_media_path(base, "./img/a.png") == os.path.join(base, "img", "a.png")

    def test_parent_directory(self):
        base = os.path.join(os.sep, "docs", "guide")

        assert resolve_media_path(base, "../a.png") == os.path.join(os.sep, "docs", "a.png")

    def test_absolute_path_is_kept(self):
        absolute = os.path.join(os.sep, "srv", "a.png")

        assert resolve_media_path(os.path.join(os.sep, "docs"), absolute) == absolute


class TestRewriteMediaNode:
    """Test cases for rewrite_media_node."""

    def test_sets_file_attributes_and_clears_url(self):
        """The node points at the attachment and is no longer local."""
        media = AdfNode(type="media", attrs={"type": "external", "url": "./a.png", "extra": 1})

        rewrite_media_node(media, "file-1", "123", "a.png")

        assert media.attrs == {
            "type": "file",
            "url": "",
            "extra": 1,
            "id": "file-1",
            "collection": "contentId-123",
            "width": "860",
            "height": "860",
            "alt": "a.png",
        }

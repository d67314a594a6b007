"""Unit tests for the PageSync engine."""

import json
import os

import pytest
from unittest.mock import Mock, call, patch

from src.adf_document.document import AdfDocument
from src.confluence_client.errors import APIAccessError, APIUnreachableError
from src.page_sync.errors import MissingDocumentError
from src.page_sync.models import AttachmentHandle, PageHandle, SyncConfig
from src.page_sync.sync_engine import PageSync
from tests.fixtures.adf_fixtures import create_adf_doc, create_media_single, create_paragraph

SOURCE_FILE = os.path.join(os.sep, "docs", "spec.md")
DOCS_DIR = os.path.dirname(SOURCE_FILE)


def make_document(content=None, title="Spec"):
    """Build an in-memory document that claims to come from /docs/spec.md."""
    if content is None:
        content = [create_paragraph("hello")]
    return AdfDocument.from_dict(title, create_adf_doc(content), source_file=SOURCE_FILE)


def make_engine(document=None, pages=None, attachments=None):
    return PageSync(
        SyncConfig(space_id="98765"),
        document=document,
        pages=pages or Mock(),
        attachments=attachments or Mock(),
    )


def page(version, page_id="123", title="Spec"):
    return PageHandle(id=page_id, title=title, version=version, space_id="98765")


def attachment(attachment_id, file_id=None, title="diagram.png"):
    return AttachmentHandle(id=attachment_id, title=title, file_id=file_id, page_id="123")


@pytest.fixture
def pages():
    mock_pages = Mock()
    mock_pages.update.side_effect = lambda **kwargs: page(kwargs["version_number"])
    return mock_pages


@pytest.fixture
def attachments():
    mock_attachments = Mock()
    mock_attachments.upload.side_effect = [attachment("att1"), attachment("att2")]
    mock_attachments.get_by_id.side_effect = [
        attachment("att1", file_id="file-1"),
        attachment("att2", file_id="file-2"),
    ]
    return mock_attachments


class TestConstruction:
    """Test cases for PageSync construction."""

    @patch('src.page_sync.sync_engine.Authenticator')
    @patch('src.page_sync.sync_engine.APIWrapper')
    def test_builds_default_collaborators(self, mock_wrapper, mock_auth):
        """Without collaborators, one APIWrapper backs both of them."""
        engine = PageSync(SyncConfig(space_id="98765"))

        mock_wrapper.assert_called_once_with(mock_auth.return_value)
        assert engine.pages.api is mock_wrapper.return_value
        assert engine.attachments.api is mock_wrapper.return_value

    @patch('src.page_sync.sync_engine.APIWrapper')
    def test_injected_collaborators_skip_default_api(self, mock_wrapper):
        """Injected collaborators are used as-is."""
        pages, attachments = Mock(), Mock()

        engine = PageSync(SyncConfig(space_id="98765"), pages=pages, attachments=attachments)

        mock_wrapper.assert_not_called()
        assert engine.pages is pages
        assert engine.attachments is attachments


class TestSyncContent:
    """Test cases for sync_content (no attachment handling)."""

    def test_creates_page_when_title_not_found(self, pages):
        """A miss creates exactly one page and never updates."""
        pages.find_by_title.return_value = None
        pages.create.return_value = page(1)
        engine = make_engine(make_document(), pages=pages)

        result = engine.sync_content()

        pages.create.assert_called_once()
        assert pages.create.call_args.kwargs["title"] == "Spec"
        assert pages.create.call_args.kwargs["space_id"] == "98765"
        pages.update.assert_not_called()
        assert result.created is True
        assert result.page.version == 1

    def test_updates_existing_page_with_next_version(self, pages):
        """A hit at version 3 is updated with version 4."""
        pages.find_by_title.return_value = page(3)
        engine = make_engine(make_document(), pages=pages)

        result = engine.sync_content()

        pages.create.assert_not_called()
        pages.update.assert_called_once()
        assert pages.update.call_args.kwargs["version_number"] == 4
        assert pages.update.call_args.kwargs["message"] == f"Updated from {SOURCE_FILE}"
        assert result.created is False

    def test_sends_serialized_tree(self, pages):
        """The update body is the document's current ADF JSON."""
        document = make_document()
        pages.find_by_title.return_value = page(1)
        engine = make_engine(document, pages=pages)

        engine.sync_content()

        body = json.loads(pages.update.call_args.kwargs["adf_value"])
        assert body["type"] == "doc"
        assert body["content"][0]["content"][0]["text"] == "hello"

    def test_leaves_local_images_untouched(self, pages, attachments):
        """Content-only sync makes no attachment calls."""
        pages.find_by_title.return_value = page(1)
        document = make_document([create_media_single("./diagram.png")])
        engine = make_engine(document, pages=pages, attachments=attachments)

        engine.sync_content()

        attachments.upload.assert_not_called()
        assert document.list_images() == ["./diagram.png"]


class TestSync:
    """Test cases for sync with inline media."""

    def test_create_scenario(self, pages, attachments):
        """A new page is created then updated once with the rewritten tree."""
        pages.find_by_title.return_value = None
        pages.create.return_value = page(1)
        engine = make_engine(make_document(), pages=pages, attachments=attachments)

        result = engine.sync()

        pages.create.assert_called_once()
        pages.get_by_id.assert_not_called()
        assert pages.update.call_args.kwargs["version_number"] == 2
        assert result.created is True
        assert result.uploaded == []

    def test_uses_freshest_version(self, pages, attachments):
        """The version read by id wins over the one from the title lookup."""
        pages.find_by_title.return_value = page(3)
        pages.get_by_id.return_value = page(5)
        engine = make_engine(make_document(), pages=pages, attachments=attachments)

        engine.sync()

        pages.get_by_id.assert_called_once_with("123")
        assert pages.update.call_args.kwargs["version_number"] == 6

    def test_uploads_and_rewrites_local_image(self, pages, attachments):
        """A local image is uploaded and its node linked to the file id."""
        pages.find_by_title.return_value = page(2)
        pages.get_by_id.return_value = page(2)
        document = make_document([create_media_single("./diagram.png", alt="diagram")])
        engine = make_engine(document, pages=pages, attachments=attachments)

        result = engine.sync()

        attachments.upload.assert_called_once_with("123", os.path.join(DOCS_DIR, "diagram.png"))
        attachments.get_by_id.assert_called_once_with("att1")
        media = document.content.content[0].content[0]
        assert media.attrs == {
            "id": "file-1",
            "collection": "contentId-123",
            "width": "860",
            "height": "860",
            "type": "file",
            "alt": "diagram.png",
            "url": "",
        }
        assert [info.file_id for info in result.uploaded] == ["file-1"]

        # The update carries the rewritten node
        body = json.loads(pages.update.call_args.kwargs["adf_value"])
        assert body["content"][0]["content"][0]["attrs"]["id"] == "file-1"

    def test_remote_images_are_not_uploaded(self, pages, attachments):
        """Only local references are uploaded, in document order."""
        pages.find_by_title.return_value = page(1)
        pages.get_by_id.return_value = page(1)
        document = make_document([
            create_media_single("https://example.com/logo.png"),
            create_media_single("./a.png"),
            create_media_single("//cdn/b.png"),
            create_media_single("../shared/c.png"),
        ])
        engine = make_engine(document, pages=pages, attachments=attachments)

        engine.sync()

        assert attachments.upload.call_args_list == [
            call("123", os.path.join(DOCS_DIR, "a.png")),
            call("123", os.path.join(os.sep, "shared", "c.png")),
        ]
        assert document.list_images()[0] == "https://example.com/logo.png"

    def test_second_run_uploads_nothing(self, pages, attachments):
        """Rewritten nodes are not local any more, so re-runs are idempotent."""
        pages.find_by_title.return_value = page(1)
        pages.get_by_id.return_value = page(1)
        document = make_document([create_media_single("./diagram.png")])
        engine = make_engine(document, pages=pages, attachments=attachments)

        engine.sync()
        attachments.upload.reset_mock()
        result = engine.sync()

        attachments.upload.assert_not_called()
        assert result.uploaded == []

    def test_upload_failure_stops_the_run(self, pages, attachments):
        """A failing upload propagates and the page is never updated."""
        pages.find_by_title.return_value = page(1)
        pages.get_by_id.return_value = page(1)
        attachments.upload.side_effect = APIAccessError("upload failed")
        engine = make_engine(
            make_document([create_media_single("./diagram.png")]),
            pages=pages,
            attachments=attachments,
        )

        with pytest.raises(APIAccessError):
            engine.sync()

        pages.update.assert_not_called()

    def test_attachment_without_file_id_stops_the_run(self, pages, attachments):
        """A missing fileId is an error; the node is not rewritten and the page not updated."""
        pages.find_by_title.return_value = page(1)
        pages.get_by_id.return_value = page(1)
        attachments.get_by_id.side_effect = None
        attachments.get_by_id.return_value = attachment("att1")
        document = make_document([create_media_single("./a.png")])
        engine = make_engine(document, pages=pages, attachments=attachments)

        with pytest.raises(APIAccessError) as exc_info:
            engine.sync()

        assert "att1 has no fileId" in str(exc_info.value)
        assert document.list_images() == ["./a.png"]
        pages.update.assert_not_called()

    def test_failure_after_first_upload_keeps_partial_rewrite(self, pages, attachments):
        """Nodes processed before a failure stay rewritten in memory."""
        pages.find_by_title.return_value = page(1)
        pages.get_by_id.return_value = page(1)
        attachments.upload.side_effect = [attachment("att1"), APIUnreachableError("x")]
        document = make_document([
            create_media_single("./a.png"),
            create_media_single("./b.png"),
        ])
        engine = make_engine(document, pages=pages, attachments=attachments)

        with pytest.raises(APIUnreachableError):
            engine.sync()

        assert document.content.content[0].content[0].attrs["id"] == "file-1"
        assert document.list_images() == ["./b.png"]
        pages.update.assert_not_called()

    def test_locate_failure_propagates(self, pages):
        """Errors from the title lookup abort before any write."""
        pages.find_by_title.side_effect = APIUnreachableError("https://x/wiki")
        engine = make_engine(make_document(), pages=pages)

        with pytest.raises(APIUnreachableError):
            engine.sync()

        pages.create.assert_not_called()
        pages.update.assert_not_called()


class TestPublishToPage:
    """Test cases for publish_to_page."""

    def test_reads_version_after_uploads(self, pages, attachments):
        """The page version is read once, right before the update."""
        pages.get_by_id.return_value = page(7, page_id="555")
        document = make_document([create_media_single("./diagram.png")])
        engine = make_engine(document, pages=pages, attachments=attachments)

        result = engine.publish_to_page("555")

        attachments.upload.assert_called_once_with("555", os.path.join(DOCS_DIR, "diagram.png"))
        pages.find_by_title.assert_not_called()
        pages.get_by_id.assert_called_once_with("555")
        assert pages.update.call_args.kwargs["page_id"] == "555"
        assert pages.update.call_args.kwargs["version_number"] == 8
        assert result.created is False
        assert document.content.content[0].content[0].attrs["collection"] == "contentId-555"


class TestMissingDocument:
    """Operations that need a document fail before any remote call."""

    @pytest.mark.parametrize("operation, args, name", [
        ("sync", (), "sync"),
        ("sync_content", (), "sync"),
        ("force_create_page", (), "create"),
        ("publish_to_page", ("123",), "publish"),
    ])
    def test_raises_without_remote_calls(self, pages, attachments, operation, args, name):
        """MissingDocumentError names the operation."""
        engine = make_engine(None, pages=pages, attachments=attachments)

        with pytest.raises(MissingDocumentError) as exc_info:
            getattr(engine, operation)(*args)

        assert str(exc_info.value) == f"Document is required for {name} command"
        assert pages.method_calls == []
        assert attachments.method_calls == []


class TestPageQueries:
    """Test cases for the read-only helpers."""

    def test_force_create_page_never_looks_up(self, pages):
        """force_create_page creates directly, even if the title exists."""
        pages.create.return_value = page(1)
        engine = make_engine(make_document(), pages=pages)

        result = engine.force_create_page()

        pages.find_by_title.assert_not_called()
        assert result.id == "123"

    def test_find_page_by_title_uses_configured_space(self, pages):
        """Title lookups are scoped to the configured space."""
        pages.find_by_title.return_value = None
        engine = make_engine(pages=pages)

        assert engine.find_page_by_title("Spec") is None
        pages.find_by_title.assert_called_once_with("Spec", "98765")

    def test_list_pages(self, pages):
        """list_pages lists the configured space."""
        pages.list_in_space.return_value = [page(1)]
        engine = make_engine(pages=pages)

        assert engine.list_pages() == [page(1)]
        pages.list_in_space.assert_called_once_with("98765")

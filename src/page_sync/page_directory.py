"""Page lookup, creation and update against Confluence.

The directory is the single source of truth for page identity and version:
it never invents a version number, it only forwards what the caller asks for.
"""

import logging
from typing import List, Optional

from src.confluence_client.api_wrapper import APIWrapper
from .models import PageHandle

logger = logging.getLogger(__name__)


class PageDirectory:
    """Page operations on top of APIWrapper, returning PageHandle objects.

    Example:
        >>> pages = PageDirectory(api)
        >>> page = pages.find_by_title("Spec", space_id="98765")
        >>> if page:
        ...     pages.update(page.id, page.title, adf, page.version + 1, "sync")
    """

    def __init__(self, api: APIWrapper):
        self.api = api

    def find_by_title(self, title: str, space_id: str) -> Optional[PageHandle]:
        """Find a current page by exact title within a space.

        When several pages share the title, the first one in Confluence's
        result order is returned.
        """
        results = self.api.get_pages_by_title(space_id=space_id, title=title)
        matches = [page for page in results if page.get("title") == title]

        if not matches:
            logger.debug(f"No page titled '{title}' in space {space_id}")
            return None

        if len(matches) > 1:
            logger.warning(
                f"{len(matches)} pages titled '{title}' in space {space_id}, "
                f"using {matches[0].get('id')}"
            )

        return PageHandle.from_api(matches[0])

    def get_by_id(self, page_id: str) -> PageHandle:
        """Fetch a page, including its ADF body and current version."""
        return PageHandle.from_api(self.api.get_page(page_id))

    def create(
        self,
        space_id: str,
        title: str,
        adf_value: str,
        parent_id: Optional[str] = None,
    ) -> PageHandle:
        """Create a page and return its handle (version assigned by Confluence)."""
        logger.info(f"Creating page '{title}' in space {space_id}")
        data = self.api.create_page(
            space_id=space_id,
            title=title,
            adf_value=adf_value,
            parent_id=parent_id,
        )
        page = PageHandle.from_api(data)
        logger.info(f"Created page {page.id} (version {page.version})")
        return page

    def update(
        self,
        page_id: str,
        title: str,
        adf_value: str,
        version_number: int,
        message: str = "",
    ) -> PageHandle:
        """Replace a page's content with ``version_number`` as its new version."""
        logger.info(f"Updating page {page_id} to version {version_number}")
        data = self.api.update_page(
            page_id=page_id,
            title=title,
            adf_value=adf_value,
            version_number=version_number,
            message=message,
        )
        return PageHandle.from_api(data)

    def list_in_space(self, space_id: str) -> List[PageHandle]:
        return [PageHandle.from_api(page) for page in self.api.get_pages_in_space(space_id)]

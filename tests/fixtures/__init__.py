"""Test fixtures shared by the unit tests.

This module provides builders for ADF documents and Confluence API payloads.
"""

from .adf_fixtures import (
    create_adf_doc,
    create_paragraph,
    create_heading,
    create_media_single,
)
from .api_payloads import (
    page_payload,
    attachment_payload,
    upload_payload,
)

__all__ = [
    'create_adf_doc',
    'create_paragraph',
    'create_heading',
    'create_media_single',
    'page_payload',
    'attachment_payload',
    'upload_payload',
]

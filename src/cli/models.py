"""Data models for CLI operations."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional


class ExitCode(IntEnum):
    """Exit codes for CLI operations.

    - SUCCESS (0): Operation completed successfully
    - GENERAL_ERROR (1): Config, validation, document or API errors
    - AUTH_ERROR (3): Authentication or authorization failure
    - NETWORK_ERROR (4): Network connectivity or API availability issues
    """
    SUCCESS = 0
    GENERAL_ERROR = 1
    AUTH_ERROR = 3
    NETWORK_ERROR = 4


@dataclass
class ConnectionSettings:
    """Resolved connection settings for one CLI invocation.

    Attributes:
        domain: Confluence domain (e.g., your-company.atlassian.net)
        user: Confluence user email
        token: Confluence API token
        space_id: Numeric space id, when the command needs one
        parent_page_id: Parent for newly created pages
    """
    domain: str
    user: str
    token: str
    space_id: Optional[str] = None
    parent_page_id: Optional[str] = None

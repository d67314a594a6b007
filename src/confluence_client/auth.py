"""Authentication module for loading Confluence credentials.

Credentials come from explicit values (usually CLI options) and fall back to
environment variables, which python-dotenv populates from a .env file.
"""

import os
from typing import NamedTuple, Optional

from dotenv import load_dotenv

from .errors import InvalidCredentialsError


class Credentials(NamedTuple):
    """Confluence API credentials."""
    domain: str
    user: str
    api_token: str

    @property
    def url(self) -> str:
        """Base URL of the Confluence Cloud instance (with the /wiki root)."""
        domain = self.domain.rstrip('/')
        if not domain.startswith(('http://', 'https://')):
            domain = f"https://{domain}"
        if not domain.endswith('/wiki'):
            domain = f"{domain}/wiki"
        return domain


class Authenticator:
    """Resolves and validates Confluence credentials.

    Explicit arguments win over environment variables. Credentials are never
    logged.

    Environment variables:
        CONFLUENCE_DOMAIN: Confluence domain (e.g., your-company.atlassian.net)
        CONFLUENCE_USER: Confluence user email address
        CONFLUENCE_TOKEN: Confluence API token

    Example:
        >>> auth = Authenticator(user="me@example.com")
        >>> creds = auth.get_credentials()
        >>> print(f"Connecting to {creds.url}")
    """

    def __init__(
        self,
        domain: Optional[str] = None,
        user: Optional[str] = None,
        api_token: Optional[str] = None,
    ):
        """Load environment variables from .env and remember explicit values."""
        load_dotenv()
        self._domain = domain
        self._user = user
        self._api_token = api_token

    def get_credentials(self) -> Credentials:
        """Get Confluence credentials.

        Returns:
            Credentials: A named tuple containing domain, user, and api_token

        Raises:
            InvalidCredentialsError: If any required credential is missing
        """
        domain = self._domain or os.getenv('CONFLUENCE_DOMAIN')
        user = self._user or os.getenv('CONFLUENCE_USER')
        api_token = self._api_token or os.getenv('CONFLUENCE_TOKEN')

        if not domain or not user or not api_token:
            raise InvalidCredentialsError(
                user=user if user else "unknown",
                endpoint=domain if domain else "unknown"
            )

        return Credentials(domain=domain, user=user, api_token=api_token)

"""Connection settings resolution.

Settings come from three places, highest precedence first:

    1. Command-line options
    2. Environment variables (a .env file is loaded with python-dotenv)
    3. An optional YAML config file

Config file structure (every key optional; the API token is never read
from the file):
    domain: "your-company.atlassian.net"
    user: "me@example.com"
    space_id: "98765"
    parent_page_id: "123456"
"""

import os
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from .errors import ConfigError, ConfigFileError
from .models import ConnectionSettings

DEFAULT_CONFIG_FILE = '.md-page-sync.yaml'

# Setting name -> environment variable
ENV_VARS = {
    'domain': 'CONFLUENCE_DOMAIN',
    'user': 'CONFLUENCE_USER',
    'token': 'CONFLUENCE_TOKEN',
    'space_id': 'CONFLUENCE_SPACE_ID',
    'parent_page_id': 'CONFLUENCE_PARENT_PAGE_ID',
}

FILE_KEYS = {'domain', 'user', 'space_id', 'parent_page_id'}


class ConfigLoader:
    """Resolves ConnectionSettings from options, environment and config file."""

    @classmethod
    def load_file(cls, config_path: str) -> Dict[str, Any]:
        """Read the YAML config file.

        Returns:
            Dict of recognised settings (values converted to strings)

        Raises:
            ConfigFileError: If the file cannot be read
            ConfigError: If the YAML is malformed or has unknown keys
        """
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except PermissionError:
            raise ConfigFileError(config_path, 'Permission denied')
        except OSError as e:
            raise ConfigFileError(config_path, str(e))

        try:
            config_dict = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML syntax: {str(e)}")

        if config_dict is None:
            return {}

        if not isinstance(config_dict, dict):
            raise ConfigError(
                f"Configuration must be a YAML dictionary, got {type(config_dict).__name__}"
            )

        if 'token' in config_dict:
            raise ConfigError(
                "API tokens must not be stored in the config file; "
                "use CONFLUENCE_TOKEN or --token",
                config_field='token'
            )

        unknown = set(config_dict) - FILE_KEYS
        if unknown:
            raise ConfigError(f"Unknown setting(s): {', '.join(sorted(unknown))}")

        return {
            key: str(value)
            for key, value in config_dict.items()
            if value is not None
        }

    @classmethod
    def resolve(
        cls,
        domain: Optional[str] = None,
        user: Optional[str] = None,
        token: Optional[str] = None,
        space_id: Optional[str] = None,
        parent_page_id: Optional[str] = None,
        config_path: Optional[str] = None,
        require_space: bool = True,
    ) -> ConnectionSettings:
        """Merge options, environment and config file into ConnectionSettings.

        Args:
            config_path: Explicit config file; must exist if given. When
                         omitted, DEFAULT_CONFIG_FILE is used if present.
            require_space: Whether a space id is mandatory for this command

        Raises:
            ConfigError: If a required setting is missing everywhere
        """
        load_dotenv()

        file_values: Dict[str, Any] = {}
        if config_path:
            file_values = cls.load_file(config_path)
        elif os.path.exists(DEFAULT_CONFIG_FILE):
            file_values = cls.load_file(DEFAULT_CONFIG_FILE)

        explicit = {
            'domain': domain,
            'user': user,
            'token': token,
            'space_id': space_id,
            'parent_page_id': parent_page_id,
        }

        values: Dict[str, Optional[str]] = {}
        for key, value in explicit.items():
            values[key] = value or os.getenv(ENV_VARS[key]) or file_values.get(key)

        required = ['domain', 'user', 'token']
        if require_space:
            required.append('space_id')

        missing = [key for key in required if not values[key]]
        if missing:
            hints = ', '.join(
                f"--{key.replace('_', '-')} / {ENV_VARS[key]}" for key in missing
            )
            raise ConfigError(f"Missing required setting(s): {hints}")

        return ConnectionSettings(
            domain=values['domain'],  # type: ignore[arg-type]
            user=values['user'],  # type: ignore[arg-type]
            token=values['token'],  # type: ignore[arg-type]
            space_id=values['space_id'],
            parent_page_id=values['parent_page_id'],
        )

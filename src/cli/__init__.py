"""Command-line interface for publishing Markdown files to Confluence.

This package provides the `md-page-sync` CLI tool: one subcommand per page or
attachment operation, JSON results on stdout, and typed errors mapped to exit
codes.
"""

from .config import ConfigLoader
from .models import ExitCode, ConnectionSettings
from .errors import CLIError, ConfigError, ConfigFileError

__all__ = [
    'ConfigLoader',
    'ExitCode',
    'ConnectionSettings',
    'CLIError',
    'ConfigError',
    'ConfigFileError',
]

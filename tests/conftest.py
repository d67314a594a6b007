"""Root pytest configuration for all tests."""

import logging

# atlassian-python-api logs failed requests at ERROR level; tests trigger
# those on purpose when checking error translation.
logging.getLogger("atlassian").setLevel(logging.WARNING)

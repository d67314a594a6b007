"""Classification of media references as local files or remote URLs."""

from typing import Optional

LOCAL_PREFIXES = ("./", "../")
REMOTE_PREFIXES = ("http://", "https://", "//")


def is_local_reference(ref: Optional[str]) -> bool:
    """Return True if ``ref`` points at the local filesystem.

    Rules, first match wins:
        - empty or None: not local
        - ``./`` or ``../`` prefix: local
        - ``http://``, ``https://`` or protocol-relative ``//``: remote
        - anything else (bare relative paths, unknown schemes): local

    Unknown schemes such as ``data:`` are treated as paths and fail at
    upload time.

    Example:
        >>> is_local_reference("./img.png")
        True
        >>> is_local_reference("https://example.com/img.png")
        False
    """
    if not ref:
        return False
    if ref.startswith(LOCAL_PREFIXES):
        return True
    if ref.startswith(REMOTE_PREFIXES):
        return False
    return True

"""Small URL path helpers shared by the fallback router and the rewrite middleware."""

import re

# A final path segment ending in ".<alphanumerics>" is treated as a file name.
_EXTENSION_RE = re.compile(r"\.[A-Za-z0-9]+$")


def has_file_extension(path: str) -> bool:
    """Return True when the last segment of `path` ends with a file extension."""
    return bool(_EXTENSION_RE.search(path))


def strip_trailing_slash(path: str) -> str:
    """Drop a single trailing slash, so "/docs/" becomes "/docs" and "/" becomes ""."""
    return path[:-1] if path.endswith("/") else path

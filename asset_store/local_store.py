"""
Directory-backed asset store serving a static site build from disk.

The edge app is deployed next to the static build output (for example `dist/`, whose
`client/` subdirectory holds the rendered pages). This store maps URL paths onto files
below that root and serves them with Starlette's FileResponse, which takes care of
Content-Type, Content-Length, ETag and Last-Modified headers. Directories are treated as
missing assets so that the router can apply its `index.html` fallback, and any path that
would resolve outside the root is refused with a 404.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

from fastapi import Request
from fastapi.responses import FileResponse, Response

from .base import AssetStore, not_found_response

logger = logging.getLogger(__name__)


class LocalAssetStore(AssetStore):
    """
    Serve assets from a local directory.

    Args:
        root (Union[str, Path]): Directory containing the built site.
    """

    def __init__(self, root: Union[str, Path]) -> None:
        self.root = Path(root).resolve()

    def resolve(self, path: str) -> Path | None:
        """
        Map a decoded URL path onto a file below the root.

        `path` is taken as-is (the ASGI server already percent-decoded it). Returns None
        when the path escapes the root or does not name a regular file.
        """
        relative = path.lstrip("/")
        candidate = (self.root / relative).resolve()
        if candidate != self.root and self.root not in candidate.parents:
            logger.warning("Refusing asset path outside root: %s", path)
            return None
        if not candidate.is_file():
            return None
        return candidate

    async def fetch(self, path: str, request: Request) -> Response:
        file_path = self.resolve(path)
        if file_path is None:
            return not_found_response()
        return FileResponse(file_path)

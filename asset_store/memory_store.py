"""
Deterministic in-memory asset store for local runs, demos, and tests.

This module provides a reference implementation of the asset store interface that keeps
its assets in a plain dictionary keyed by URL path. It also records every path it was
asked for, in order, so tests can assert on the exact lookup sequence the fallback
router performed without touching the filesystem.
"""

import mimetypes
from typing import Dict, List, Optional, Union

from fastapi import Request
from fastapi.responses import Response

from .base import AssetStore, not_found_response


class InMemoryAssetStore(AssetStore):
    """
    In-memory implementation of `AssetStore`.

    Args:
        files (Dict[str, Union[str, bytes]], optional): Mapping of absolute URL path to
            asset content. Text content is encoded as UTF-8.
    """

    def __init__(self, files: Optional[Dict[str, Union[str, bytes]]] = None) -> None:
        self._files: Dict[str, bytes] = {}
        self.requested: List[str] = []
        for path, content in (files or {}).items():
            self.put(path, content)

    def put(self, path: str, content: Union[str, bytes]) -> None:
        """Store `content` at `path`, replacing any previous asset."""
        if isinstance(content, str):
            content = content.encode("utf-8")
        self._files[path] = content

    async def fetch(self, path: str, request: Request) -> Response:
        self.requested.append(path)
        content = self._files.get(path)
        if content is None:
            return not_found_response()
        media_type, _ = mimetypes.guess_type(path)
        return Response(content=content, media_type=media_type or "application/octet-stream")

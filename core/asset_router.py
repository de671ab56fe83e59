"""
Static asset fallback router for the edge site.

Every request that reaches the edge app is answered from the asset store. A static site
build only contains concrete files, so pretty URLs such as "/docs/getting-started" have
to be mapped onto the "index.html" written for them, and unknown URLs have to be
answered with the site's own "404.html" page. This module implements that mapping as an
ordered list of lookups where the first response that is not a 404 wins:

1. Client namespace probe (only when a client prefix is configured): for paths outside
   the client namespace that contain no dot, try "{prefix}{path}/index.html". The root
   path therefore probes "{prefix}/index.html".
2. Direct lookup of the request path.
3. Directory index: for paths without a file extension, try "{path}/index.html".
4. Not-found page: "{prefix}/404.html", returned whatever its status.

Responses are passed back verbatim (status, headers and body untouched). The router has
no retry or caching of its own, and exceptions raised by the store propagate unchanged
to the caller.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Request
from fastapi.responses import Response

from asset_store import AssetStore, NOT_FOUND_STATUS
from config.logging_config import get_logger
from core.url_paths import has_file_extension, strip_trailing_slash
from monitoring.metrics import record_asset_lookup

logger = get_logger(__name__, "asset_router")


class AssetFallbackRouter:
    """
    Resolve a request path against an asset store with index and 404 fallbacks.

    Args:
        store (AssetStore): Where assets are looked up.
        client_prefix (Optional[str]): Namespace holding the rendered client pages,
            e.g. "/client". None disables the client probe and serves the not-found
            page from the store root.
        not_found_page (str): File name of the not-found page inside the namespace.
    """

    def __init__(
        self,
        store: AssetStore,
        client_prefix: Optional[str] = None,
        not_found_page: str = "404.html",
    ) -> None:
        self.store = store
        self.client_prefix = strip_trailing_slash(client_prefix) if client_prefix else None
        self.not_found_page = not_found_page.lstrip("/")

    @property
    def not_found_path(self) -> str:
        return f"{self.client_prefix or ''}/{self.not_found_page}"

    async def handle(self, request: Request) -> Response:
        """
        Return the response for `request` following the fallback order above.

        Args:
            request (Request): Incoming request; only its URL path is inspected.

        Returns:
            Response: The first non-404 asset response, or the not-found page response.
        """
        path = request.url.path or "/"

        if self._should_probe_client(path):
            response = await self._lookup("client_index", f"{self.client_prefix}{strip_trailing_slash(path)}/index.html", request)
            if response.status_code != NOT_FOUND_STATUS:
                return response

        response = await self._lookup("direct", path, request)
        if response.status_code != NOT_FOUND_STATUS:
            return response

        if not has_file_extension(path):
            response = await self._lookup("directory_index", f"{strip_trailing_slash(path)}/index.html", request)
            if response.status_code != NOT_FOUND_STATUS:
                return response

        logger.debug("No asset for %s, serving %s", path, self.not_found_path)
        return await self._lookup("not_found_page", self.not_found_path, request)

    def _should_probe_client(self, path: str) -> bool:
        if self.client_prefix is None:
            return False
        return not path.startswith(f"{self.client_prefix}/") and "." not in path

    async def _lookup(self, stage: str, path: str, request: Request) -> Response:
        response = await self.store.fetch(path, request)
        record_asset_lookup(stage, response.status_code)
        return response

"""
Asset store interface used by the edge fallback router.

This module defines the abstract contract that any static-asset host must fulfill in
order to be used by `core.asset_router`. The router only needs one capability: given a
URL path, return the HTTP response the host would serve for it, with status 404 when no
asset exists at that path. Keeping the contract this narrow lets the same routing logic
run against a build output directory on disk, an in-memory fixture in tests, or any
remote object store wrapped in a small adapter.

Key concepts:
- Asset path: an absolute URL path such as "/client/docs/index.html". Implementations
  decide how it maps onto their storage.
- Not found: signalled by a 404 response, never by an exception. Exceptions raised by an
  implementation are transport failures and propagate to the caller unchanged.
"""

from abc import ABC, abstractmethod

from fastapi import Request
from fastapi.responses import Response


NOT_FOUND_STATUS = 404


class AssetStore(ABC):
    """
    Abstract static-asset host.

    Implementations return responses that the router hands back to the client verbatim,
    so headers such as Content-Type, ETag or Last-Modified are the implementation's
    responsibility.
    """

    @abstractmethod
    async def fetch(self, path: str, request: Request) -> Response:
        """
        Look up the asset stored at `path`.

        Args:
            path (str): Absolute URL path of the asset, always starting with "/".
            request (Request): The original client request; implementations may honour
                its method or conditional/range headers.

        Returns:
            Response: The asset response, or a response with status 404 when nothing is
            stored at `path`.
        """
        raise NotImplementedError


def not_found_response() -> Response:
    """Return the plain-text 404 response stores use to signal a missing asset."""
    return Response(status_code=NOT_FOUND_STATUS, content=b"Not Found", media_type="text/plain")

"""
Namespace rewrite middleware for content routes.

Content pages of the site are rendered under a single namespace prefix ("/webflow" by
default), but visitors should see clean URLs such as "/docs/intro". This ASGI middleware
classifies each HTTP request path and, for content paths, prepends the namespace prefix
before the request reaches the downstream app. The rewrite changes the ASGI scope only,
so it is invisible to the client: there is no redirect and the browser URL is unchanged.
The query string lives in its own scope key and is therefore preserved as-is.

A path is left untouched when it is:
- static: equal to, or nested below, one of the known static prefixes ("/_astro",
  "/assets", "/favicon", ...), or ending with a file extension;
- namespaced: already starting with the namespace prefix.

No state is kept between requests.
"""

from __future__ import annotations

from typing import Iterable, Sequence, Tuple

from starlette.types import ASGIApp, Receive, Scope, Send

from config.logging_config import get_logger
from core.url_paths import has_file_extension
from monitoring.metrics import record_path_rewrite

logger = get_logger(__name__, "path_rewrite")

DEFAULT_NAMESPACE_PREFIX = "/webflow"

DEFAULT_STATIC_PREFIXES: Tuple[str, ...] = (
    "/webflow",
    "/_astro",
    "/assets",
    "/fonts",
    "/videos",
    "/uploads",
    "/favicon",
    "/robots",
    "/sitemap",
)

STATIC = "static"
NAMESPACED = "namespaced"
CONTENT = "content"


def is_static_asset_path(path: str, static_prefixes: Iterable[str] = DEFAULT_STATIC_PREFIXES) -> bool:
    """Return True when `path` sits under a static prefix or names a file."""
    for prefix in static_prefixes:
        if path == prefix or path.startswith(f"{prefix}/"):
            return True
    return has_file_extension(path)


def classify_path(
    path: str,
    namespace_prefix: str = DEFAULT_NAMESPACE_PREFIX,
    static_prefixes: Iterable[str] = DEFAULT_STATIC_PREFIXES,
) -> str:
    """
    Classify a request path as STATIC, NAMESPACED or CONTENT.

    Only CONTENT paths are rewritten by the middleware.
    """
    if is_static_asset_path(path, static_prefixes):
        return STATIC
    if path.startswith(namespace_prefix):
        return NAMESPACED
    return CONTENT


def rewrite_url(
    path: str,
    query_string: str = "",
    namespace_prefix: str = DEFAULT_NAMESPACE_PREFIX,
    static_prefixes: Iterable[str] = DEFAULT_STATIC_PREFIXES,
) -> str:
    """
    Return the URL (path plus optional "?query") the downstream app should see.

    >>> rewrite_url("/docs/intro", "page=2")
    '/webflow/docs/intro?page=2'
    >>> rewrite_url("/assets/logo.svg")
    '/assets/logo.svg'
    """
    if classify_path(path, namespace_prefix, static_prefixes) == CONTENT:
        path = f"{namespace_prefix}{path}"
    return f"{path}?{query_string}" if query_string else path


class PathRewriteMiddleware:
    """
    Pure ASGI middleware that moves content paths under the namespace prefix.

    Args:
        app (ASGIApp): Downstream application.
        namespace_prefix (str): Prefix prepended to content paths.
        static_prefixes (Sequence[str]): Prefixes that are never rewritten.
    """

    def __init__(
        self,
        app: ASGIApp,
        namespace_prefix: str = DEFAULT_NAMESPACE_PREFIX,
        static_prefixes: Sequence[str] = DEFAULT_STATIC_PREFIXES,
    ) -> None:
        self.app = app
        self.namespace_prefix = namespace_prefix
        self.static_prefixes = tuple(static_prefixes)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        path = scope["path"]
        action = classify_path(path, self.namespace_prefix, self.static_prefixes)
        if action != CONTENT:
            record_path_rewrite(action)
            await self.app(scope, receive, send)
            return

        rewritten = rewrite_url(path, namespace_prefix=self.namespace_prefix, static_prefixes=self.static_prefixes)
        raw_path = scope.get("raw_path") or path.encode("utf-8")
        scope = dict(scope)
        scope["path"] = rewritten
        scope["raw_path"] = self.namespace_prefix.encode("utf-8") + raw_path
        record_path_rewrite("rewritten")
        logger.debug("Rewrote %s -> %s", path, rewritten)
        await self.app(scope, receive, send)

""" main.py: FastAPI application entry point for the docs edge site.

This module builds the ASGI app that fronts the static site build. Every page request is
answered by the asset fallback router (direct asset, then `index.html`, then `404.html`)
and, when enabled in configuration, content URLs are first moved under the content
namespace by the path rewrite middleware. Operational endpoints (/health and a Prometheus
/metrics endpoint) are registered ahead of the catch-all site route and are exempt from
the rewrite. When executed directly, it starts a Uvicorn server using host/port values
from configuration.
"""

import logging
from typing import Optional

from fastapi import FastAPI

from asset_store import AssetStore, LocalAssetStore
from config import CONFIG
from config.logging_config import setup_app_logging
from core.asset_router import AssetFallbackRouter
from core.path_rewrite import DEFAULT_STATIC_PREFIXES, PathRewriteMiddleware

# --- Router Imports ---
from api import health as health_router
from api import site as site_router

logger = logging.getLogger(__name__)

# Paths served by this app itself rather than by the asset store
OPERATIONAL_PREFIXES = ("/health", "/metrics")


def create_app(store: Optional[AssetStore] = None, rewrite_enabled: Optional[bool] = None) -> FastAPI:
    """
    Create and configure the edge site application.

    Args:
        store (AssetStore, optional): Asset store to serve from. Defaults to a
            LocalAssetStore over CONFIG["site"]["assets_dir"].
        rewrite_enabled (bool, optional): Override CONFIG["rewrite"]["enabled"].

    Returns:
        FastAPI: The configured application.
    """
    site_cfg = CONFIG['site']
    rewrite_cfg = CONFIG['rewrite']

    if store is None:
        store = LocalAssetStore(site_cfg['assets_dir'])

    app = FastAPI(title="Docs Edge Site", docs_url=None, redoc_url=None)
    app.state.asset_router = AssetFallbackRouter(
        store,
        client_prefix=site_cfg.get('client_prefix'),
        not_found_page=site_cfg.get('not_found_page', '404.html'),
    )

    if rewrite_enabled is None:
        rewrite_enabled = bool(rewrite_cfg.get('enabled', True))
    if rewrite_enabled:
        static_prefixes = tuple(rewrite_cfg.get('static_prefixes') or DEFAULT_STATIC_PREFIXES)
        app.add_middleware(
            PathRewriteMiddleware,
            namespace_prefix=rewrite_cfg.get('namespace_prefix', '/webflow'),
            static_prefixes=static_prefixes + OPERATIONAL_PREFIXES,
        )

    app.include_router(health_router.router, tags=["Health"])
    # Catch-all route must stay last
    app.include_router(site_router.router, tags=["Site"])

    logger.info(
        "Edge site app created (assets=%s, client_prefix=%s, rewrite=%s)",
        type(store).__name__, site_cfg.get('client_prefix'), rewrite_enabled,
    )
    return app


app = create_app()

if __name__ == '__main__':
    import uvicorn
    setup_app_logging(config=CONFIG.get('logging'))
    logger.info("[__main__] Starting Uvicorn server for main.py")
    uvicorn.run(
        app,
        host=CONFIG.get('server', {}).get('host', '0.0.0.0'),
        port=CONFIG.get('server', {}).get('port', 8080)
    )

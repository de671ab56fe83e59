"""
Catch-all site route serving every GET/HEAD request from the asset store.

The route is registered last so that operational endpoints such as /health and /metrics
keep priority. The fallback router instance is created by `main.create_app` and stored
on `app.state.asset_router`, which keeps this module free of configuration concerns and
lets tests swap in an in-memory store.
"""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import Response

router = APIRouter()


@router.api_route("/{full_path:path}", methods=["GET", "HEAD"], include_in_schema=False)
async def serve_site(request: Request, full_path: str) -> Response:
    """Answer the request with the asset fallback router configured on the app."""
    return await request.app.state.asset_router.handle(request)

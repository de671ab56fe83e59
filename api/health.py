"""
Operational endpoints for the edge site: liveness and Prometheus metrics.

"/health" deliberately does not touch the asset store, so a missing or empty build
directory does not make the process look dead to an orchestrator. The payload carries a
static status, the package version and a UTC timestamp. "/metrics" exposes the default
prometheus_client registry in the text exposition format. Both paths are registered
ahead of the catch-all site route and are exempt from the namespace rewrite.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from version import __version__

router = APIRouter()


@router.get("/health")
def health() -> Dict[str, str]:
    """
    Return a simple health status payload.

    Returns:
        Dict[str, str]: Keys "status" (always "ok"), "version" and "timestamp" (ISO-8601, UTC).
    """
    return {
        "status": "ok",
        "version": __version__,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/metrics", include_in_schema=False)
def metrics() -> Response:
    """Expose Prometheus metrics from the default registry."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

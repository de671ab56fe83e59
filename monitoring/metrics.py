"""
Prometheus metrics for the edge site.

This module defines the counters the routing layer updates:
- Asset lookups per fallback stage and outcome (hit / miss)
- Path rewrite decisions taken by the namespace middleware
"""

from prometheus_client import Counter

ASSET_LOOKUPS = Counter(
    'asset_lookups_total',
    'Asset store lookups performed by the fallback router',
    ['stage', 'outcome']  # stage: client_index, direct, directory_index, not_found_page
)

PATH_REWRITES = Counter(
    'path_rewrites_total',
    'Request paths classified by the namespace rewrite middleware',
    ['action']  # action: static, namespaced, rewritten
)


def record_asset_lookup(stage: str, status_code: int) -> None:
    """Count one asset store lookup; any status other than 404 counts as a hit."""
    outcome = 'miss' if status_code == 404 else 'hit'
    ASSET_LOOKUPS.labels(stage=stage, outcome=outcome).inc()


def record_path_rewrite(action: str) -> None:
    """Count one middleware decision."""
    PATH_REWRITES.labels(action=action).inc()

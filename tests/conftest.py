"""
conftest.py – shared pytest bootstrap for the docs edge site.

Pytest imports this module before collecting any test file, which lets us put the project
root on `sys.path` so absolute-style imports like `from core.asset_router import ...` and
`from services.content_sync import ...` resolve without an editable install. It also
provides small helpers shared by the routing tests.
"""

import os
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Keep the developer's real credentials out of the test process
os.environ.pop("WEBFLOW_API_TOKEN", None)
os.environ.pop("WEBFLOW_ARTICLES_COLLECTION_ID", None)


def make_request(path: str = "/", method: str = "GET"):
    """Build a bare Starlette request for calling stores and routers directly."""
    from fastapi import Request

    return Request({
        "type": "http",
        "method": method,
        "path": path,
        "raw_path": path.encode("utf-8"),
        "query_string": b"",
        "headers": [],
    })


@pytest.fixture
def request_factory():
    return make_request

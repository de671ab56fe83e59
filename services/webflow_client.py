"""
Webflow CMS HTTP client used by the documentation sync job.

This module wraps the one Webflow Data API (v2) call the sync needs: listing the items
of a collection, page by page. Requests are sent through a `requests.Session` with a
bearer token, the `accept-version` header that pins the API version, and a JSON content
type. The client keeps a small, explicit error taxonomy so the caller can tell timeouts
apart from other failures, and it never retries: any failure aborts the run.

Pagination follows the API's limit/offset scheme. Pages are fetched strictly one after
another and accumulation stops at the first page that returns fewer items than the page
size. Depending on the API generation the items array is returned under `items` or
`collectionItems`; both are accepted.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://api.webflow.com/v2"
DEFAULT_API_VERSION = "2.0.0"
DEFAULT_PAGE_SIZE = 100


class WebflowClientError(Exception):
    """
    Base exception for Webflow client failures.

    Raised for non-2xx HTTP responses, invalid JSON bodies and network errors that are
    not timeouts. `status` and `body` are populated when the server answered.
    """

    def __init__(self, message: str, status: Optional[int] = None, body: Optional[str] = None) -> None:
        super().__init__(message)
        self.status = status
        self.body = body


class WebflowClientTimeoutError(WebflowClientError):
    """
    Timeout-specific client failure.

    Raised when a request exceeds the configured timeout.
    """


class WebflowClient:
    """
    Minimal Webflow Data API client.

    Args:
        token (str): Webflow API token sent as a bearer credential.
        api_base (str): API root URL, e.g. "https://api.webflow.com/v2".
        api_version (str): Value of the `accept-version` header.
        page_size (int): Items requested per page (the API maximum is 100).
        timeout_s (float): Per-request timeout in seconds.
        session (requests.Session, optional): Session to reuse; one is created if omitted.
    """

    def __init__(
        self,
        token: str,
        api_base: str = DEFAULT_API_BASE,
        api_version: str = DEFAULT_API_VERSION,
        page_size: int = DEFAULT_PAGE_SIZE,
        timeout_s: float = 30.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.api_base = api_base.rstrip("/")
        self.page_size = int(page_size)
        self.timeout_s = timeout_s
        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {token}",
            "accept-version": api_version,
            "content-type": "application/json",
        })

    def get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        GET `url` and return the parsed JSON object.

        Raises:
            WebflowClientTimeoutError: If the request exceeds the timeout.
            WebflowClientError: For non-2xx responses, network errors or invalid JSON.
        """
        try:
            resp = self.session.get(url, params=params, timeout=self.timeout_s)
        except requests.Timeout as exc:
            raise WebflowClientTimeoutError(f"Webflow request timed out after {self.timeout_s}s: {url}") from exc
        except requests.RequestException as exc:
            raise WebflowClientError(f"Network error calling Webflow: {exc}") from exc

        if not resp.ok:
            raise WebflowClientError(
                f"Webflow API error {resp.status_code}: {resp.text}",
                status=resp.status_code,
                body=resp.text,
            )

        try:
            return resp.json()
        except ValueError as exc:
            raise WebflowClientError(
                f"Invalid JSON from Webflow: {exc}: body={resp.text[:200]}",
                status=resp.status_code,
                body=resp.text,
            ) from exc

    def list_collection_items(self, collection_id: str, offset: int = 0) -> List[Dict[str, Any]]:
        """Fetch a single page of collection items starting at `offset`."""
        url = f"{self.api_base}/collections/{collection_id}/items"
        data = self.get_json(url, params={"limit": self.page_size, "offset": offset})
        if not isinstance(data, dict):
            return []
        return list(data.get("items") or data.get("collectionItems") or [])

    def fetch_all_items(self, collection_id: str) -> List[Dict[str, Any]]:
        """
        Fetch every item of a collection, following limit/offset pagination.

        Args:
            collection_id (str): Webflow collection identifier.

        Returns:
            List[Dict[str, Any]]: All raw items in API order.
        """
        all_items: List[Dict[str, Any]] = []
        offset = 0

        while True:
            items = self.list_collection_items(collection_id, offset=offset)
            all_items.extend(items)
            logger.debug("Fetched %d items at offset %d", len(items), offset)
            if len(items) < self.page_size:
                break
            offset += self.page_size

        logger.info("Fetched %d items from Webflow collection %s", len(all_items), collection_id)
        return all_items

    def close(self) -> None:
        self.session.close()

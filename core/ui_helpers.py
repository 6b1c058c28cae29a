"""
core/ui_helpers.py
------------------
Shared backend request helper for the API client and the Streamlit console.
Ensures consistent credential forwarding, JSON encoding and error handling.

Any non-2xx response becomes an `ApiError` carrying the status code and the
response body (or the status line when the body is empty). There are no
retries; callers catch at the call site.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import requests

from core.config import API_TIMEOUT, API_TOKEN
from core.logger import get_logger

logger = get_logger(__name__)


class ApiError(Exception):
    """Raised for any HTTP response outside the 2xx range."""

    def __init__(self, status: int, body: str):
        self.status = status
        self.body = body
        super().__init__(f"{status}: {body}")


def build_session(token: Optional[str] = API_TOKEN) -> requests.Session:
    """Return a session that forwards cookies and the configured bearer token."""
    session = requests.Session()
    session.headers.update({"Accept": "application/json"})
    if token:
        session.headers["Authorization"] = f"Bearer {token}"
    return session


def _raise_if_not_ok(resp: Any) -> None:
    if 200 <= resp.status_code < 300:
        return
    text = resp.text or getattr(resp, "reason", "") or ""
    raise ApiError(resp.status_code, text)


def api_request(
    url: str,
    method: str = "GET",
    data: Any = None,
    *,
    session: Optional[requests.Session] = None,
    headers: Optional[Dict[str, str]] = None,
    timeout: Optional[float] = API_TIMEOUT,
) -> Any:
    """
    Issue a request and return the decoded JSON body (None for 204 / empty).

    Raises ApiError on non-2xx responses; transport failures propagate as
    requests.RequestException.
    """
    method = method.upper()
    http = session or build_session()

    merged_headers = {"Content-Type": "application/json"}
    merged_headers.update(headers or {})

    kwargs: Dict[str, Any] = {"headers": merged_headers, "timeout": timeout}
    if data is not None and method != "GET":
        kwargs["json"] = data

    logger.debug(f"[API] {method} {url}")
    resp = http.request(method, url, **kwargs)
    _raise_if_not_ok(resp)

    if resp.status_code == 204 or not resp.content:
        return None
    return resp.json()

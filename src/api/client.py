"""
HTTP gateway to the marketplace backend.

One ApiClient is shared by every screen: it holds the base URL, the timeout
and the cookie jar, so the session cookie set by login travels with every
later call.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from api.errors import ApiError
from utils import config
from utils.logger import get_logger

_logger = get_logger(__name__)


class ApiClient:
    def __init__(
        self,
        base_url: str = config.API_BASE_URL,
        timeout: float = config.API_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        self._http = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    @property
    def http(self) -> httpx.AsyncClient:
        return self._http

    async def request(
        self, method: str, path: str, json: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Send one request and return the decoded JSON body.

        Raises ApiError on transport failure or a non-2xx status.
        """
        _logger.debug(f"{method} {path}")
        try:
            resp = await self._http.request(method, path, json=json)
        except httpx.HTTPError as e:
            _logger.warning(f"{method} {path} failed: {e!r}")
            raise ApiError(str(e) or None) from e

        body = _decode(resp)
        if resp.is_error:
            message = body.get("message") if isinstance(body, dict) else None
            _logger.warning(f"{method} {path} -> {resp.status_code} {message or ''}")
            raise ApiError(message, resp.status_code, body)

        return body if isinstance(body, dict) else {"data": body}

    async def get(self, path: str) -> Dict[str, Any]:
        return await self.request("GET", path)

    async def post(self, path: str, json: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return await self.request("POST", path, json=json or {})

    async def put(self, path: str, json: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return await self.request("PUT", path, json=json or {})

    async def delete(self, path: str) -> Dict[str, Any]:
        return await self.request("DELETE", path)


def _decode(resp: httpx.Response) -> Any:
    if not resp.content:
        return {}
    try:
        return resp.json()
    except ValueError:
        return {}

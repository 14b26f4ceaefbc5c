"""
REST HTTP client for the signer API (result polling and preconnect).
"""

from typing import Any, Optional

import httpx

from mpc_connect.errors import TransportError
from mpc_connect.models.config import DEFAULT_BASE_URL


class HttpClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={"User-Agent": "mpc-connect/0.1.0", "Accept": "application/json"},
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @staticmethod
    def _json(resp: httpx.Response) -> Any:
        if resp.status_code >= 400:
            raise TransportError(
                f"HTTP {resp.status_code}: {resp.text[:200]}",
                details={"status": resp.status_code, "url": str(resp.request.url)},
            )
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise TransportError(f"Invalid JSON from {resp.request.url}: {e}")

    async def get(self, path: str) -> Any:
        try:
            resp = await self._client.get(path)
        except httpx.HTTPError as e:
            raise TransportError(f"GET {path} failed: {e}") from e
        return self._json(resp)

    async def post(self, path: str, body: Optional[dict[str, Any]] = None) -> Any:
        try:
            resp = await self._client.post(path, json=body)
        except httpx.HTTPError as e:
            raise TransportError(f"POST {path} failed: {e}") from e
        return self._json(resp)

    async def close(self) -> None:
        await self._client.aclose()

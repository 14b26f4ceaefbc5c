"""
Shared fixtures: an in-memory companion signer API served through
httpx.MockTransport.
"""

import json
from typing import Any, Callable, Optional

import httpx
import pytest

from mpc_connect import MpcConfig, RemoteChannel


class StubSigner:
    """Answers /result and /preconnect like the signer API.

    `results` is consumed one item per poll; once exhausted, `default` is
    returned. An item may be an Exception instance (raised as a transport
    failure) or an httpx.Response.
    """

    def __init__(self, results: Optional[list[Any]] = None, default: Any = None):
        self.results = list(results or [])
        self.default = default
        self.polls: list[str] = []
        self.preconnects: list[tuple[str, dict[str, Any]]] = []
        self.preconnect_status = 200

    def handler(self, request: httpx.Request) -> httpx.Response:
        parts = request.url.path.strip("/").split("/")
        if request.method == "GET" and parts[0] == "result":
            self.polls.append(parts[1])
            item = self.results.pop(0) if self.results else self.default
            if isinstance(item, Exception):
                raise item
            if isinstance(item, httpx.Response):
                return item
            return httpx.Response(200, json={"data": item})
        if request.method == "POST" and parts[0] == "preconnect":
            self.preconnects.append((parts[1], json.loads(request.content)))
            return httpx.Response(self.preconnect_status, json={"status": "ok"})
        return httpx.Response(404, json={"error": "not found"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def fast_config() -> MpcConfig:
    return MpcConfig(
        base_url="https://signer.test",
        action_url="https://companion.test/qr.html?token=",
        poll_interval_ms=0,
        max_poll_attempts=5,
    )


@pytest.fixture
def make_channel(fast_config: MpcConfig) -> Callable[..., RemoteChannel]:
    def _make(signer: StubSigner, **kwargs: Any) -> RemoteChannel:
        return RemoteChannel(kwargs.pop("config", fast_config), transport=signer.transport, **kwargs)
    return _make

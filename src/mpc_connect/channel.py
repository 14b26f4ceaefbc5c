"""
Remote channel — publishes requests and fetches poll results.

Publishing is URL-token based: the envelope token is appended to the
companion page URL. With preconnect the full envelope is POSTed first and
the URL carries only a short token referencing it.
"""

import logging
from typing import Any, Callable, Optional, Union

import httpx

from mpc_connect.errors import PreconnectError, TransportError
from mpc_connect.models.config import MpcConfig
from mpc_connect.models.envelope import PollResult, PreconnectEnvelope, RequestEnvelope
from mpc_connect.transport.envelope import build_preconnect, encode_token
from mpc_connect.transport.http import HttpClient

logger = logging.getLogger(__name__)

ErrorObserver = Callable[[str, TransportError], None]


class RemoteChannel:
    def __init__(
        self,
        config: Optional[MpcConfig] = None,
        http: Optional[HttpClient] = None,
        on_error: Optional[ErrorObserver] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._config = config or MpcConfig()
        self._http = http or HttpClient(
            base_url=self._config.base_url,
            timeout=self._config.http_timeout,
            transport=transport,
        )
        self._on_error = on_error

    @property
    def config(self) -> MpcConfig:
        return self._config

    def companion_url(self, envelope: Union[RequestEnvelope, PreconnectEnvelope]) -> str:
        return f"{self._config.action_url}{encode_token(envelope)}&uuid={envelope.session_id}"

    async def preconnect(self, envelope: RequestEnvelope) -> PreconnectEnvelope:
        """POST the full envelope ahead of time; returns the short replacement."""
        try:
            resp = await self._http.post(
                f"/preconnect/{envelope.session_id}",
                {"data": encode_token(envelope)},
            )
        except TransportError as e:
            raise PreconnectError(f"Preconnect failed for {envelope.session_id}: {e}", details=e.details) from e
        logger.debug("Preconnect %s accepted: %r", envelope.session_id, resp)
        return build_preconnect(envelope.session_id)

    async def publish(self, envelope: RequestEnvelope, preconnect: bool = False) -> str:
        """Return the companion URL for an envelope, preconnecting if asked."""
        if preconnect:
            return self.companion_url(await self.preconnect(envelope))
        return self.companion_url(envelope)

    async def poll(self, session_id: str, on_error: Optional[ErrorObserver] = None) -> PollResult:
        """Fetch the result for a session. Never raises on transport failure.

        Failures are logged and reported to the channel-wide and per-call
        observers, then returned as an empty result.
        """
        try:
            body: Any = await self._http.get(f"/result/{session_id}")
        except TransportError as e:
            logger.warning("Poll for %s failed: %s", session_id, e)
            for observer in (self._on_error, on_error):
                if observer:
                    observer(session_id, e)
            return PollResult.empty()
        if not isinstance(body, dict) or body.get("data") is None:
            return PollResult.empty()
        return PollResult(present=True, data=body["data"])

    async def aclose(self) -> None:
        await self._http.close()

    async def __aenter__(self) -> "RemoteChannel":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()

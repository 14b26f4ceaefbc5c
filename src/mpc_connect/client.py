"""
AsyncMpcWallet / MpcWallet — wallet adapter clients.

Every operation publishes a fresh request (new session id) to the companion
signer and polls for its result. The connected account is kept on the
client; concurrent operations are not serialized.
"""

import asyncio
import logging
from typing import Any, Callable, Mapping, Optional, Sequence, Union

import httpx

from mpc_connect.channel import RemoteChannel
from mpc_connect.decoder import TransactionFactory, decode_public_key, decode_signature, decode_transactions
from mpc_connect.errors import (
    MpcConnectError,
    ResponseDecodingError,
    WalletConnectionError,
    WalletError,
    WalletNotConnectedError,
    WalletSignMessageError,
    WalletSignTransactionError,
)
from mpc_connect.models.account import WalletAccount
from mpc_connect.models.config import MpcConfig
from mpc_connect.models.envelope import RequestEnvelope
from mpc_connect.polling import CancelToken, Poller, PollOutcome
from mpc_connect.presentation import BrowserPresenter, Presenter
from mpc_connect.transport.envelope import (
    TransactionLike,
    build_connect,
    build_send,
    build_sign,
    new_session_id,
)

logger = logging.getLogger(__name__)

EventHandler = Callable[[str, Any], None]


class AsyncMpcWallet:
    """Async wallet adapter (primary)."""

    def __init__(
        self,
        config: Optional[MpcConfig] = None,
        presenter: Optional[Presenter] = None,
        factories: Optional[Mapping[Any, TransactionFactory]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        account: Optional[WalletAccount] = None,
    ):
        """`account` restores a previously connected account without a new connect()."""
        self._config = config or MpcConfig()
        self._presenter = presenter or BrowserPresenter()
        self._factories = factories
        self._transient_errors = 0
        self.channel = RemoteChannel(self._config, on_error=self._count_error, transport=transport)
        self._account: Optional[WalletAccount] = account
        self._connecting = False
        self._event_handlers: list[EventHandler] = []

    @property
    def config(self) -> MpcConfig:
        return self._config

    @property
    def account(self) -> Optional[WalletAccount]:
        return self._account

    @property
    def public_key(self) -> Optional[str]:
        return self._account.public_key if self._account else None

    @property
    def connected(self) -> bool:
        return self._account is not None and self._account.connected

    @property
    def connecting(self) -> bool:
        return self._connecting

    @property
    def transient_errors(self) -> int:
        """Poll requests that failed and were retried, across all operations."""
        return self._transient_errors

    def _count_error(self, session_id: str, error: Exception) -> None:
        self._transient_errors += 1

    def add_event_handler(self, handler: EventHandler) -> Callable[[], None]:
        """Subscribe to connect/disconnect/error events. Returns a cleanup function."""
        self._event_handlers.append(handler)

        def remove() -> None:
            try:
                self._event_handlers.remove(handler)
            except ValueError:
                pass
        return remove

    def _emit(self, event: str, data: Any = None) -> None:
        for handler in list(self._event_handlers):
            handler(event, data)

    async def _request(
        self,
        envelope: RequestEnvelope,
        *,
        preconnect: bool,
        cancel: Optional[CancelToken],
    ) -> PollOutcome:
        url = await self.channel.publish(envelope, preconnect=preconnect)
        handle = self._presenter.present_request(url)
        poller = Poller(
            self.channel,
            poll_interval_ms=self._config.poll_interval_ms,
            max_poll_attempts=self._config.max_poll_attempts,
        )
        return await poller.run(
            envelope.session_id, handle,
            in_app_signing=self._config.in_app_signing,
            cancel=cancel,
        )

    async def connect(
        self,
        redirect: Optional[str] = None,
        cancel: Optional[CancelToken] = None,
    ) -> Optional[WalletAccount]:
        """Ask the companion signer for its public key.

        Returns None when no answer arrived (timeout, cancelled, or nothing
        could be presented).
        """
        self._connecting = True
        try:
            envelope = build_connect(self._config.chain, new_session_id(), self._config.origin, redirect)
            try:
                outcome = await self._request(envelope, preconnect=False, cancel=cancel)
            except MpcConnectError as e:
                raise WalletConnectionError(str(e)) from e
            if not outcome:
                logger.info("Connect ended without a result (%s)", outcome.state.value)
                await self.disconnect()
                return None
            public_key = decode_public_key(outcome.data)
            self._account = WalletAccount(public_key=public_key, connected=True)
            logger.info("Connected to companion signer as %s", public_key)
            self._emit("connect", public_key)
            return self._account
        except WalletError as e:
            self._emit("error", e)
            raise
        finally:
            self._connecting = False

    async def disconnect(self) -> None:
        self._account = None
        self._emit("disconnect")

    def _ensure_connected(self) -> None:
        if not self.connected:
            error = WalletNotConnectedError("Not connected. Call connect() first.")
            self._emit("error", error)
            raise error

    async def sign_message(
        self,
        message: Union[bytes, str],
        redirect: Optional[str] = None,
        cancel: Optional[CancelToken] = None,
    ) -> Optional[Any]:
        """Request a message signature. The signature is returned as received."""
        self._ensure_connected()
        envelope = build_sign(self._config.chain, message, new_session_id(), self._config.origin, redirect)
        try:
            outcome = await self._request(envelope, preconnect=True, cancel=cancel)
        except MpcConnectError as e:
            error = WalletSignMessageError(str(e))
            self._emit("error", error)
            raise error from e
        if not outcome:
            return None
        return decode_signature(outcome.data)

    async def sign_all_transactions(
        self,
        transactions: Sequence[TransactionLike],
        redirect: Optional[str] = None,
        cancel: Optional[CancelToken] = None,
    ) -> Optional[list[Any]]:
        """Request signatures for transactions; results keep the request order."""
        self._ensure_connected()
        envelope = build_send(self._config.chain, transactions, new_session_id(), self._config.origin, redirect)
        try:
            outcome = await self._request(envelope, preconnect=True, cancel=cancel)
        except MpcConnectError as e:
            error = WalletSignTransactionError(str(e))
            self._emit("error", error)
            raise error from e
        if not outcome:
            return None
        try:
            return decode_transactions(outcome.data, self._factories)
        except ResponseDecodingError as e:
            self._emit("error", e)
            raise

    async def sign_transaction(
        self,
        transaction: TransactionLike,
        redirect: Optional[str] = None,
        cancel: Optional[CancelToken] = None,
    ) -> Optional[Any]:
        signed = await self.sign_all_transactions([transaction], redirect=redirect, cancel=cancel)
        if signed is None:
            return None
        if not signed:
            error = WalletSignTransactionError("Companion signer returned no transaction")
            self._emit("error", error)
            raise error
        return signed[-1]

    async def close(self) -> None:
        await self.channel.aclose()

    async def __aenter__(self) -> "AsyncMpcWallet":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()


class MpcWallet:
    """Sync wrapper around AsyncMpcWallet. Runs the event loop internally."""

    def __init__(self, **kwargs: Any):
        self._async = AsyncMpcWallet(**kwargs)
        self._loop = asyncio.new_event_loop()

    def _run(self, coro: Any) -> Any:
        return self._loop.run_until_complete(coro)

    def cancel(self, token: CancelToken) -> None:
        """Cancel an operation running on this wrapper's loop from another thread."""
        if self._loop.is_closed():
            return
        self._loop.call_soon_threadsafe(token.cancel)

    @property
    def account(self) -> Optional[WalletAccount]:
        return self._async.account

    @property
    def public_key(self) -> Optional[str]:
        return self._async.public_key

    @property
    def connected(self) -> bool:
        return self._async.connected

    def add_event_handler(self, handler: EventHandler) -> Callable[[], None]:
        return self._async.add_event_handler(handler)

    def connect(self, **kwargs: Any) -> Optional[WalletAccount]:
        return self._run(self._async.connect(**kwargs))

    def disconnect(self) -> None:
        self._run(self._async.disconnect())

    def sign_message(self, message: Union[bytes, str], **kwargs: Any) -> Optional[Any]:
        return self._run(self._async.sign_message(message, **kwargs))

    def sign_transaction(self, transaction: TransactionLike, **kwargs: Any) -> Optional[Any]:
        return self._run(self._async.sign_transaction(transaction, **kwargs))

    def sign_all_transactions(self, transactions: Sequence[TransactionLike], **kwargs: Any) -> Optional[list[Any]]:
        return self._run(self._async.sign_all_transactions(transactions, **kwargs))

    def close(self) -> None:
        self._run(self._async.close())
        self._loop.close()

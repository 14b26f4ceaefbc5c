"""
Polling state machine.

    IDLE -> OPENED -> POLLING -> COMPLETED | TIMED_OUT | CANCELLED

A run ends as soon as one poll yields data. Running out of attempts, a
cancelled token, or a missing presentation handle end the run without an
exception; the returned PollOutcome is falsy in those cases.
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Callable, Optional

from mpc_connect.channel import RemoteChannel
from mpc_connect.models.config import DEFAULT_MAX_POLL_ATTEMPTS, DEFAULT_POLL_INTERVAL_MS

logger = logging.getLogger(__name__)


class PollState(str, Enum):
    IDLE = "idle"
    OPENED = "opened"
    POLLING = "polling"
    COMPLETED = "completed"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"


TERMINAL_STATES = {PollState.COMPLETED, PollState.TIMED_OUT, PollState.CANCELLED}


class CancelToken:
    """Cooperative cancellation, checked by the poller between attempts."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> None:
        await self._event.wait()


class PollOutcome:
    __slots__ = ("state", "data", "attempts", "errors")

    def __init__(self, state: PollState, data: Any = None, attempts: int = 0, errors: int = 0):
        self.state = state
        self.data = data
        self.attempts = attempts
        self.errors = errors

    @property
    def completed(self) -> bool:
        return self.state == PollState.COMPLETED

    def __bool__(self) -> bool:
        return self.completed

    def __repr__(self) -> str:
        return f"PollOutcome(state={self.state.value!r}, attempts={self.attempts}, errors={self.errors})"


class Poller:
    def __init__(
        self,
        channel: RemoteChannel,
        poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
        max_poll_attempts: int = DEFAULT_MAX_POLL_ATTEMPTS,
        on_state: Optional[Callable[[PollState], None]] = None,
    ):
        if max_poll_attempts < 1:
            raise ValueError("max_poll_attempts must be at least 1")
        self._channel = channel
        self._interval_s = poll_interval_ms / 1000
        self._max_attempts = max_poll_attempts
        self._on_state = on_state
        self.state = PollState.IDLE

    def _enter(self, state: PollState) -> None:
        logger.debug("Poller %s -> %s", self.state.value, state.value)
        self.state = state
        if self._on_state:
            self._on_state(state)

    async def _wait_interval(self, cancel: Optional[CancelToken]) -> None:
        if cancel is None:
            await asyncio.sleep(self._interval_s)
            return
        try:
            await asyncio.wait_for(cancel.wait(), timeout=self._interval_s)
        except asyncio.TimeoutError:
            pass

    async def run(
        self,
        session_id: str,
        handle: Any,
        *,
        in_app_signing: bool = False,
        cancel: Optional[CancelToken] = None,
    ) -> PollOutcome:
        """Poll the result endpoint for `session_id` until a terminal state.

        `handle` is what the presenter returned; None means the request could
        not be shown and, unless signing is routed in-app, nothing is polled.
        """
        if self.state != PollState.IDLE:
            raise RuntimeError(f"Poller already used (state={self.state.value})")

        if handle is None and not in_app_signing:
            logger.info("No presentation surface for %s; not polling", session_id)
            self._enter(PollState.CANCELLED)
            return PollOutcome(PollState.CANCELLED)

        self._enter(PollState.OPENED)
        self._enter(PollState.POLLING)

        errors = 0

        def count_error(*_args: Any) -> None:
            nonlocal errors
            errors += 1

        attempts = 0
        while attempts < self._max_attempts:
            if cancel is not None and cancel.cancelled:
                self._enter(PollState.CANCELLED)
                return PollOutcome(PollState.CANCELLED, attempts=attempts, errors=errors)

            result = await self._channel.poll(session_id, on_error=count_error)
            attempts += 1
            if result.present:
                self._enter(PollState.COMPLETED)
                return PollOutcome(PollState.COMPLETED, data=result.data, attempts=attempts, errors=errors)

            if attempts < self._max_attempts:
                await self._wait_interval(cancel)

        logger.info("No result for %s after %d attempts", session_id, attempts)
        self._enter(PollState.TIMED_OUT)
        return PollOutcome(PollState.TIMED_OUT, attempts=attempts, errors=errors)

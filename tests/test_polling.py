"""Polling state machine."""

import asyncio

import httpx
import pytest

from mpc_connect.polling import CancelToken, Poller, PollState

from conftest import StubSigner


@pytest.mark.asyncio
async def test_completes_on_fourth_poll(make_channel):
    signer = StubSigner(results=[None, None, None, "X"], default="late")
    states = []
    async with make_channel(signer) as channel:
        poller = Poller(channel, poll_interval_ms=0, max_poll_attempts=10, on_state=states.append)
        outcome = await poller.run("sid", handle="window")

    assert outcome.completed and outcome
    assert outcome.data == "X"
    assert outcome.attempts == 4
    assert len(signer.polls) == 4
    assert states == [PollState.OPENED, PollState.POLLING, PollState.COMPLETED]


@pytest.mark.asyncio
async def test_times_out_after_max_attempts(make_channel):
    signer = StubSigner(default=None)
    async with make_channel(signer) as channel:
        poller = Poller(channel, poll_interval_ms=0, max_poll_attempts=7)
        outcome = await poller.run("sid", handle="window")

    assert not outcome
    assert outcome.state == PollState.TIMED_OUT
    assert outcome.data is None
    assert len(signer.polls) == 7
    assert poller.state == PollState.TIMED_OUT


@pytest.mark.asyncio
async def test_missing_handle_cancels_without_polling(make_channel):
    signer = StubSigner(default="X")
    async with make_channel(signer) as channel:
        outcome = await Poller(channel, poll_interval_ms=0).run("sid", handle=None)
    assert outcome.state == PollState.CANCELLED
    assert not outcome
    assert signer.polls == []


@pytest.mark.asyncio
async def test_missing_handle_allowed_for_in_app_signing(make_channel):
    signer = StubSigner(default="X")
    async with make_channel(signer) as channel:
        outcome = await Poller(channel, poll_interval_ms=0).run("sid", handle=None, in_app_signing=True)
    assert outcome.completed
    assert outcome.data == "X"


@pytest.mark.asyncio
async def test_transient_errors_are_counted_and_retried(make_channel):
    signer = StubSigner(results=[httpx.ConnectError("down"), httpx.Response(502), "X"])
    async with make_channel(signer) as channel:
        outcome = await Poller(channel, poll_interval_ms=0, max_poll_attempts=5).run("sid", handle=1)
    assert outcome.completed
    assert outcome.attempts == 3
    assert outcome.errors == 2


@pytest.mark.asyncio
async def test_errors_on_every_attempt_time_out(make_channel):
    signer = StubSigner(default=None, results=[httpx.ConnectError("down")] * 3)
    async with make_channel(signer) as channel:
        outcome = await Poller(channel, poll_interval_ms=0, max_poll_attempts=3).run("sid", handle=1)
    assert outcome.state == PollState.TIMED_OUT
    assert outcome.errors == 3


@pytest.mark.asyncio
async def test_cancel_before_start(make_channel):
    signer = StubSigner(default=None)
    token = CancelToken()
    token.cancel()
    async with make_channel(signer) as channel:
        outcome = await Poller(channel, poll_interval_ms=0).run("sid", handle=1, cancel=token)
    assert outcome.state == PollState.CANCELLED
    assert signer.polls == []


@pytest.mark.asyncio
async def test_cancel_during_wait_stops_at_next_boundary(make_channel):
    signer = StubSigner(default=None)
    token = CancelToken()
    async with make_channel(signer) as channel:
        poller = Poller(channel, poll_interval_ms=60_000, max_poll_attempts=5)
        task = asyncio.create_task(poller.run("sid", handle=1, cancel=token))
        while not signer.polls:
            await asyncio.sleep(0)
        token.cancel()
        outcome = await asyncio.wait_for(task, timeout=5)
    assert outcome.state == PollState.CANCELLED
    assert outcome.attempts == 1
    assert len(signer.polls) == 1


@pytest.mark.asyncio
async def test_poller_is_single_use(make_channel):
    signer = StubSigner(default="X")
    async with make_channel(signer) as channel:
        poller = Poller(channel, poll_interval_ms=0)
        await poller.run("sid", handle=1)
        with pytest.raises(RuntimeError):
            await poller.run("sid", handle=1)


def test_rejects_zero_attempts(make_channel):
    with pytest.raises(ValueError):
        Poller(make_channel(StubSigner()), max_poll_attempts=0)

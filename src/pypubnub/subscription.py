"""Long-poll subscription engine for a single channel.

A :class:`Subscription` owns one channel's long-poll loop: it tracks the
server-issued cursor, delivers messages to a callback in order, and can be
cancelled from any task or thread with :meth:`Subscription.unsubscribe`.

Usage::

    async with client.subscribe("chat", on_message) as subscription:
        await subscription.wait()

The loop stops when the callback returns a falsy value, when
:meth:`~Subscription.unsubscribe` is called, or when the owning ``async
with`` block exits. Network and protocol failures are retried forever
with a fixed backoff; bound an unreachable backend by cancelling.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import threading
from collections.abc import Awaitable, Callable, Coroutine
from enum import StrEnum
from typing import Any

from pypubnub._api._url import RequestBuilder
from pypubnub._api.subscribe import fetch_envelope
from pypubnub._constants import INITIAL_TIMETOKEN, RETRY_BACKOFF_S
from pypubnub._crypto.message import MessageCrypto
from pypubnub._transport import Transport
from pypubnub.exceptions import PubnubError, PubnubNetworkError, PubnubProtocolError
from pypubnub.models.envelope import SubscribeEnvelope

_logger = logging.getLogger(__name__)

#: Receives each decrypted message; a falsy return value stops the loop.
MessageCallback = Callable[[Any], bool | Awaitable[bool]]


class SubscriptionState(StrEnum):
    IDLE = "idle"
    CONNECTING = "connecting"
    WAITING = "waiting"
    DELIVERING = "delivering"
    STOPPED = "stopped"


class Subscription:
    """A live logical connection to one channel.

    Create through :meth:`pypubnub.PubnubClient.subscribe`. A subscription
    runs once; to resubscribe create a new one.

    Parameters
    ----------
    channel : str
        Channel to listen on.
    callback : MessageCallback
        Called with every message, sync or async. Return ``True`` to keep
        listening.
    builder : RequestBuilder
        Builds the long-poll URL for each cursor.
    transport : Transport
        Issues the long-poll request.
    crypto : MessageCrypto
        Decrypts ciphertext messages before delivery.
    retry_backoff : float
        Seconds to wait after a failed long-poll before retrying.
    """

    def __init__(
        self,
        channel: str,
        callback: MessageCallback,
        *,
        builder: RequestBuilder,
        transport: Transport,
        crypto: MessageCrypto,
        retry_backoff: float = RETRY_BACKOFF_S,
    ) -> None:
        self._channel = channel
        self._callback = callback
        self._builder = builder
        self._transport = transport
        self._crypto = crypto
        self._retry_backoff = retry_backoff

        self._cursor = INITIAL_TIMETOKEN
        self._state = SubscriptionState.IDLE
        self._started = False
        self._loop: asyncio.AbstractEventLoop | None = None
        self._task: asyncio.Task[None] | None = None

        # Guards exactly the pair (_handle, _stop_requested).
        self._lock = threading.Lock()
        self._handle: asyncio.Task[Any] | None = None
        self._stop_requested = False

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def channel(self) -> str:
        return self._channel

    @property
    def cursor(self) -> str:
        """Time token the next long-poll resumes from."""
        return self._cursor

    @property
    def state(self) -> SubscriptionState:
        return self._state

    @property
    def stop_requested(self) -> bool:
        with self._lock:
            return self._stop_requested

    @property
    def is_running(self) -> bool:
        return self._state not in (SubscriptionState.IDLE, SubscriptionState.STOPPED)

    def __repr__(self) -> str:
        return f"<Subscription channel={self._channel!r} state={self._state} cursor={self._cursor!r}>"

    # ------------------------------------------------------------------
    # Scoped lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> Subscription:
        self.start()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    def start(self) -> asyncio.Task[None]:
        """Run the loop in its own task (idempotent) and return that task."""
        if self._task is None:
            self._task = asyncio.get_running_loop().create_task(
                self.run(),
                name=f"pypubnub-subscribe-{self._channel}",
            )
        return self._task

    async def wait(self) -> None:
        """Wait for the task started by :meth:`start` to finish.

        Cancelling the waiter does not cancel the subscription.
        """
        if self._task is None:
            raise PubnubError("Subscription was not started")
        await asyncio.shield(self._task)

    async def close(self) -> None:
        """Unsubscribe and wait until the loop has fully stopped.

        Re-raises an exception the loop ended with (e.g. one raised by
        the callback).
        """
        self.unsubscribe()
        task = self._task
        if task is None:
            return
        await asyncio.wait((task,))
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            raise exc

    # ------------------------------------------------------------------
    # Cancellation
    # ------------------------------------------------------------------

    def unsubscribe(self) -> None:
        """Stop the subscription from any task or thread.

        Sets the stop flag and aborts the outstanding long-poll (or
        backoff wait), so the loop reaches ``STOPPED`` without issuing
        another request. Messages already being delivered from the
        current envelope are still delivered. Safe to call repeatedly,
        and before :meth:`run`.
        """
        with self._lock:
            self._stop_requested = True
            handle, self._handle = self._handle, None
            if handle is not None and not handle.done():
                self._abort(handle)
            if not self._started:
                self._state = SubscriptionState.STOPPED

    def _abort(self, handle: asyncio.Task[Any]) -> None:
        """Cancel *handle* on its own loop; caller holds the lock."""
        loop = self._loop
        if loop is None or loop.is_closed():
            return
        try:
            running: asyncio.AbstractEventLoop | None = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is loop:
            handle.cancel()
        else:
            loop.call_soon_threadsafe(handle.cancel)

    def _arm(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task[Any]:
        """Start *coro* as the current handle; caller holds the lock."""
        assert self._loop is not None  # noqa: S101
        handle = self._loop.create_task(coro)
        self._handle = handle
        return handle

    def _connect(self) -> asyncio.Task[SubscribeEnvelope] | None:
        with self._lock:
            if self._stop_requested:
                return None
            url = self._builder.subscribe_url(self._channel, self._cursor)
            return self._arm(fetch_envelope(self._transport, url))

    def _arm_backoff(self) -> asyncio.Task[None] | None:
        with self._lock:
            if self._stop_requested:
                return None
            return self._arm(asyncio.sleep(self._retry_backoff))

    async def _await_handle(self, handle: asyncio.Task[Any]) -> Any:
        try:
            return await handle
        finally:
            with self._lock:
                if self._handle is handle:
                    self._handle = None

    @staticmethod
    def _aborted(handle: asyncio.Task[Any]) -> bool:
        """Whether a CancelledError came from aborting *handle*, not from our own task."""
        current = asyncio.current_task()
        return handle.cancelled() and (current is None or current.cancelling() == 0)

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------

    async def run(self) -> None:
        """Run the long-poll loop in the current task until stopped.

        Raises
        ------
        PubnubError
            If the subscription has already been run.
        PubnubPayloadTooLargeError
            If the subscribe URL cannot be built (never retried).
        """
        if self._started:
            raise PubnubError("Subscription can only be run once; create a new one to resubscribe")
        self._started = True
        self._loop = asyncio.get_running_loop()
        _logger.debug("Subscription to %s starting", self._channel)
        try:
            await self._run_loop()
        finally:
            self._state = SubscriptionState.STOPPED
            with self._lock:
                handle, self._handle = self._handle, None
            if handle is not None and not handle.done():
                handle.cancel()
            _logger.debug("Subscription to %s stopped at cursor %s", self._channel, self._cursor)

    async def _run_loop(self) -> None:
        while True:
            self._state = SubscriptionState.CONNECTING
            handle = self._connect()
            if handle is None:
                return

            self._state = SubscriptionState.WAITING
            try:
                envelope: SubscribeEnvelope = await self._await_handle(handle)
            except asyncio.CancelledError:
                if not self._aborted(handle):
                    raise
                _logger.debug("Long-poll on %s aborted", self._channel)
                if not await self._backoff():
                    return
                continue
            except (PubnubNetworkError, PubnubProtocolError) as exc:
                if self.stop_requested:
                    return
                _logger.warning(
                    "Long-poll on %s failed (%s); retrying in %.1fs",
                    self._channel,
                    exc,
                    self._retry_backoff,
                )
                if not await self._backoff():
                    return
                continue

            self._state = SubscriptionState.DELIVERING
            if not await self._deliver(envelope):
                return

    async def _backoff(self) -> bool:
        """Wait out the retry interval; ``False`` if stopped meanwhile."""
        handle = self._arm_backoff()
        if handle is None:
            return False
        try:
            await self._await_handle(handle)
        except asyncio.CancelledError:
            if not self._aborted(handle):
                raise
        return not self.stop_requested

    async def _deliver(self, envelope: SubscribeEnvelope) -> bool:
        """Hand each message to the callback; ``False`` once it declines.

        The cursor moves to the envelope's next cursor only after the whole
        batch has been accepted, so stopping mid-batch leaves the cursor
        at the envelope that delivered the stopping message.
        """
        _logger.debug(
            "Envelope on %s: %d message(s), next cursor %r",
            self._channel,
            len(envelope.messages),
            envelope.next_cursor,
        )
        for raw in envelope.messages:
            message = self._crypto.decrypt_or_passthrough(raw)
            keep_going = self._callback(message)
            if inspect.isawaitable(keep_going):
                keep_going = await keep_going
            if not keep_going:
                _logger.debug("Callback on %s declined further messages", self._channel)
                return False

        if envelope.next_cursor:
            self._cursor = envelope.next_cursor
        return True

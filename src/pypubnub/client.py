"""High-level async client for the PubNub HTTP API."""

from __future__ import annotations

import dataclasses
import logging
import uuid
from typing import Any

import aiohttp

from pypubnub._api._url import RequestBuilder
from pypubnub._api.history import fetch_history
from pypubnub._api.publish import publish_message
from pypubnub._api.time import fetch_time
from pypubnub._api.uuid import fetch_uuid
from pypubnub._crypto.message import MessageCrypto
from pypubnub._redact import redact_for_log
from pypubnub._transport import HttpTransport, Transport
from pypubnub.config import PubnubConfig
from pypubnub.exceptions import PubnubError
from pypubnub.models.publish import PublishResponse
from pypubnub.subscription import MessageCallback, Subscription

_logger = logging.getLogger(__name__)


class PubnubClient:
    """Async client for the PubNub publish/subscribe API.

    Usage::

        async with PubnubClient(config) as client:
            await client.publish("chat", {"text": "hello"})
            async with client.subscribe("chat", on_message) as sub:
                await sub.wait()

    The client holds no per-request state; any number of subscriptions
    can share it.

    Parameters
    ----------
    config : PubnubConfig
        Keys, origins and retry settings.
    session : aiohttp.ClientSession or None
        Externally owned HTTP session. When ``None`` the client creates
        one on enter and closes it on exit.
    transport : Transport or None
        Replaces the HTTP transport entirely (e.g. a test double).
    """

    def __init__(
        self,
        config: PubnubConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport: Transport | None = transport
        self._external_transport = transport is not None
        self._builder = RequestBuilder(config)
        self._crypto = MessageCrypto(config.cipher_key)

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> PubnubClient:
        _logger.debug("Client configured: %s", redact_for_log(dataclasses.asdict(self._config)))
        if self._external_transport:
            return self
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        if not self._external_transport:
            self._transport = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise PubnubError("Client not initialized. Use 'async with PubnubClient(...) as client:'")
        return self._transport

    @property
    def config(self) -> PubnubConfig:
        return self._config

    # ------------------------------------------------------------------
    # One-shot operations
    # ------------------------------------------------------------------

    async def publish(self, channel: str, message: Any) -> PublishResponse:
        """Publish *message* to *channel*.

        The message is encrypted when a cipher key is configured and
        signed when a secret key is configured.

        Raises
        ------
        PubnubPayloadTooLargeError
            If the encoded request exceeds the URL limit.
        PubnubNetworkError, PubnubProtocolError
            If the request fails or the reply is malformed.
        """
        transport = self._require_transport()
        return await publish_message(self._config, self._builder, self._crypto, transport, channel, message)

    async def history(self, channel: str, limit: int = 100) -> list[Any]:
        """Return up to *limit* recent messages of *channel*, decrypted."""
        transport = self._require_transport()
        return await fetch_history(self._builder, self._crypto, transport, channel, limit)

    async def time(self) -> int | float:
        """Return the backend's current time token."""
        transport = self._require_transport()
        return await fetch_time(self._builder, transport)

    async def uuid(self) -> uuid.UUID:
        """Return a backend-issued UUID, or a local ``uuid4`` if that fails."""
        transport = self._require_transport()
        return await fetch_uuid(self._builder, transport)

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, channel: str, callback: MessageCallback) -> Subscription:
        """Create a (not yet running) subscription to *channel*.

        Use it as ``async with client.subscribe(...) as sub:`` to run it in
        a background task that is always stopped on exit, or ``await
        sub.run()`` to run it in the current task.
        """
        transport = self._require_transport()
        return Subscription(
            channel,
            callback,
            builder=self._builder,
            transport=transport,
            crypto=self._crypto,
            retry_backoff=self._config.retry_backoff,
        )

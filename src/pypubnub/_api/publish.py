"""Publish endpoint."""

from __future__ import annotations

import logging
from typing import Any

from pypubnub._api._common import validate_response
from pypubnub._api._url import RequestBuilder
from pypubnub._crypto.message import MessageCrypto, dumps_message
from pypubnub._crypto.signing import sign_publish
from pypubnub._transport import Transport
from pypubnub.config import PubnubConfig
from pypubnub.models.publish import PublishResponse

_logger = logging.getLogger(__name__)


def build_publish_url(
    config: PubnubConfig,
    builder: RequestBuilder,
    crypto: MessageCrypto,
    channel: str,
    message: Any,
) -> str:
    """Encrypt, sign and encode a message into its publish URL.

    The signature covers the serialized message as it goes on the wire,
    i.e. the ciphertext envelope when a cipher key is configured.
    """
    payload = dumps_message(crypto.encrypt(message))
    signature = sign_publish(
        config.publish_key,
        config.subscribe_key,
        config.secret_key,
        channel,
        payload,
    )
    return builder.publish_url(channel, payload, signature)


async def publish_message(
    config: PubnubConfig,
    builder: RequestBuilder,
    crypto: MessageCrypto,
    transport: Transport,
    channel: str,
    message: Any,
) -> PublishResponse:
    """Send *message* to *channel* and return the backend's reply."""
    url = build_publish_url(config, builder, crypto, channel, message)
    body = await transport.get_json(url)
    response = validate_response(PublishResponse, body, resource="publish", url=url)
    if not response.ok:
        _logger.debug("Publish to %s not accepted: %s", channel, response.raw)
    return response

"""History endpoint."""

from __future__ import annotations

from typing import Any

from pypubnub._api._url import RequestBuilder
from pypubnub._crypto.message import MessageCrypto
from pypubnub._transport import Transport


def parse_history_response(body: list[Any], crypto: MessageCrypto) -> list[Any]:
    """Decrypt each history entry that is ciphertext, keep the rest."""
    return [crypto.decrypt_or_passthrough(entry) for entry in body]


async def fetch_history(
    builder: RequestBuilder,
    crypto: MessageCrypto,
    transport: Transport,
    channel: str,
    limit: int,
) -> list[Any]:
    """Fetch up to *limit* most recent messages of *channel*."""
    body = await transport.get_json(builder.history_url(channel, limit))
    return parse_history_response(body, crypto)

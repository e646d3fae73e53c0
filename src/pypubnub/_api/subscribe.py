"""Subscribe (long-poll) endpoint."""

from __future__ import annotations

from typing import Any

from pypubnub._api._common import validate_response
from pypubnub._transport import Transport
from pypubnub.models.envelope import SubscribeEnvelope


def parse_subscribe_response(body: list[Any], *, url: str = "") -> SubscribeEnvelope:
    """Parse ``[messages, nextCursor]`` into a :class:`SubscribeEnvelope`."""
    return validate_response(SubscribeEnvelope, body, resource="subscribe", url=url)


async def fetch_envelope(transport: Transport, url: str) -> SubscribeEnvelope:
    """Issue one long-poll and return its envelope.

    Returns only when the backend responds; there is no client timeout.
    """
    body = await transport.get_json(url)
    return parse_subscribe_response(body, url=url)

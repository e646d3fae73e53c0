"""Server time endpoint."""

from __future__ import annotations

from typing import Any

from pypubnub._api._common import first_element
from pypubnub._api._url import RequestBuilder
from pypubnub._transport import Transport
from pypubnub.exceptions import PubnubProtocolError


def parse_time_response(body: list[Any], *, url: str = "") -> int | float:
    """Extract the numeric timestamp from ``[timestamp]``."""
    value = first_element(body, resource="time", url=url)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise PubnubProtocolError(f"time response is not numeric: {value!r}", url=url)
    return value


async def fetch_time(builder: RequestBuilder, transport: Transport) -> int | float:
    """Return the backend's current time token."""
    url = builder.time_url()
    body = await transport.get_json(url)
    return parse_time_response(body, url=url)

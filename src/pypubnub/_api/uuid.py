"""UUID endpoint, with local fallback."""

from __future__ import annotations

import logging
import uuid
from typing import Any

from pypubnub._api._common import first_element
from pypubnub._api._url import RequestBuilder
from pypubnub._transport import Transport
from pypubnub.exceptions import PubnubError, PubnubProtocolError

_logger = logging.getLogger(__name__)


def parse_uuid_response(body: list[Any], *, url: str = "") -> uuid.UUID:
    """Parse ``["xxxxxxxx-xxxx-..."]`` into a :class:`uuid.UUID`."""
    value = first_element(body, resource="uuid", url=url)
    if not isinstance(value, str):
        raise PubnubProtocolError(f"uuid response is not a string: {value!r}", url=url)
    try:
        return uuid.UUID(value)
    except ValueError as exc:
        raise PubnubProtocolError(f"uuid response is not a UUID: {value!r}", url=url) from exc


async def fetch_uuid(builder: RequestBuilder, transport: Transport) -> uuid.UUID:
    """Ask the backend for a UUID, falling back to a local ``uuid4``.

    This is the one operation that never raises on a failed request.
    """
    try:
        url = builder.uuid_url()
        body = await transport.get_json(url)
        return parse_uuid_response(body, url=url)
    except PubnubError:
        _logger.debug("Remote UUID unavailable, generating locally", exc_info=True)
    return uuid.uuid4()

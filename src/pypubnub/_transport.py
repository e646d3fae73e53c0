"""HTTP GET transport returning parsed JSON-array bodies."""

from __future__ import annotations

import json
import logging
import string
import urllib.parse
from typing import Any, Protocol

import aiohttp
import yarl

from pypubnub._redact import redact_for_log, redact_url
from pypubnub.config import PubnubConfig
from pypubnub.exceptions import PubnubNetworkError, PubnubProtocolError

_logger = logging.getLogger(__name__)

# Everything printable in ASCII is already in its wire form after
# segment encoding; only non-ASCII text still needs UTF-8 escaping.
_WIRE_SAFE = string.punctuation


class Transport(Protocol):
    """Structural transport interface used by the client and subscriptions.

    Having a protocol here makes it easy to pass test doubles/mocks while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def get_json(self, url: str) -> list[Any]:
        ...


def to_wire_url(url: str) -> yarl.URL:
    """Percent-encode non-ASCII characters and freeze the rest verbatim."""
    return yarl.URL(urllib.parse.quote(url, safe=_WIRE_SAFE), encoded=True)


class HttpTransport:
    """Blocking-style GET over aiohttp with no client-side timeout.

    Long-poll requests are held open by the backend until data arrives,
    so the only ways out are a response, a network error, or cancelling
    the awaiting task (which closes the connection).
    """

    def __init__(self, config: PubnubConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=None, sock_read=None, sock_connect=None)

    async def get_json(self, url: str) -> list[Any]:
        """GET *url* and return the decoded JSON array.

        Raises
        ------
        PubnubNetworkError
            On connection failure or a non-200 status.
        PubnubProtocolError
            If the body is not UTF-8 JSON holding an array.
        """
        headers = {
            "accept-encoding": "identity",
            "user-agent": self._config.user_agent,
        }
        shown = redact_url(url)

        _logger.debug("GET %s", shown)

        try:
            async with self._http.get(to_wire_url(url), headers=headers, timeout=self._timeout) as resp:
                raw = await resp.read()
                if resp.status != 200:
                    raise PubnubNetworkError(
                        f"HTTP {resp.status} from {shown}: {raw[:200].decode('utf-8', 'replace')}",
                        status_code=resp.status,
                        url=url,
                    )
        except PubnubNetworkError:
            raise
        except aiohttp.ClientError as exc:
            raise PubnubNetworkError(f"Request to {shown} failed: {exc}", url=url) from exc

        try:
            body = json.loads(raw.decode("utf-8"))
        except UnicodeDecodeError as exc:
            raise PubnubProtocolError(f"Response from {shown} is not UTF-8: {exc}", url=url) from exc
        except json.JSONDecodeError as exc:
            snippet = raw[:200].decode("utf-8", "replace")
            raise PubnubProtocolError(f"Invalid JSON from {shown}: {snippet}", url=url) from exc

        if not isinstance(body, list):
            raise PubnubProtocolError(f"Expected a JSON array from {shown}, got {type(body).__name__}", url=url)

        _logger.debug("Response %s", redact_for_log(body, max_string=256))
        return body

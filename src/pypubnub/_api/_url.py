"""Request URL assembly shared by every resource module.

URLs are ``origin/segment/segment/...`` with each segment escaped by
:func:`encode_segment`. The escape is an allow-list of punctuation, not
general percent-encoding: non-ASCII text passes through untouched and
the backend relies on exactly this form (signatures are computed over
the unescaped message, and the length limit over the escaped URL).
"""

from __future__ import annotations

from collections.abc import Iterable

from pypubnub._constants import URL_LIMIT
from pypubnub.config import PubnubConfig
from pypubnub.exceptions import PubnubPayloadTooLargeError

_UNSAFE_CHARS: frozenset[str] = frozenset(" ~`!@#$%^&*()+=[]\\{}|;':\",./<>?")


def encode_segment(segment: str) -> str:
    """Escape the unsafe punctuation in one path segment as ``%XX``."""
    return "".join(f"%{ord(ch):02X}" if ch in _UNSAFE_CHARS else ch for ch in segment)


class RequestBuilder:
    """Build request URLs for one account's keys.

    Immutable after construction; safe to share between subscriptions.

    Parameters
    ----------
    config : PubnubConfig
        Keys and origins.
    limit : int
        Maximum URL length in characters.
    """

    def __init__(self, config: PubnubConfig, *, limit: int = URL_LIMIT) -> None:
        self._config = config
        self._limit = limit

    @property
    def limit(self) -> int:
        return self._limit

    def build(self, segments: Iterable[str], *, origin: str | None = None) -> str:
        """Join *segments* onto *origin* (default: the main origin).

        Raises
        ------
        PubnubPayloadTooLargeError
            If the encoded URL is longer than the limit.
        """
        base = origin if origin is not None else self._config.base_url
        url = base + "".join("/" + encode_segment(str(segment)) for segment in segments)
        if len(url) > self._limit:
            raise PubnubPayloadTooLargeError(
                f"Request URL is {len(url)} characters, limit is {self._limit}",
                length=len(url),
                limit=self._limit,
            )
        return url

    def publish_url(self, channel: str, message: str, signature: str) -> str:
        cfg = self._config
        return self.build(("publish", cfg.publish_key, cfg.subscribe_key, signature, channel, "0", message))

    def subscribe_url(self, channel: str, cursor: str) -> str:
        return self.build(("subscribe", self._config.subscribe_key, channel, "0", cursor))

    def history_url(self, channel: str, limit: int) -> str:
        return self.build(("history", self._config.subscribe_key, channel, "0", str(int(limit))))

    def time_url(self) -> str:
        return self.build(("time", "0"))

    def uuid_url(self) -> str:
        return self.build(("uuid",), origin=self._config.uuid_base_url)

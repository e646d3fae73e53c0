"""Helpers for safe debug logging.

pypubnub handles signing secrets, cipher keys and (possibly private)
message bodies. Config dumps, response arrays and request URLs pass
through here before they reach a DEBUG log.
"""

from __future__ import annotations

import urllib.parse
from collections.abc import Mapping
from typing import Any

_SENSITIVE_KEYS: frozenset[str] = frozenset({"secret_key", "cipher_key", "signature"})

_REDACTED = "<redacted>"


def redact_for_log(value: Any, *, max_string: int = 512) -> Any:
    """Return a copy of a config dict or response array that is safe to log.

    Sensitive mapping keys are masked (an unset key stays ``None``), raw
    bytes are summarized by length and long strings are truncated.
    """
    if isinstance(value, str):
        if len(value) > max_string:
            return f"{value[:max_string]}…<truncated>"
        return value
    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"
    if isinstance(value, Mapping):
        redacted: dict[str, Any] = {}
        for key, item in value.items():
            name = str(key)
            if name.lower() in _SENSITIVE_KEYS:
                redacted[name] = None if item is None else _REDACTED
            else:
                redacted[name] = redact_for_log(item, max_string=max_string)
        return redacted
    if isinstance(value, (list, tuple)):
        return [redact_for_log(item, max_string=max_string) for item in value]
    return value


def redact_url(url: str) -> str:
    """Mask the signature and message of a publish URL.

    ``/publish/{pub}/{sub}/{signature}/{channel}/0/{message}`` is logged
    with the signature replaced and the message reduced to its length.
    Other resources carry no secrets and are returned unchanged.
    """
    parts = urllib.parse.urlsplit(url)
    segments = parts.path.split("/")
    # ["", "publish", pub, sub, signature, channel, "0", message]
    if len(segments) < 8 or segments[1] != "publish":
        return url
    message = "/".join(segments[7:])
    segments[4] = _REDACTED
    segments[7:] = [f"<message:{len(message)}c>"]
    return urllib.parse.urlunsplit(parts._replace(path="/".join(segments)))

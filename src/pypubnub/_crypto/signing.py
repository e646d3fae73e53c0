"""Publish request signing."""

from __future__ import annotations

from pypubnub._constants import UNSIGNED
from pypubnub._crypto.hashing import hmac_sha256_hex


def build_sign_string(
    publish_key: str,
    subscribe_key: str,
    secret_key: str,
    channel: str,
    message: str,
) -> str:
    """Build the string to sign: ``pub/sub/secret/channel/message``.

    *message* is the serialized (and, when a cipher key is configured,
    encrypted) message exactly as it goes on the wire.
    """
    return "/".join((publish_key, subscribe_key, secret_key, channel, message))


def sign_publish(
    publish_key: str,
    subscribe_key: str,
    secret_key: str | None,
    channel: str,
    message: str,
) -> str:
    """Return the publish signature, or ``"0"`` when no secret key is set."""
    if not secret_key:
        return UNSIGNED
    sign_string = build_sign_string(publish_key, subscribe_key, secret_key, channel, message)
    return hmac_sha256_hex(secret_key, sign_string)

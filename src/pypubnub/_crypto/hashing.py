"""Keyed hashes used for request signing."""

from __future__ import annotations

import hashlib
import hmac


def hmac_sha256_hex(secret: str, value: str) -> str:
    """HMAC-SHA256 of a UTF-8 string, rendered as lowercase hex.

    The digest is read as one unsigned big-endian integer and printed
    without zero padding, so a digest starting with ``0x0`` yields fewer
    than 64 characters. The verifying backend compares against that
    rendering byte for byte.

    Parameters
    ----------
    secret : str
        Signing key (UTF-8 encoded).
    value : str
        The string to sign.

    Returns
    -------
    str
        Lowercase hex signature.
    """
    digest = hmac.new(secret.encode("utf-8"), value.encode("utf-8"), hashlib.sha256).digest()
    return format(int.from_bytes(digest, "big"), "x")

"""Cryptographic primitives for PubNub requests and payloads."""

from __future__ import annotations

from pypubnub._crypto.aes import aes_decrypt_b64, aes_encrypt_b64
from pypubnub._crypto.base64url import b64url_decode, b64url_encode
from pypubnub._crypto.hashing import hmac_sha256_hex
from pypubnub._crypto.message import MessageCrypto, dumps_message
from pypubnub._crypto.signing import build_sign_string, sign_publish

__all__ = [
    "MessageCrypto",
    "aes_decrypt_b64",
    "aes_encrypt_b64",
    "b64url_decode",
    "b64url_encode",
    "build_sign_string",
    "dumps_message",
    "hmac_sha256_hex",
    "sign_publish",
]

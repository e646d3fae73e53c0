"""Client configuration for pypubnub."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pypubnub._constants import CLOUD_ORIGIN, RETRY_BACKOFF_S, USER_AGENT, UUID_ORIGIN
from pypubnub.exceptions import PubnubConfigError

_CIPHER_KEY_BYTES = 16


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _coerce_cipher_key(value: bytes | str | None) -> bytes | None:
    if value is None:
        return None
    if isinstance(value, str):
        text = value.strip()
        if text.startswith(("0x", "0X")):
            text = text[2:]
        try:
            value = bytes.fromhex(text)
        except ValueError as exc:
            raise PubnubConfigError("cipher_key must be raw bytes or a hex string") from exc
    if len(value) != _CIPHER_KEY_BYTES:
        raise PubnubConfigError(f"cipher_key must be {_CIPHER_KEY_BYTES} bytes (got {len(value)})")
    return bytes(value)


@dataclasses.dataclass(frozen=True)
class PubnubConfig:
    """Client configuration.

    Parameters
    ----------
    publish_key : str
        Account publish key.
    subscribe_key : str
        Account subscribe key.
    secret_key : str or None
        Key used to HMAC-sign publish requests. When ``None`` every
        publish is sent unsigned (signature ``"0"``).
    cipher_key : bytes, str or None
        128-bit AES key, as 16 raw bytes or 32 hex characters. When
        ``None`` messages travel as plain JSON.
    ssl : bool
        Use ``https`` for every origin.
    origin : str
        Host serving publish/subscribe/history/time.
    uuid_origin : str
        Host serving the ``uuid`` resource.
    retry_backoff : float
        Seconds a subscription waits before retrying a failed long-poll.
    user_agent : str
        ``User-Agent`` header sent with every request.
    """

    publish_key: str
    subscribe_key: str
    secret_key: str | None = None
    cipher_key: bytes | None = None
    ssl: bool = True
    origin: str = CLOUD_ORIGIN
    uuid_origin: str = UUID_ORIGIN
    retry_backoff: float = RETRY_BACKOFF_S
    user_agent: str = USER_AGENT

    def __post_init__(self) -> None:
        object.__setattr__(self, "cipher_key", _coerce_cipher_key(self.cipher_key))
        if self.retry_backoff < 0:
            raise PubnubConfigError(f"retry_backoff must be >= 0 (got {self.retry_backoff})")

    @property
    def scheme(self) -> str:
        return "https" if self.ssl else "http"

    @property
    def base_url(self) -> str:
        """Origin for publish, subscribe, history and time requests."""
        return f"{self.scheme}://{self.origin}"

    @property
    def uuid_base_url(self) -> str:
        """Origin for the ``uuid`` resource."""
        return f"{self.scheme}://{self.uuid_origin}"

    @classmethod
    def from_env(cls, **overrides: Any) -> PubnubConfig:
        """Create configuration from environment variables.

        Reads ``PUBNUB_PUBLISH_KEY``, ``PUBNUB_SUBSCRIBE_KEY`` and the
        optional ``PUBNUB_*`` variables listed below. Explicit keyword
        arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        PubnubConfig
            Populated configuration.

        Raises
        ------
        PubnubConfigError
            If a required key is missing or a value cannot be parsed.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "PUBNUB_PUBLISH_KEY": "publish_key",
            "PUBNUB_SUBSCRIBE_KEY": "subscribe_key",
            "PUBNUB_SECRET_KEY": "secret_key",
            "PUBNUB_CIPHER_KEY": "cipher_key",
            "PUBNUB_ORIGIN": "origin",
            "PUBNUB_UUID_ORIGIN": "uuid_origin",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val:
                config_kwargs[field_name] = val

        if "ssl" not in overrides:
            config_kwargs["ssl"] = _env_bool(env.get("PUBNUB_SSL"), True)

        backoff_env = env.get("PUBNUB_RETRY_BACKOFF")
        if backoff_env is not None and "retry_backoff" not in overrides:
            try:
                config_kwargs["retry_backoff"] = float(backoff_env)
            except ValueError as exc:
                raise PubnubConfigError(f"PUBNUB_RETRY_BACKOFF is not a number: {backoff_env!r}") from exc

        config_kwargs.update(overrides)

        for required in ("publish_key", "subscribe_key"):
            if not config_kwargs.get(required):
                raise PubnubConfigError(f"{required} is required (set PUBNUB_{required.upper()})")

        return cls(**config_kwargs)

"""Custom exception hierarchy for pypubnub."""

from __future__ import annotations


class PubnubError(Exception):
    """Base exception for all pypubnub errors."""


class PubnubConfigError(PubnubError):
    """Invalid or missing configuration."""


class PubnubCryptoError(PubnubError):
    """Encryption, decryption or key failure."""


class PubnubInvalidArgumentError(PubnubError, ValueError):
    """Input rejected before any request is built (e.g. malformed Base64)."""


class PubnubNetworkError(PubnubError):
    """HTTP-level failure (connection error, aborted request, non-200)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str = "",
    ) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(message)


class PubnubProtocolError(PubnubError):
    """Response body is not the JSON shape the resource promises."""

    def __init__(self, message: str, *, url: str = "") -> None:
        self.url = url
        super().__init__(message)


class PubnubPayloadTooLargeError(PubnubError):
    """Request URL exceeds the backend's length limit.

    Raised while the URL is being built, so no network call has been
    attempted when this surfaces.
    """

    def __init__(self, message: str, *, length: int, limit: int) -> None:
        self.length = length
        self.limit = limit
        super().__init__(message)

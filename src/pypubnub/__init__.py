"""pypubnub - Async Python client for the PubNub HTTP long-poll API."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pypubnub")
except PackageNotFoundError:
    __version__ = "0+local"
from pypubnub.client import PubnubClient
from pypubnub.config import PubnubConfig
from pypubnub.exceptions import (
    PubnubConfigError,
    PubnubCryptoError,
    PubnubError,
    PubnubInvalidArgumentError,
    PubnubNetworkError,
    PubnubPayloadTooLargeError,
    PubnubProtocolError,
)
from pypubnub.models import PublishResponse, SubscribeEnvelope
from pypubnub.subscription import MessageCallback, Subscription, SubscriptionState

__all__ = [
    "__version__",
    "MessageCallback",
    "PublishResponse",
    "PubnubClient",
    "PubnubConfig",
    "PubnubConfigError",
    "PubnubCryptoError",
    "PubnubError",
    "PubnubInvalidArgumentError",
    "PubnubNetworkError",
    "PubnubPayloadTooLargeError",
    "PubnubProtocolError",
    "SubscribeEnvelope",
    "Subscription",
    "SubscriptionState",
]

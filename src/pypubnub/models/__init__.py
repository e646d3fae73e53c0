"""Response models."""

from pypubnub.models.envelope import SubscribeEnvelope
from pypubnub.models.publish import PublishResponse

__all__ = [
    "PublishResponse",
    "SubscribeEnvelope",
]

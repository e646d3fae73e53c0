"""Internal constants shared across the library."""

CLOUD_ORIGIN = "pubsub.pubnub.com"
UUID_ORIGIN = "pubnub-prod.appspot.com"
USER_AGENT = "pypubnub/3.0"

#: Maximum number of characters in a request URL, message included.
URL_LIMIT = 1800

#: Cursor a fresh subscription starts from.
INITIAL_TIMETOKEN = "0"

#: Seconds to wait before re-issuing a failed long-poll.
RETRY_BACKOFF_S = 1.0

#: Signature sent with publish requests when no secret key is configured.
UNSIGNED = "0"

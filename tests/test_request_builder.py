from __future__ import annotations

import pytest

from pypubnub._api._url import RequestBuilder, encode_segment
from pypubnub._constants import URL_LIMIT
from pypubnub.config import PubnubConfig
from pypubnub.exceptions import PubnubPayloadTooLargeError


@pytest.fixture
def builder() -> RequestBuilder:
    return RequestBuilder(PubnubConfig(publish_key="pub", subscribe_key="sub", ssl=False))


def test_space_is_percent_20() -> None:
    assert encode_segment(" ") == "%20"


def test_every_unsafe_character_is_escaped() -> None:
    unsafe = " ~`!@#$%^&*()+=[]\\{}|;':\",./<>?"
    encoded = encode_segment(unsafe)

    assert encoded == "".join(f"%{ord(ch):02X}" for ch in unsafe)
    assert encode_segment("{") == "%7B"
    assert encode_segment("/") == "%2F"


def test_safe_and_non_ascii_characters_pass_through() -> None:
    assert encode_segment("abc-XYZ_09") == "abc-XYZ_09"
    assert encode_segment("ɂ顶é") == "ɂ顶é"


def test_subscribe_url(builder: RequestBuilder) -> None:
    assert builder.subscribe_url("my channel", "0") == "http://pubsub.pubnub.com/subscribe/sub/my%20channel/0/0"


def test_publish_url(builder: RequestBuilder) -> None:
    url = builder.publish_url("chan", '{"a":1}', "0")
    assert url == "http://pubsub.pubnub.com/publish/pub/sub/0/chan/0/%7B%22a%22%3A1%7D"


def test_history_time_and_uuid_urls(builder: RequestBuilder) -> None:
    assert builder.history_url("chan", 5) == "http://pubsub.pubnub.com/history/sub/chan/0/5"
    assert builder.time_url() == "http://pubsub.pubnub.com/time/0"
    assert builder.uuid_url() == "http://pubnub-prod.appspot.com/uuid"


def test_ssl_switches_scheme_for_both_origins() -> None:
    builder = RequestBuilder(PubnubConfig(publish_key="pub", subscribe_key="sub", ssl=True))

    assert builder.time_url().startswith("https://pubsub.pubnub.com/")
    assert builder.uuid_url() == "https://pubnub-prod.appspot.com/uuid"


def test_url_over_limit_raises_before_any_request(builder: RequestBuilder) -> None:
    with pytest.raises(PubnubPayloadTooLargeError) as excinfo:
        builder.publish_url("chan", "x" * URL_LIMIT, "0")

    assert excinfo.value.limit == URL_LIMIT
    assert excinfo.value.length > URL_LIMIT


def test_limit_counts_escaped_characters(builder: RequestBuilder) -> None:
    base_len = len(builder.build(("time", "")))
    fits = builder.build(("time", "a" * (URL_LIMIT - base_len)))
    assert len(fits) == URL_LIMIT

    with pytest.raises(PubnubPayloadTooLargeError):
        builder.build(("time", " " * ((URL_LIMIT - base_len) // 3 + 1)))

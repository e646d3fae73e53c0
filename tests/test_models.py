from __future__ import annotations

import pytest
from pydantic import ValidationError

from pypubnub.models import PublishResponse, SubscribeEnvelope


def test_envelope_from_wire_array() -> None:
    envelope = SubscribeEnvelope.model_validate([[{"a": 1}, "two"], "13769501243685161"])

    assert envelope.messages == [{"a": 1}, "two"]
    assert envelope.next_cursor == "13769501243685161"


@pytest.mark.parametrize(("cursor", "expected"), [(1376950124, "1376950124"), (None, ""), ("", "")])
def test_envelope_cursor_normalization(cursor: object, expected: str) -> None:
    assert SubscribeEnvelope.model_validate([[], cursor]).next_cursor == expected


@pytest.mark.parametrize("body", [[], [[]], [[], True], ["not-a-list", "1"]])
def test_envelope_rejects_malformed_arrays(body: list[object]) -> None:
    with pytest.raises(ValidationError):
        SubscribeEnvelope.model_validate(body)


def test_envelope_is_frozen() -> None:
    envelope = SubscribeEnvelope.model_validate([[], "1"])
    with pytest.raises(ValidationError):
        envelope.next_cursor = "2"  # type: ignore[misc]


def test_publish_response_success() -> None:
    response = PublishResponse.model_validate([1, "Sent", 13769501243685161])

    assert response.ok
    assert response.message == "Sent"
    assert response.timetoken == "13769501243685161"
    assert response.raw == [1, "Sent", 13769501243685161]


def test_publish_response_failure_without_timetoken() -> None:
    response = PublishResponse.model_validate([0, "Invalid Key"])

    assert not response.ok
    assert response.timetoken is None


def test_publish_response_rejects_empty_array() -> None:
    with pytest.raises(ValidationError):
        PublishResponse.model_validate([])

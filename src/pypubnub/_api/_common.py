"""Shared helpers for resource modules.

It is internal to pypubnub and may change at any time.
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from pypubnub.exceptions import PubnubProtocolError

M = TypeVar("M", bound=BaseModel)


def validate_response(model: type[M], body: Any, *, resource: str, url: str = "") -> M:
    """Validate a decoded response body, mapping failures to protocol errors."""
    try:
        return model.model_validate(body)
    except ValidationError as exc:
        raise PubnubProtocolError(
            f"{resource} response is malformed: {exc.error_count()} error(s): {str(body)[:128]}",
            url=url,
        ) from exc


def first_element(body: list[Any], *, resource: str, url: str = "") -> Any:
    """Return ``body[0]`` or raise if the response array is empty."""
    if not body:
        raise PubnubProtocolError(f"{resource} response is empty", url=url)
    return body[0]

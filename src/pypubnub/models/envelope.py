"""Long-poll response envelope."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class SubscribeEnvelope(BaseModel):
    """Parsed subscribe response: ``[messages, nextCursor]``.

    Parameters
    ----------
    messages : list
        Messages in the order the backend returned them. Entries may
        still be ciphertext; decryption happens at delivery.
    next_cursor : str
        Time token to resume from. Empty means "no advance".
    """

    model_config = ConfigDict(frozen=True)

    messages: list[Any] = Field(default_factory=list)
    next_cursor: str = ""

    @model_validator(mode="before")
    @classmethod
    def _from_wire_array(cls, data: Any) -> Any:
        if isinstance(data, (list, tuple)):
            if len(data) < 2:
                raise ValueError(f"subscribe envelope needs 2 elements, got {len(data)}")
            return {"messages": data[0], "next_cursor": data[1]}
        return data

    @field_validator("next_cursor", mode="before")
    @classmethod
    def _coerce_cursor(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, bool):
            raise ValueError("next cursor must be a string or number")
        if isinstance(value, (int, float)):
            return str(value)
        return value

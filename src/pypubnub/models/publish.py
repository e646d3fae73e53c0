"""Publish response model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PublishResponse(BaseModel):
    """Reply to a publish request: ``[status, description, timetoken]``.

    Parameters
    ----------
    status : int
        Backend status code, ``1`` on success.
    message : str
        Human readable description (e.g. ``"Sent"``).
    timetoken : str or None
        Time token assigned to the published message, when returned.
    raw : list
        The response array as received.
    """

    model_config = ConfigDict(frozen=True)

    status: int
    message: str = ""
    timetoken: str | None = None
    raw: list[Any] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _from_wire_array(cls, data: Any) -> Any:
        if isinstance(data, (list, tuple)):
            if not data:
                raise ValueError("publish response is empty")
            timetoken = data[2] if len(data) > 2 else None
            return {
                "status": data[0],
                "message": str(data[1]) if len(data) > 1 else "",
                "timetoken": str(timetoken) if timetoken is not None else None,
                "raw": list(data),
            }
        return data

    @property
    def ok(self) -> bool:
        """Whether the backend accepted the message."""
        return self.status == 1

"""Decoded timeslice snapshot model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from pyxviz._constants import LogStreamMessage


class DecodedSnapshot(BaseModel):
    """Result of decoding one timeslice message.

    An ``INCOMPLETE`` snapshot has neither streams nor timestamp; it
    marks a frame the caller should skip, not an error.
    """

    model_config = ConfigDict(frozen=True)

    type: LogStreamMessage
    streams: dict[str, Any] | None = Field(default=None, description="Stream name -> decoded stream")
    timestamp: float | None = None

    @classmethod
    def incomplete(cls) -> DecodedSnapshot:
        return cls(type=LogStreamMessage.INCOMPLETE)

    @property
    def is_incomplete(self) -> bool:
        return self.type == LogStreamMessage.INCOMPLETE

"""Custom exception hierarchy for pyxviz."""

from __future__ import annotations

from typing import Any


class XvizError(Exception):
    """Base exception for all pyxviz errors."""


class XvizConfigError(XvizError):
    """Invalid configuration value."""


class XvizMessageError(XvizError):
    """Top-level message cannot be read as an XVIZ timeslice."""


class UnsupportedUpdateTypeError(XvizMessageError):
    """Timeslice carries an ``update_type`` other than ``"snapshot"``."""

    def __init__(self, update_type: Any) -> None:
        self.update_type = update_type
        super().__init__(
            f'Only XVIZ update_type of "snapshot" is currently supported. Type "{update_type}" is not supported.'
        )


class UnsupportedUpdateCountError(XvizMessageError):
    """Timeslice carries more state updates than the decoder supports.

    This is a protocol-version limitation rather than a data error: the
    message is rejected as a whole and none of its updates are decoded.
    """

    def __init__(self, count: int) -> None:
        self.count = count
        super().__init__(
            f'Only XVIZ first update of "snapshot" is currently supported. Current updates has "{count}" entries.'
        )


class XvizDecodeError(XvizError):
    """A category payload could not be decoded."""

    def __init__(self, message: str, *, stream_name: str | None = None) -> None:
        self.stream_name = stream_name
        super().__init__(message)

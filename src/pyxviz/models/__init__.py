"""Data models for XVIZ messages and decoded streams."""

from pyxviz.models._base import XvizBaseModel
from pyxviz.models.snapshot import DecodedSnapshot
from pyxviz.models.streams import (
    DecodedFutureStream,
    DecodedPose,
    DecodedPrimitiveStream,
    DecodedTimeSeries,
    DecodedVariableStream,
    MapOrigin,
    VariableValue,
)
from pyxviz.models.timeslice import StateUpdate, TimesliceMessage

__all__ = [
    "DecodedFutureStream",
    "DecodedPose",
    "DecodedPrimitiveStream",
    "DecodedSnapshot",
    "DecodedTimeSeries",
    "DecodedVariableStream",
    "MapOrigin",
    "StateUpdate",
    "TimesliceMessage",
    "VariableValue",
    "XvizBaseModel",
]

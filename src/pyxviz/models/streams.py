"""Decoded stream models returned by the default category decoders."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class MapOrigin(BaseModel):
    """Geographic origin of the pose's local frame."""

    model_config = ConfigDict(frozen=True)

    longitude: float | None = None
    latitude: float | None = None
    altitude: float | None = None


class DecodedPose(BaseModel):
    """Vehicle (or other subject) pose.

    Parameters
    ----------
    timestamp : float or None
        Pose timestamp.
    map_origin : MapOrigin or None
        Present when the raw pose carries ``map_origin``.
    x, y, z : float or None
        Position in the local frame, from ``position``.
    roll, pitch, yaw : float or None
        Orientation in radians, from ``orientation``.
    """

    model_config = ConfigDict(frozen=True)

    timestamp: float | None = None
    map_origin: MapOrigin | None = None
    x: float | None = None
    y: float | None = None
    z: float | None = None
    roll: float | None = None
    pitch: float | None = None
    yaw: float | None = None


class DecodedPrimitiveStream(BaseModel):
    """Primitives of one stream, flattened and grouped by rendering kind."""

    model_config = ConfigDict(frozen=True)

    time: float
    features: list[Any] = Field(default_factory=list)
    point_clouds: list[Any] = Field(default_factory=list)
    images: list[Any] = Field(default_factory=list)


class VariableValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str | None = None
    values: list[Any] = Field(default_factory=list)


class DecodedVariableStream(BaseModel):
    model_config = ConfigDict(frozen=True)

    time: float
    variables: list[VariableValue] = Field(default_factory=list)


class DecodedTimeSeries(BaseModel):
    """Latest sample value of one time-series stream."""

    model_config = ConfigDict(frozen=True)

    time: float | None = None
    variable: Any = None
    id: str | None = None


class DecodedFutureStream(BaseModel):
    """Predicted primitives, one look-ahead frame per future timestamp."""

    model_config = ConfigDict(frozen=True)

    time: float
    look_aheads: list[DecodedPrimitiveStream] = Field(default_factory=list)

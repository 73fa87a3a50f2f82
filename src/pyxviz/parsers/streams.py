"""Default XVIZ v2 category decoders.

One decoder per stream category.  :mod:`pyxviz.parsers.state_updates`
calls them through a :class:`StreamDecoders` bundle, so any of them can
be swapped out by the caller.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

from pyxviz.exceptions import XvizDecodeError
from pyxviz.models.streams import (
    DecodedFutureStream,
    DecodedPose,
    DecodedPrimitiveStream,
    DecodedTimeSeries,
    DecodedVariableStream,
    MapOrigin,
    VariableValue,
)

_logger = logging.getLogger(__name__)

ConvertPrimitive = Callable[[dict[str, Any]], Any]
"""Callback applied to every normalized primitive; returning ``None`` drops it."""

# XVIZ primitive list key -> primitive type.
PRIMITIVE_TYPES: dict[str, str] = {
    "polygons": "polygon",
    "polylines": "polyline",
    "points": "point",
    "circles": "circle",
    "stadiums": "stadium",
    "texts": "text",
    "images": "image",
}

# Typed value arrays, in lookup order.
VALUE_ARRAY_KEYS: tuple[str, ...] = ("doubles", "int32s", "bools", "strings")


def _require_mapping(value: Any, what: str, stream_name: str | None) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        label = f" for stream {stream_name!r}" if stream_name else ""
        raise XvizDecodeError(
            f"Expected {what} object{label}, got {type(value).__name__}",
            stream_name=stream_name,
        )
    return value


def _component(values: Any, index: int) -> Any:
    if not isinstance(values, Sequence) or isinstance(values, str):
        return None
    return values[index] if index < len(values) else None


def _typed_values(values: Any) -> list[Any]:
    if not isinstance(values, Mapping):
        return []
    for key in VALUE_ARRAY_KEYS:
        array = values.get(key)
        if array is not None:
            return list(array)
    return []


def parse_xviz_pose(pose: Any) -> DecodedPose:
    """Decode a raw pose into position, orientation and map origin."""
    raw = _require_mapping(pose, "pose", None)
    fields: dict[str, Any] = {"timestamp": raw.get("timestamp")}

    map_origin = raw.get("map_origin")
    if isinstance(map_origin, Mapping):
        fields["map_origin"] = MapOrigin(
            longitude=map_origin.get("longitude"),
            latitude=map_origin.get("latitude"),
            altitude=map_origin.get("altitude"),
        )

    position = raw.get("position")
    if position is not None:
        fields.update(x=_component(position, 0), y=_component(position, 1), z=_component(position, 2))

    orientation = raw.get("orientation")
    if orientation is not None:
        fields.update(
            roll=_component(orientation, 0),
            pitch=_component(orientation, 1),
            yaw=_component(orientation, 2),
        )

    return DecodedPose(**fields)


def _normalize_primitive(primitive: Any, primitive_type: str, stream_name: str) -> dict[str, Any]:
    raw = _require_mapping(primitive, primitive_type, stream_name)
    base = _require_mapping(raw.get("base") or {}, "primitive base", stream_name)
    normalized = {key: value for key, value in raw.items() if key != "base"}
    normalized["type"] = primitive_type
    normalized["id"] = base.get("object_id")
    normalized["classes"] = list(base.get("classes") or [])
    normalized["style"] = base.get("style")
    return normalized


def parse_stream_primitive(
    primitives: Any,
    stream_name: str,
    time: float,
    convert_primitive: ConvertPrimitive | None = None,
) -> DecodedPrimitiveStream:
    """Flatten a stream's primitive lists.

    Points end up in ``point_clouds``, images in ``images`` and every
    other primitive type in ``features``.
    """
    raw = _require_mapping(primitives, "primitives", stream_name)
    features: list[Any] = []
    point_clouds: list[Any] = []
    images: list[Any] = []

    for key, items in raw.items():
        primitive_type = PRIMITIVE_TYPES.get(key)
        if primitive_type is None:
            _logger.debug("Skipping unknown primitive list %r on stream %s", key, stream_name)
            continue
        if not isinstance(items, list):
            raise XvizDecodeError(
                f"Primitive list {key!r} on stream {stream_name!r} is not a list",
                stream_name=stream_name,
            )

        for item in items:
            primitive: Any = _normalize_primitive(item, primitive_type, stream_name)
            if convert_primitive is not None:
                primitive = convert_primitive(primitive)
                if primitive is None:
                    continue
            if primitive_type == "point":
                point_clouds.append(primitive)
            elif primitive_type == "image":
                images.append(primitive)
            else:
                features.append(primitive)

    return DecodedPrimitiveStream(time=time, features=features, point_clouds=point_clouds, images=images)


def parse_stream_variable(variables: Any, stream_name: str, time: float) -> DecodedVariableStream:
    if variables is None:
        return DecodedVariableStream(time=time)
    if not isinstance(variables, list):
        raise XvizDecodeError(f"Variables for stream {stream_name!r} must be a list", stream_name=stream_name)

    entries: list[VariableValue] = []
    for variable in variables:
        raw = _require_mapping(variable, "variable", stream_name)
        base = raw.get("base") or {}
        entries.append(VariableValue(id=base.get("object_id"), values=_typed_values(raw.get("values"))))
    return DecodedVariableStream(time=time, variables=entries)


def parse_stream_time_series(samples: Iterable[Any], stream_blacklist: frozenset[str]) -> dict[str, DecodedTimeSeries]:
    """Split time-series samples into per-stream values.

    Each sample lists its stream names in ``streams``; the i-th name
    takes the i-th entry of the sample's typed value array.  A later
    sample overwrites an earlier one for the same stream.

    A sample whose ``streams`` and values differ in length raises
    :class:`XvizDecodeError`; names are never paired with a missing
    value.
    """
    streams: dict[str, DecodedTimeSeries] = {}
    for sample in samples:
        raw = _require_mapping(sample, "time_series sample", None)
        names = raw.get("streams") or []
        values = _typed_values(raw.get("values"))
        if len(values) != len(names):
            raise XvizDecodeError(
                f"Time-series sample has {len(names)} streams but {len(values)} values",
            )
        for name, value in zip(names, values, strict=True):
            if name in stream_blacklist:
                continue
            streams[name] = DecodedTimeSeries(time=raw.get("timestamp"), variable=value, id=raw.get("object_id"))
    return streams


def parse_stream_futures(
    futures: Any,
    stream_name: str,
    time: float,
    convert_primitive: ConvertPrimitive | None = None,
) -> DecodedFutureStream:
    raw = _require_mapping(futures, "future_instances", stream_name)
    timestamps = raw.get("timestamps") or []
    primitives = raw.get("primitives") or []
    if len(timestamps) != len(primitives):
        raise XvizDecodeError(
            f"Stream {stream_name!r} has {len(timestamps)} future timestamps but {len(primitives)} primitive sets",
            stream_name=stream_name,
        )

    look_aheads = [
        parse_stream_primitive(frame, stream_name, future_time, convert_primitive)
        for future_time, frame in zip(timestamps, primitives, strict=True)
    ]
    return DecodedFutureStream(time=time, look_aheads=look_aheads)


@dataclasses.dataclass(frozen=True)
class StreamDecoders:
    """Category decoders used by the state-update aggregator.

    Parameters
    ----------
    pose : callable
        ``pose(raw) -> stream``.
    primitive : callable
        ``primitive(raw, stream_name, timestamp, convert_primitive) -> stream``.
    variable : callable
        ``variable(raw_variables, stream_name, timestamp) -> stream``.
    time_series : callable
        ``time_series(samples, stream_blacklist) -> {stream_name: stream}``.
    future : callable
        ``future(raw, stream_name, timestamp, convert_primitive) -> stream``.
    """

    pose: Callable[[Any], Any] = parse_xviz_pose
    primitive: Callable[[Any, str, float, ConvertPrimitive | None], Any] = parse_stream_primitive
    variable: Callable[[Any, str, float], Any] = parse_stream_variable
    time_series: Callable[[list[Any], frozenset[str]], Mapping[str, Any]] = parse_stream_time_series
    future: Callable[[Any, str, float, ConvertPrimitive | None], Any] = parse_stream_futures


DEFAULT_DECODERS = StreamDecoders()

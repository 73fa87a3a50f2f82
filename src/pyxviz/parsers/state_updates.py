"""State-update aggregation and category dispatch.

The update records of one timeslice are folded into one accumulator per
stream category, filtered against the stream blacklist, turned into
tagged :class:`StreamEntry` values and handed to the category decoders.

Merge rules:

- poses, primitives, variables and future instances: later updates
  overwrite earlier ones for the same stream name;
- time series: samples from every update are concatenated, in update
  order, and decoded in one batched call.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Mapping, Sequence
from enum import StrEnum
from typing import Any

from pyxviz.config import XvizConfig
from pyxviz.exceptions import XvizDecodeError, XvizMessageError
from pyxviz.models.timeslice import StateUpdate
from pyxviz.parsers.streams import DEFAULT_DECODERS, ConvertPrimitive, StreamDecoders

_logger = logging.getLogger(__name__)


class StreamCategory(StrEnum):
    POSE = "pose"
    PRIMITIVE = "primitive"
    VARIABLE = "variable"
    TIME_SERIES = "time_series"
    FUTURE_INSTANCE = "future_instance"


@dataclasses.dataclass(frozen=True)
class StreamEntry:
    """One unit of decoding work.

    ``name`` is ``None`` only for the batched time-series entry, whose
    payload is the combined sample list of every update.
    """

    category: StreamCategory
    name: str | None
    payload: Any


@dataclasses.dataclass
class _MergedUpdates:
    poses: dict[str, Any] = dataclasses.field(default_factory=dict)
    primitives: dict[str, Any] = dataclasses.field(default_factory=dict)
    variables: dict[str, Any] = dataclasses.field(default_factory=dict)
    futures: dict[str, Any] = dataclasses.field(default_factory=dict)
    time_series: list[Any] = dataclasses.field(default_factory=list)


def _stream_map(value: Any, field: str) -> Mapping[str, Any]:
    if not value:
        return {}
    if not isinstance(value, Mapping):
        raise XvizMessageError(f"State update field {field!r} must map stream names to payloads")
    return value


def merge_state_updates(updates: Sequence[StateUpdate]) -> _MergedUpdates:
    merged = _MergedUpdates()
    for update in updates:
        merged.poses.update(_stream_map(update.poses, "poses"))
        merged.primitives.update(_stream_map(update.primitives, "primitives"))
        merged.variables.update(_stream_map(update.variables, "variables"))
        merged.futures.update(_stream_map(update.future_instances, "future_instances"))
        if update.time_series:
            if not isinstance(update.time_series, list):
                raise XvizMessageError("State update field 'time_series' must be a list of samples")
            merged.time_series.extend(update.time_series)
    return merged


def _named_entries(
    category: StreamCategory,
    streams: Mapping[str, Any],
    stream_blacklist: frozenset[str],
) -> list[StreamEntry]:
    entries: list[StreamEntry] = []
    for name, payload in streams.items():
        if name in stream_blacklist:
            _logger.debug("Skipping blacklisted %s stream %s", category, name)
            continue
        entries.append(StreamEntry(category=category, name=name, payload=payload))
    return entries


def collect_stream_entries(merged: _MergedUpdates, stream_blacklist: frozenset[str]) -> list[StreamEntry]:
    """Tag the merged streams, in dispatch order.

    Time-series samples are not filtered here: a sample only names its
    streams once decoded, so the blacklist goes to the decoder instead.
    """
    entries = _named_entries(StreamCategory.POSE, merged.poses, stream_blacklist)
    entries += _named_entries(StreamCategory.PRIMITIVE, merged.primitives, stream_blacklist)
    entries += _named_entries(StreamCategory.VARIABLE, merged.variables, stream_blacklist)
    if merged.time_series:
        entries.append(StreamEntry(category=StreamCategory.TIME_SERIES, name=None, payload=merged.time_series))
    entries += _named_entries(StreamCategory.FUTURE_INSTANCE, merged.futures, stream_blacklist)
    return entries


def decode_stream_entry(
    entry: StreamEntry,
    *,
    timestamp: float,
    convert_primitive: ConvertPrimitive | None,
    stream_blacklist: frozenset[str],
    decoders: StreamDecoders = DEFAULT_DECODERS,
) -> dict[str, Any]:
    """Run the decoder for *entry*'s category.

    Returns stream name -> decoded stream: one item for named entries,
    whatever the time-series decoder produced for the batched entry.
    Decoder exceptions are not caught.
    """
    category = entry.category
    if category == StreamCategory.TIME_SERIES:
        return dict(decoders.time_series(entry.payload, stream_blacklist))

    name = entry.name
    if name is None:
        raise ValueError(f"{category} stream entry has no name")

    if category == StreamCategory.POSE:
        decoded = decoders.pose(entry.payload)
    elif category == StreamCategory.PRIMITIVE:
        decoded = decoders.primitive(entry.payload, name, timestamp, convert_primitive)
    elif category == StreamCategory.VARIABLE:
        if not isinstance(entry.payload, Mapping):
            raise XvizDecodeError(f"Expected variables object for stream {name!r}", stream_name=name)
        decoded = decoders.variable(entry.payload.get("variables"), name, timestamp)
    elif category == StreamCategory.FUTURE_INSTANCE:
        decoded = decoders.future(entry.payload, name, timestamp, convert_primitive)
    else:
        raise ValueError(f"Unhandled stream category: {category}")
    return {name: decoded}


def parse_state_updates(
    updates: Sequence[StateUpdate],
    timestamp: float,
    convert_primitive: ConvertPrimitive | None = None,
    *,
    config: XvizConfig,
    decoders: StreamDecoders = DEFAULT_DECODERS,
) -> dict[str, Any]:
    """Decode every non-blacklisted stream of *updates*.

    A stream name used by two categories keeps the later category's
    value; the collision is logged.
    """
    stream_blacklist = config.stream_blacklist
    merged = merge_state_updates(updates)

    streams: dict[str, Any] = {}
    origins: dict[str, StreamCategory] = {}
    for entry in collect_stream_entries(merged, stream_blacklist):
        decoded = decode_stream_entry(
            entry,
            timestamp=timestamp,
            convert_primitive=convert_primitive,
            stream_blacklist=stream_blacklist,
            decoders=decoders,
        )
        for name in decoded:
            previous = origins.get(name)
            if previous is not None and previous != entry.category:
                _logger.warning(
                    "Stream %s appears as both %s and %s; keeping %s",
                    name,
                    previous,
                    entry.category,
                    entry.category,
                )
            origins[name] = entry.category
        streams.update(decoded)
    return streams

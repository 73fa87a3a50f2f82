"""XVIZ v2 timeslice decoding.

:func:`parse_timeslice_data` is the entry point: it validates the
message, resolves its timestamp and aggregates its state updates into a
:class:`~pyxviz.models.snapshot.DecodedSnapshot`.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from pyxviz._constants import MAX_STATE_UPDATES, UPDATE_TYPE_SNAPSHOT, LogStreamMessage
from pyxviz.config import XvizConfig, get_xviz_config
from pyxviz.exceptions import UnsupportedUpdateCountError, UnsupportedUpdateTypeError, XvizMessageError
from pyxviz.models.snapshot import DecodedSnapshot
from pyxviz.models.timeslice import StateUpdate, TimesliceMessage
from pyxviz.parsers.state_updates import parse_state_updates
from pyxviz.parsers.streams import DEFAULT_DECODERS, ConvertPrimitive, StreamDecoders

_logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class ResolvedTimeslice:
    """A validated timeslice and its resolved timestamp.

    ``timestamp`` is ``None`` when neither the message nor its updates
    carry a usable one; such a timeslice is not yet complete.
    """

    timestamp: float | None
    updates: tuple[StateUpdate, ...]

    @property
    def is_complete(self) -> bool:
        return self.timestamp is not None


def _check_update_contract(update_type: Any, update_count: int) -> None:
    if update_type != UPDATE_TYPE_SNAPSHOT:
        raise UnsupportedUpdateTypeError(update_type)
    if update_count > MAX_STATE_UPDATES:
        raise UnsupportedUpdateCountError(update_count)


def resolve_timeslice(message: TimesliceMessage) -> ResolvedTimeslice:
    """Validate *message* and resolve its timestamp.

    The timestamp is the message's own when truthy, otherwise the
    largest update timestamp with the maximum seeded at 0.  A result
    that is still falsy leaves the timeslice incomplete.

    Raises
    ------
    UnsupportedUpdateTypeError
        ``update_type`` is not ``"snapshot"``.
    UnsupportedUpdateCountError
        More than one state update.
    """
    updates = tuple(message.updates)
    _check_update_contract(message.update_type, len(updates))

    timestamp = message.timestamp
    if not timestamp and updates:
        timestamp = max((0, *(update.timestamp for update in updates if update.timestamp is not None)))

    return ResolvedTimeslice(timestamp=timestamp or None, updates=updates)


def _to_message(data: TimesliceMessage | Mapping[str, Any]) -> TimesliceMessage:
    if isinstance(data, TimesliceMessage):
        return data
    if isinstance(data, Mapping):
        # Protocol checks come before shape validation of the updates.
        updates = data.get("updates")
        _check_update_contract(data.get("update_type"), len(updates) if isinstance(updates, list) else 0)
    try:
        return TimesliceMessage.model_validate(data)
    except ValidationError as exc:
        raise XvizMessageError(f"Invalid XVIZ timeslice message: {exc}") from exc


def parse_timeslice_data(
    data: TimesliceMessage | Mapping[str, Any],
    convert_primitive: ConvertPrimitive | None = None,
    *,
    config: XvizConfig | None = None,
    decoders: StreamDecoders = DEFAULT_DECODERS,
) -> DecodedSnapshot:
    """Decode one XVIZ v2 timeslice message.

    Parameters
    ----------
    data
        Raw message mapping, or an already validated
        :class:`TimesliceMessage`.
    convert_primitive
        Optional callback passed to the primitive and future-instance
        decoders.
    config
        Decoder configuration; defaults to :func:`get_xviz_config`.
    decoders
        Category decoders; defaults to the built-in XVIZ v2 decoders.

    Returns
    -------
    DecodedSnapshot
        A ``TIMESLICE`` snapshot, or an ``INCOMPLETE`` one when no
        timestamp can be resolved yet.
    """
    message = _to_message(data)
    resolved = resolve_timeslice(message)

    timestamp = resolved.timestamp
    if timestamp is None:
        # Incomplete stream message; tag it so the caller can skip it.
        _logger.debug("Timeslice has no resolvable timestamp; returning incomplete snapshot")
        return DecodedSnapshot.incomplete()

    if config is None:
        config = get_xviz_config()

    streams = parse_state_updates(
        resolved.updates,
        timestamp,
        convert_primitive,
        config=config,
        decoders=decoders,
    )
    return DecodedSnapshot(type=LogStreamMessage.TIMESLICE, streams=streams, timestamp=timestamp)

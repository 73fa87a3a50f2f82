"""Parsers.

This package turns raw XVIZ messages into decoded stream snapshots.
"""

from pyxviz.parsers.state_updates import StreamCategory, StreamEntry, parse_state_updates
from pyxviz.parsers.streams import DEFAULT_DECODERS, StreamDecoders
from pyxviz.parsers.timeslice import ResolvedTimeslice, parse_timeslice_data, resolve_timeslice

__all__ = [
    "DEFAULT_DECODERS",
    "ResolvedTimeslice",
    "StreamCategory",
    "StreamDecoders",
    "StreamEntry",
    "parse_state_updates",
    "parse_timeslice_data",
    "resolve_timeslice",
]

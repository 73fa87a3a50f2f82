"""Raw XVIZ v2 timeslice message models.

Category fields (poses, primitives, ...) stay plain JSON values and are
not shape-checked here; the aggregator and the category decoders in
:mod:`pyxviz.parsers.streams` own their shapes.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field

from pyxviz.models._base import XvizBaseModel


class StateUpdate(XvizBaseModel):
    """One partial contribution to a timeslice.

    Every category is optional; a missing category contributes nothing.

    Parameters
    ----------
    timestamp : float or None
        Update timestamp, used when the timeslice has none of its own.
    poses : dict or None
        Stream name -> raw pose.
    primitives : dict or None
        Stream name -> raw primitive lists.
    variables : dict or None
        Stream name -> ``{"variables": [...]}``.
    future_instances : dict or None
        Stream name -> ``{"timestamps": [...], "primitives": [...]}``.
    time_series : list or None
        Raw time-series samples; each may feed several streams.
    """

    timestamp: float | None = None
    poses: Any = None
    primitives: Any = None
    variables: Any = None
    future_instances: Any = None
    time_series: Any = None


class TimesliceMessage(XvizBaseModel):
    """An XVIZ v2 ``state_update`` (timeslice) message."""

    update_type: Any = None
    updates: list[StateUpdate] = Field(default_factory=list)
    timestamp: float | None = None

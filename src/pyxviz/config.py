"""Decoder configuration for pyxviz.

A single :class:`XvizConfig` is installed process-wide with
:func:`set_xviz_config` and read with :func:`get_xviz_config`.  The
config object is frozen; installing a new one swaps the module-level
reference, so readers on other threads always see a complete config.
"""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Iterable
from typing import Any

from pyxviz.exceptions import XvizConfigError


def _env_list(value: str | None) -> frozenset[str] | None:
    if value is None:
        return None
    return frozenset(item.strip() for item in value.split(",") if item.strip())


def _coerce_stream_names(value: Any) -> frozenset[str]:
    if value is None:
        return frozenset()
    if isinstance(value, str):
        # A bare string would otherwise be split into characters.
        return frozenset({value})
    if not isinstance(value, Iterable):
        raise XvizConfigError(f"stream_blacklist must be an iterable of stream names, got {type(value).__name__}")
    names = frozenset(value)
    for name in names:
        if not isinstance(name, str):
            raise XvizConfigError(f"stream_blacklist entries must be strings, got {name!r}")
    return names


@dataclasses.dataclass(frozen=True)
class XvizConfig:
    """Decoder configuration.

    Parameters
    ----------
    stream_blacklist : frozenset of str
        Stream names dropped from every decoded timeslice, whatever
        their category.  Any iterable of strings is accepted and stored
        as a frozenset.
    """

    stream_blacklist: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        object.__setattr__(self, "stream_blacklist", _coerce_stream_names(self.stream_blacklist))

    @classmethod
    def from_env(cls, **overrides: Any) -> XvizConfig:
        """Create configuration from environment variables.

        Reads ``XVIZ_STREAM_BLACKLIST`` as a comma-separated list of
        stream names.  Explicit keyword arguments override environment
        values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        XvizConfig
            Populated configuration.
        """
        config_kwargs: dict[str, Any] = {}

        blacklist = _env_list(os.environ.get("XVIZ_STREAM_BLACKLIST"))
        if blacklist is not None:
            config_kwargs["stream_blacklist"] = blacklist

        config_kwargs.update(overrides)

        return cls(**config_kwargs)


_current_config = XvizConfig()


def get_xviz_config() -> XvizConfig:
    """Return the process-wide decoder configuration."""
    return _current_config


def set_xviz_config(config: XvizConfig | None = None, **overrides: Any) -> XvizConfig:
    """Install a new process-wide decoder configuration.

    When *config* is omitted the new config is the current one with
    *overrides* applied.  The previous object is never mutated.
    """
    global _current_config

    base = config if config is not None else _current_config
    new_config = dataclasses.replace(base, **overrides) if overrides else base
    _current_config = new_config
    return new_config

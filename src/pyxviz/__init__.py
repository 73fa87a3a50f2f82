"""pyxviz - Decoder for XVIZ v2 timeslice messages."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyxviz")
except PackageNotFoundError:
    __version__ = "0+local"
from pyxviz._constants import LogStreamMessage
from pyxviz.config import XvizConfig, get_xviz_config, set_xviz_config
from pyxviz.exceptions import (
    UnsupportedUpdateCountError,
    UnsupportedUpdateTypeError,
    XvizConfigError,
    XvizDecodeError,
    XvizError,
    XvizMessageError,
)
from pyxviz.models import (
    DecodedFutureStream,
    DecodedPose,
    DecodedPrimitiveStream,
    DecodedSnapshot,
    DecodedTimeSeries,
    DecodedVariableStream,
    StateUpdate,
    TimesliceMessage,
)
from pyxviz.parsers import DEFAULT_DECODERS, StreamDecoders, parse_timeslice_data

__all__ = [
    "__version__",
    "DEFAULT_DECODERS",
    "DecodedFutureStream",
    "DecodedPose",
    "DecodedPrimitiveStream",
    "DecodedSnapshot",
    "DecodedTimeSeries",
    "DecodedVariableStream",
    "LogStreamMessage",
    "StateUpdate",
    "StreamDecoders",
    "TimesliceMessage",
    "UnsupportedUpdateCountError",
    "UnsupportedUpdateTypeError",
    "XvizConfig",
    "XvizConfigError",
    "XvizDecodeError",
    "XvizError",
    "XvizMessageError",
    "get_xviz_config",
    "parse_timeslice_data",
    "set_xviz_config",
]

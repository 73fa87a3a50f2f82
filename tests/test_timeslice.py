from __future__ import annotations

from typing import Any

import pytest

from pyxviz import LogStreamMessage
from pyxviz.config import XvizConfig
from pyxviz.exceptions import (
    UnsupportedUpdateCountError,
    UnsupportedUpdateTypeError,
    XvizDecodeError,
    XvizMessageError,
)
from pyxviz.models.timeslice import TimesliceMessage
from pyxviz.parsers.streams import StreamDecoders
from pyxviz.parsers.timeslice import parse_timeslice_data, resolve_timeslice


def _recording_decoders(calls: list[tuple[str, tuple[Any, ...]]]) -> StreamDecoders:
    def pose(*args: Any) -> Any:
        calls.append(("pose", args))
        return {"pose": args[0]}

    def primitive(*args: Any) -> Any:
        calls.append(("primitive", args))
        return {"primitive": args[0]}

    def variable(*args: Any) -> Any:
        calls.append(("variable", args))
        return {"variable": args[0]}

    def time_series(samples: list[Any], blacklist: frozenset[str]) -> dict[str, Any]:
        calls.append(("time_series", (list(samples), blacklist)))
        return {sample["stream"]: sample["value"] for sample in samples if sample["stream"] not in blacklist}

    def future(*args: Any) -> Any:
        calls.append(("future", args))
        return {"future": args[0]}

    return StreamDecoders(pose=pose, primitive=primitive, variable=variable, time_series=time_series, future=future)


@pytest.mark.parametrize("update_type", ["incremental", "complete_state", "", None])
def test_non_snapshot_update_type_rejected(update_type: Any) -> None:
    with pytest.raises(UnsupportedUpdateTypeError) as excinfo:
        parse_timeslice_data({"update_type": update_type, "updates": [], "timestamp": 1000})

    assert excinfo.value.update_type == update_type
    assert "is not supported" in str(excinfo.value)


def test_more_than_one_update_rejected() -> None:
    calls: list[tuple[str, tuple[Any, ...]]] = []
    message = {
        "update_type": "snapshot",
        "updates": [
            {"timestamp": 1, "poses": {"/vehicle_pose": {}}},
            {"timestamp": 2, "poses": {"/vehicle_pose": {}}},
        ],
    }

    with pytest.raises(UnsupportedUpdateCountError) as excinfo:
        parse_timeslice_data(message, decoders=_recording_decoders(calls))

    assert excinfo.value.count == 2
    assert '"2" entries' in str(excinfo.value)
    assert calls == []


def test_update_errors_share_message_error_base() -> None:
    assert issubclass(UnsupportedUpdateTypeError, XvizMessageError)
    assert issubclass(UnsupportedUpdateCountError, XvizMessageError)


def test_no_updates_and_no_timestamp_is_incomplete() -> None:
    snapshot = parse_timeslice_data({"update_type": "snapshot", "updates": []})

    assert snapshot.type == LogStreamMessage.INCOMPLETE
    assert snapshot.streams is None
    assert snapshot.timestamp is None


def test_zero_timestamp_is_incomplete() -> None:
    snapshot = parse_timeslice_data({"update_type": "snapshot", "updates": [{"timestamp": 0}], "timestamp": 0})

    assert snapshot.is_incomplete


def test_update_without_timestamp_is_incomplete() -> None:
    snapshot = parse_timeslice_data({"update_type": "snapshot", "updates": [{"poses": {"/vehicle_pose": {}}}]})

    assert snapshot.is_incomplete


def test_top_level_timestamp_without_updates() -> None:
    snapshot = parse_timeslice_data({"update_type": "snapshot", "updates": [], "timestamp": 1000})

    assert snapshot.type == LogStreamMessage.TIMESLICE
    assert snapshot.timestamp == 1000
    assert snapshot.streams == {}


def test_timestamp_resolved_from_update() -> None:
    calls: list[tuple[str, tuple[Any, ...]]] = []
    message = {
        "update_type": "snapshot",
        "updates": [{"timestamp": 500, "time_series": [{"stream": "/speed", "value": 3.0}]}],
    }

    snapshot = parse_timeslice_data(message, decoders=_recording_decoders(calls))

    assert snapshot.timestamp == 500
    assert snapshot.streams == {"/speed": 3.0}


def test_top_level_timestamp_wins_over_update_timestamp() -> None:
    resolved = resolve_timeslice(
        TimesliceMessage.model_validate({"update_type": "snapshot", "updates": [{"timestamp": 500}], "timestamp": 700})
    )

    assert resolved.timestamp == 700
    assert resolved.is_complete


def test_blacklisted_primitive_stream_dropped() -> None:
    calls: list[tuple[str, tuple[Any, ...]]] = []
    message = {
        "update_type": "snapshot",
        "updates": [{"timestamp": 10, "primitives": {"/lidar": {"points": []}, "/objects": {"polygons": []}}}],
    }
    config = XvizConfig(stream_blacklist={"/lidar"})

    snapshot = parse_timeslice_data(message, config=config, decoders=_recording_decoders(calls))

    assert snapshot.streams is not None
    assert "/lidar" not in snapshot.streams
    assert "/objects" in snapshot.streams
    assert [name for name, _ in calls] == ["primitive"]


def test_time_series_samples_decoded_in_one_call() -> None:
    calls: list[tuple[str, tuple[Any, ...]]] = []
    s1 = {"stream": "/speed", "value": 1.0}
    s2 = {"stream": "/accel", "value": 2.0}
    message = {"update_type": "snapshot", "updates": [{"timestamp": 10, "time_series": [s1, s2]}]}

    parse_timeslice_data(message, config=XvizConfig(stream_blacklist={"/x"}), decoders=_recording_decoders(calls))

    assert calls == [("time_series", ([s1, s2], frozenset({"/x"})))]


def test_pose_decoder_called_with_raw_value_only() -> None:
    calls: list[tuple[str, tuple[Any, ...]]] = []
    raw = {"timestamp": 10, "position": [1, 2, 3]}
    message = {"update_type": "snapshot", "updates": [{"timestamp": 10, "poses": {"/vehicle": raw}}]}

    snapshot = parse_timeslice_data(message, decoders=_recording_decoders(calls))

    assert calls == [("pose", (raw,))]
    assert snapshot.streams == {"/vehicle": {"pose": raw}}


def test_decoder_arguments_per_category() -> None:
    calls: list[tuple[str, tuple[Any, ...]]] = []

    def convert(primitive: dict[str, Any]) -> dict[str, Any]:
        return primitive

    message = {
        "update_type": "snapshot",
        "updates": [
            {
                "timestamp": 42,
                "primitives": {"/objects": {"polygons": []}},
                "variables": {"/plan": {"variables": [{"values": {"doubles": [1.0]}}]}},
                "future_instances": {"/predicted": {"timestamps": [], "primitives": []}},
            }
        ],
    }

    parse_timeslice_data(message, convert, decoders=_recording_decoders(calls))

    assert calls == [
        ("primitive", ({"polygons": []}, "/objects", 42, convert)),
        ("variable", ([{"values": {"doubles": [1.0]}}], "/plan", 42)),
        ("future", ({"timestamps": [], "primitives": []}, "/predicted", 42, convert)),
    ]


def test_decoder_errors_propagate() -> None:
    message = {"update_type": "snapshot", "updates": [{"timestamp": 10, "poses": {"/vehicle_pose": "not-a-pose"}}]}

    with pytest.raises(XvizDecodeError):
        parse_timeslice_data(message)


def test_invalid_message_shape_raises_message_error() -> None:
    with pytest.raises(XvizMessageError):
        parse_timeslice_data({"update_type": "snapshot", "updates": "nope"})


def test_global_config_used_when_not_passed(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("pyxviz.config._current_config", XvizConfig(stream_blacklist={"/vehicle_pose"}))
    message = {"update_type": "snapshot", "updates": [{"timestamp": 10, "poses": {"/vehicle_pose": {}}}]}

    snapshot = parse_timeslice_data(message)

    assert snapshot.streams == {}


def test_parsing_is_idempotent() -> None:
    message = {
        "update_type": "snapshot",
        "updates": [
            {
                "timestamp": 10,
                "poses": {"/vehicle_pose": {"timestamp": 10, "position": [1, 2, 3], "orientation": [0, 0, 1]}},
                "primitives": {"/objects": {"polygons": [{"base": {"object_id": "a"}, "vertices": [[0, 0, 0]]}]}},
                "time_series": [{"timestamp": 10, "streams": ["/speed"], "values": {"doubles": [4.5]}}],
            }
        ],
    }
    config = XvizConfig(stream_blacklist={"/ignored"})

    first = parse_timeslice_data(message, config=config)
    second = parse_timeslice_data(message, config=config)

    assert first == second
    assert first.model_dump() == second.model_dump()


@pytest.mark.parametrize("update_type", [2, ["snapshot"], {"type": "snapshot"}])
def test_non_string_update_type_rejected(update_type: Any) -> None:
    with pytest.raises(UnsupportedUpdateTypeError) as excinfo:
        parse_timeslice_data({"update_type": update_type, "updates": [], "timestamp": 1000})

    assert excinfo.value.update_type == update_type


@pytest.mark.parametrize("timestamp", [-5, -0.5, 0])
def test_non_positive_update_timestamp_is_incomplete(timestamp: float) -> None:
    message = {"update_type": "snapshot", "updates": [{"timestamp": timestamp, "poses": {"/vehicle_pose": {}}}]}

    assert parse_timeslice_data(message).is_incomplete


def test_negative_update_timestamp_resolves_incomplete() -> None:
    resolved = resolve_timeslice(
        TimesliceMessage.model_validate({"update_type": "snapshot", "updates": [{"timestamp": -5}]})
    )

    assert resolved.timestamp is None
    assert not resolved.is_complete


def test_update_count_checked_before_update_shapes() -> None:
    message = {"update_type": "snapshot", "updates": [{"timestamp": 1, "poses": []}, {"timestamp": "later"}]}

    with pytest.raises(UnsupportedUpdateCountError) as excinfo:
        parse_timeslice_data(message)

    assert excinfo.value.count == 2


def test_update_type_checked_before_update_shapes() -> None:
    message = {"update_type": "incremental", "updates": [{"timestamp": "soon", "time_series": {}}]}

    with pytest.raises(UnsupportedUpdateTypeError) as excinfo:
        parse_timeslice_data(message)

    assert excinfo.value.update_type == "incremental"


def test_empty_category_containers_contribute_nothing() -> None:
    message = {"update_type": "snapshot", "updates": [{"timestamp": 5, "poses": [], "time_series": {}}]}

    snapshot = parse_timeslice_data(message)

    assert snapshot.streams == {}
    assert snapshot.timestamp == 5


def test_category_container_of_wrong_type_raises_message_error() -> None:
    message = {"update_type": "snapshot", "updates": [{"timestamp": 5, "primitives": ["/objects"]}]}

    with pytest.raises(XvizMessageError, match="primitives"):
        parse_timeslice_data(message)

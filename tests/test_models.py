import pytest
from pydantic import ValidationError

from tempest_bridge.models import (
    DeviceStatusMessage,
    HubStatusMessage,
    ObsStMessage,
    RapidWindMessage,
    UnknownMessage,
    message_from_dict,
    parse_message,
)


def test_parses_each_known_type(rapid_wind_payload, obs_st_payload, hub_status_payload,
                                device_status_payload, encode):
    assert isinstance(parse_message(encode(rapid_wind_payload)), RapidWindMessage)
    assert isinstance(parse_message(encode(obs_st_payload)), ObsStMessage)
    assert isinstance(parse_message(encode(hub_status_payload)), HubStatusMessage)
    assert isinstance(parse_message(encode(device_status_payload)), DeviceStatusMessage)


def test_positional_arrays_become_named_fields(rapid_wind_payload, obs_st_payload, hub_status_payload):
    wind = message_from_dict(rapid_wind_payload)
    assert wind.ob.timestamp == 1588728123
    assert wind.ob.wind_speed == 1.256
    assert wind.ob.wind_direction == 128

    obs = message_from_dict(obs_st_payload).obs[0]
    assert obs.station_pressure == 1017.57
    assert obs.air_temperature == 22.37
    assert obs.battery == 2.410
    assert obs.report_interval == 1

    stats = message_from_dict(hub_status_payload).radio_stats
    assert (stats.version, stats.reboot_count, stats.error_count) == (2, 1, 0)


def test_firmware_revision_is_discarded_whatever_its_type(hub_status_payload, device_status_payload):
    # string on hub_status, integer on device_status
    hub = message_from_dict(hub_status_payload)
    device = message_from_dict(device_status_payload)
    assert "firmware_revision" not in hub.model_dump()
    assert "firmware_revision" not in device.model_dump()


def test_unknown_and_missing_type(encode):
    msg = parse_message(encode({"type": "evt_strike", "evt": [1493322445, 27, 3848]}))
    assert isinstance(msg, UnknownMessage)
    assert msg.type == "evt_strike"
    assert msg.model_dump()["evt"] == [1493322445, 27, 3848]

    untyped = parse_message(b'{"serial_number": "ST-1"}')
    assert isinstance(untyped, UnknownMessage)
    assert untyped.type == ""


def test_absent_status_fields_default_to_zero():
    msg = message_from_dict({"type": "device_status", "timestamp": 1510855923})
    assert (msg.uptime, msg.voltage, msg.rssi, msg.hub_rssi, msg.sensor_status) == (0, 0.0, 0, 0, 0)


def test_null_readings_read_as_zero(obs_st_payload):
    obs_st_payload["obs"][0][14] = None
    obs_st_payload["obs"][0][15] = None
    obs = message_from_dict(obs_st_payload).obs[0]
    assert obs.lightning_avg_distance == 0.0
    assert obs.lightning_strike_count == 0.0


def test_trailing_observation_values_are_ignored(obs_st_payload):
    obs_st_payload["obs"][0] += [0.5, 1.2, 0, 0]
    msg = message_from_dict(obs_st_payload)
    assert msg.obs[0].report_interval == 1


@pytest.mark.parametrize(
    "payload",
    [
        {"type": "rapid_wind", "ob": [1588728123, 1.256]},
        {"type": "obs_st", "obs": [[1588948614, 0.18, 0.22]]},
        {"type": "hub_status", "timestamp": 1, "radio_stats": [2, 1]},
        {"type": "hub_status", "timestamp": 1},
        {"type": "rapid_wind"},
    ],
)
def test_short_or_missing_arrays_are_rejected(payload):
    with pytest.raises(ValidationError):
        message_from_dict(payload)


@pytest.mark.parametrize("raw", [b"", b"{not json", b"[1, 2, 3]", b'{"type": "obs_st", "obs": "nope"}'])
def test_malformed_json_is_rejected(raw):
    with pytest.raises(ValidationError):
        parse_message(raw)


def test_messages_are_frozen(rapid_wind_payload):
    msg = message_from_dict(rapid_wind_payload)
    with pytest.raises(ValidationError):
        msg.ob.wind_speed = 99.0

"""Shared fixtures: sample Tempest broadcasts taken from the vendor's UDP reference."""

import json
import socket

import pytest


@pytest.fixture
def free_udp_port():
    """Find and return a free UDP port on the loopback interface."""
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as s:
        s.bind(("127.0.0.1", 0))
        port = s.getsockname()[1]
    return port


@pytest.fixture
def rapid_wind_payload():
    return {
        "serial_number": "SK-00008453",
        "type": "rapid_wind",
        "hub_sn": "HB-00000001",
        "ob": [1588728123, 1.256, 128],
    }


@pytest.fixture
def obs_st_payload():
    return {
        "serial_number": "ST-00000512",
        "type": "obs_st",
        "hub_sn": "HB-00013030",
        "obs": [
            [1588948614, 0.18, 0.22, 0.27, 144, 6, 1017.57, 22.37, 50.26, 328,
             0.03, 3, 0.000000, 0, 0, 0, 2.410, 1],
        ],
        "firmware_revision": 129,
    }


@pytest.fixture
def hub_status_payload():
    return {
        "serial_number": "HB-00000001",
        "type": "hub_status",
        "firmware_revision": "35",
        "uptime": 1670133,
        "rssi": -62,
        "timestamp": 1495724691,
        "reset_flags": "BOR,PIN,POR",
        "seq": 48,
        "fs": [1, 0, 15675411, 524288],
        "radio_stats": [2, 1, 0, 3, 2839],
        "mqtt_stats": [1, 0],
    }


@pytest.fixture
def device_status_payload():
    return {
        "serial_number": "AR-00004049",
        "type": "device_status",
        "hub_sn": "HB-00000001",
        "timestamp": 1510855923,
        "uptime": 2189,
        "voltage": 3.50,
        "firmware_revision": 17,
        "rssi": -17,
        "hub_rssi": -87,
        "sensor_status": 0,
        "debug": 0,
    }


@pytest.fixture
def encode():
    def _encode(payload) -> bytes:
        return json.dumps(payload).encode("utf-8")

    return _encode

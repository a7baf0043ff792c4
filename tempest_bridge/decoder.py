"""Translate Tempest messages into graphite metric lines."""
import logging
from dataclasses import dataclass
from typing import Callable, Iterator, Optional, Tuple, Union

from .models import (
    DeviceStatusMessage,
    HubStatusMessage,
    ObsStMessage,
    RapidWindMessage,
    TelemetryMessage,
)
from .units import UnitSystem, c_to_f, km_to_mi, mm_to_in, mps_to_mph

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "wx.tempest"

Reading = Tuple[str, float, int]

# (metric name, TempestObservation attribute, imperial conversion)
OBS_ST_FIELDS: Tuple[Tuple[str, str, Optional[Callable[[float], float]]], ...] = (
    ("wind_lull", "wind_lull", mps_to_mph),
    ("wind_avg", "wind_avg", mps_to_mph),
    ("wind_gust", "wind_gust", mps_to_mph),
    ("wind_dir", "wind_direction", None),
    ("wind_int", "wind_sample_interval", None),
    ("pres_hpa", "station_pressure", None),
    ("temp", "air_temperature", c_to_f),
    ("humd", "relative_humidity", None),
    ("lumn", "illuminance", None),
    ("uv", "uv", None),
    ("solar_rad", "solar_radiation", None),
    ("rain", "rain_accumulated", mm_to_in),
    ("prcp_type", "precipitation_type", None),
    ("light_dst", "lightning_avg_distance", km_to_mi),
    ("light_cnt", "lightning_strike_count", None),
    ("batt_volt", "battery", None),
    ("reprt_int", "report_interval", None),
)


@dataclass(frozen=True)
class MetricLine:
    """One graphite plaintext metric: ``<namespace>.<name> <value> <timestamp>``."""

    name: str
    value: float
    timestamp: int
    namespace: str = DEFAULT_NAMESPACE

    def __str__(self) -> str:
        return f"{self.namespace}.{self.name} {self.value:0.6f} {self.timestamp}"


def _rapid_wind(msg: RapidWindMessage, imperial: bool) -> Iterator[Reading]:
    ob = msg.ob
    ts = int(ob.timestamp)
    speed = mps_to_mph(ob.wind_speed) if imperial else ob.wind_speed
    yield "wind_speed", speed, ts
    yield "wind_dir", ob.wind_direction, ts


def _obs_st(msg: ObsStMessage, imperial: bool) -> Iterator[Reading]:
    for ob in msg.obs:
        ts = int(ob.timestamp)
        for name, attr, convert in OBS_ST_FIELDS:
            value = getattr(ob, attr)
            if imperial and convert is not None:
                value = convert(value)
            yield name, value, ts


def _hub_status(msg: HubStatusMessage, imperial: bool) -> Iterator[Reading]:
    ts = msg.timestamp
    yield "hub_uptime", msg.uptime, ts
    yield "hub_rssi", msg.rssi, ts
    yield "radio_reboot", msg.radio_stats.reboot_count, ts
    yield "radio_err", msg.radio_stats.error_count, ts


def _device_status(msg: DeviceStatusMessage, imperial: bool) -> Iterator[Reading]:
    ts = msg.timestamp
    yield "dev_uptime", msg.uptime, ts
    yield "dev_voltage", msg.voltage, ts
    yield "dev_rssi", msg.rssi, ts
    yield "dev_hrssi", msg.hub_rssi, ts
    yield "dev_status", msg.sensor_status, ts


_DECODERS = {
    RapidWindMessage: _rapid_wind,
    ObsStMessage: _obs_st,
    HubStatusMessage: _hub_status,
    DeviceStatusMessage: _device_status,
}


def decode(
    message: TelemetryMessage,
    units: Union[UnitSystem, str] = UnitSystem.METRIC,
    namespace: str = DEFAULT_NAMESPACE,
) -> Iterator[MetricLine]:
    """Yield the metric lines for one message, in a fixed per-type order.

    Messages of any other type yield nothing and are logged once at INFO.
    """
    handler = _DECODERS.get(type(message))
    if handler is None:
        logger.info(f"message type {message.type!r} not decoded: {message.model_dump()}")
        return
    imperial = UnitSystem(units) is UnitSystem.IMPERIAL
    for name, value, ts in handler(message, imperial):
        yield MetricLine(name, float(value), ts, namespace)

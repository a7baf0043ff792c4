"""Pydantic models for the Tempest UDP broadcast messages.

See https://apidocs.tempestwx.com/reference/tempest-udp-broadcast for the
wire format. Observations arrive as positional JSON arrays; they are turned
into named fields here, once, so nothing downstream indexes into raw lists.

``firmware_revision`` is a string in ``hub_status`` and an integer in
``device_status``. It is never declared on any model, so it is dropped on
parse instead of failing one of the two message kinds.
"""
from typing import Annotated, Any, Literal, Optional, Tuple, Type, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Tag,
    TypeAdapter,
    field_validator,
    model_validator,
)

KNOWN_TYPES = ("rapid_wind", "obs_st", "hub_status", "device_status")


def _from_positional(model: Type[BaseModel], data: Any) -> Any:
    if not isinstance(data, (list, tuple)):
        return data
    names = list(model.model_fields)
    if len(data) < len(names):
        raise ValueError(f"expected at least {len(names)} values, got {len(data)}")
    # null readings decode as zero; extra trailing values are ignored
    return {name: 0 if value is None else value for name, value in zip(names, data)}


class _Positional(BaseModel):
    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _unpack(cls, data: Any) -> Any:
        return _from_positional(cls, data)


class RapidWindObservation(_Positional):
    timestamp: float
    wind_speed: float  # m/s
    wind_direction: float  # degrees


class TempestObservation(_Positional):
    """One ``obs_st`` sampling interval, fields in wire order."""

    timestamp: float
    wind_lull: float  # m/s
    wind_avg: float  # m/s
    wind_gust: float  # m/s
    wind_direction: float  # degrees
    wind_sample_interval: float  # s
    station_pressure: float  # hPa
    air_temperature: float  # C
    relative_humidity: float  # %
    illuminance: float  # lux
    uv: float
    solar_radiation: float  # W/m^2
    rain_accumulated: float  # mm
    precipitation_type: float
    lightning_avg_distance: float  # km
    lightning_strike_count: float
    battery: float  # V
    report_interval: float  # min


class RadioStats(_Positional):
    version: int
    reboot_count: int
    error_count: int


class _Message(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    serial_number: Optional[str] = None
    hub_sn: Optional[str] = None


class RapidWindMessage(_Message):
    type: Literal["rapid_wind"] = "rapid_wind"
    ob: RapidWindObservation


class ObsStMessage(_Message):
    type: Literal["obs_st"] = "obs_st"
    obs: Tuple[TempestObservation, ...] = ()

    @field_validator("obs", mode="before")
    @classmethod
    def _null_is_empty(cls, value: Any) -> Any:
        return () if value is None else value


class _StatusMessage(_Message):
    timestamp: int = 0
    uptime: int = 0
    rssi: int = 0

    @field_validator("timestamp", "uptime", "rssi", mode="before")
    @classmethod
    def _null_is_zero(cls, value: Any) -> Any:
        return 0 if value is None else value


class HubStatusMessage(_StatusMessage):
    type: Literal["hub_status"] = "hub_status"
    radio_stats: RadioStats


class DeviceStatusMessage(_StatusMessage):
    type: Literal["device_status"] = "device_status"
    voltage: float = 0.0
    hub_rssi: int = 0
    sensor_status: int = 0

    @field_validator("voltage", "hub_rssi", "sensor_status", mode="before")
    @classmethod
    def _null_reading_is_zero(cls, value: Any) -> Any:
        return 0 if value is None else value


class UnknownMessage(_Message):
    """Any message type the bridge does not translate; keeps the raw fields."""

    model_config = ConfigDict(frozen=True, extra="allow")

    type: str = ""


def _message_tag(value: Any) -> str:
    if isinstance(value, dict):
        tag = value.get("type")
    else:
        tag = getattr(value, "type", None)
    return tag if tag in KNOWN_TYPES else "unknown"


TelemetryMessage = Annotated[
    Union[
        Annotated[RapidWindMessage, Tag("rapid_wind")],
        Annotated[ObsStMessage, Tag("obs_st")],
        Annotated[HubStatusMessage, Tag("hub_status")],
        Annotated[DeviceStatusMessage, Tag("device_status")],
        Annotated[UnknownMessage, Tag("unknown")],
    ],
    Discriminator(_message_tag),
]

_message_adapter = TypeAdapter(TelemetryMessage)


def parse_message(raw: Union[bytes, str]) -> TelemetryMessage:
    """Parse one Tempest datagram.

    Raises ``pydantic.ValidationError`` for malformed JSON as well as for
    payloads that do not match their declared type, such as observation
    arrays that are too short.
    """
    return _message_adapter.validate_json(raw)


def message_from_dict(data: dict) -> TelemetryMessage:
    return _message_adapter.validate_python(data)

"""Bridge WeatherFlow Tempest UDP broadcasts into graphite line protocol."""

from .decoder import MetricLine, decode
from .models import TelemetryMessage, parse_message
from .units import UnitSystem

__all__ = ["MetricLine", "TelemetryMessage", "UnitSystem", "decode", "parse_message"]

from typing import Tuple

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .units import UnitSystem


class BaseConfig(BaseSettings):
    listen_addr: str = ":50222"
    graphite_addr: str = "graphite:2003"
    graphite_prefix: str = "wx.tempest"
    units: UnitSystem = UnitSystem.METRIC
    verbose: bool = False
    metrics_port: int = 0
    log_level: str = "INFO"
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()


def parse_address(spec: str, default_host: str = "") -> Tuple[str, int]:
    """Split a ``host:port`` spec; an empty host falls back to ``default_host``."""
    host, sep, port = spec.rpartition(":")
    if not sep:
        raise ValueError(f"address {spec!r} is missing a port")
    host = host.strip("[]") or default_host
    try:
        port_num = int(port)
    except ValueError:
        raise ValueError(f"address {spec!r} has an invalid port") from None
    if not 0 <= port_num <= 65535:
        raise ValueError(f"address {spec!r} has an out-of-range port")
    return host, port_num

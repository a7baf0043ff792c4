"""Unit conversions applied to Tempest readings in imperial mode."""
import enum

MPH_PER_MPS = 2.23694
MM_PER_IN = 25.4
KM_PER_MI = 1.60934


class UnitSystem(str, enum.Enum):
    METRIC = "metric"
    IMPERIAL = "imperial"


def mps_to_mph(value: float) -> float:
    return value * MPH_PER_MPS


def mph_to_mps(value: float) -> float:
    return value / MPH_PER_MPS


def c_to_f(value: float) -> float:
    return value * 9 / 5 + 32


def f_to_c(value: float) -> float:
    return (value - 32) * 5 / 9


def mm_to_in(value: float) -> float:
    return value / MM_PER_IN


def in_to_mm(value: float) -> float:
    return value * MM_PER_IN


def km_to_mi(value: float) -> float:
    return value / KM_PER_MI


def mi_to_km(value: float) -> float:
    return value * KM_PER_MI

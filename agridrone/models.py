"""Sensor readings exchanged between the drone subsystems, with JSON encoding."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from typing import Any


def _load_object(text: str | bytes) -> dict[str, Any]:
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object, got {type(data).__name__}")
    return data


def _int_field(data: dict[str, Any], name: str) -> int:
    try:
        value = data[name]
    except KeyError:
        raise ValueError(f"missing field {name!r}") from None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"field {name!r} must be an integer, got {value!r}")
    return value


def _float_field(data: dict[str, Any], name: str) -> float:
    try:
        value = data[name]
    except KeyError:
        raise ValueError(f"missing field {name!r}") from None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"field {name!r} must be a number, got {value!r}")
    return float(value)


def _dump(obj: Any) -> str:
    return json.dumps(asdict(obj), separators=(",", ":"))


@dataclass(frozen=True)
class MtsCamera:
    """Multispectral camera reading: soil moisture and soil nutrient level."""

    soil_moist: int
    soil_nutr: float

    def to_json(self) -> str:
        return _dump(self)

    @classmethod
    def from_json(cls, text: str | bytes) -> MtsCamera:
        data = _load_object(text)
        return cls(
            soil_moist=_int_field(data, "soil_moist"),
            soil_nutr=_float_field(data, "soil_nutr"),
        )


@dataclass(frozen=True)
class Ultrasonic:
    """Ultrasonic reading: distance to the nearest obstacle and altitude, in metres."""

    obstacles_dtc: int
    altitude: int

    def to_json(self) -> str:
        return _dump(self)

    @classmethod
    def from_json(cls, text: str | bytes) -> Ultrasonic:
        data = _load_object(text)
        return cls(
            obstacles_dtc=_int_field(data, "obstacles_dtc"),
            altitude=_int_field(data, "altitude"),
        )


@dataclass(frozen=True)
class GPS:
    """GPS position of the drone."""

    longitude: int
    latitude: int

    def to_json(self) -> str:
        return _dump(self)

    @classmethod
    def from_json(cls, text: str | bytes) -> GPS:
        data = _load_object(text)
        return cls(
            longitude=_int_field(data, "longitude"),
            latitude=_int_field(data, "latitude"),
        )
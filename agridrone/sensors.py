"""Simulated drone sensors and the monitor that publishes their readings."""

from __future__ import annotations

import math
import random
import threading

from agridrone.bus import MessageBus
from agridrone.models import GPS, MtsCamera, Ultrasonic
from agridrone.state import DroneState

_MTS_CAM_QUEUE = "mts_cam"
_THERMAL_QUEUE = "thermal"
_GPS_QUEUE = "gps"
_ULTRA_SENSOR_QUEUE = "ultra_sensor"
_BATT_QUEUE = "batt"

_PATH_LONGITUDE = 5
_LATITUDE_START = 100
_LATITUDE_END = 130
_MAX_ALTITUDE = 50


def _round_tenth(value: float) -> float:
    """Round to one decimal place, halves away from zero."""
    return math.copysign(math.floor(abs(value) * 10.0 + 0.5), value) / 10.0


class MultispectralCamera:
    """Produces soil moisture and soil nutrient readings."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng if rng is not None else random.Random()
        self._lock = threading.Lock()
        self.dry_moisture = False
        self.soil_moist = 0
        self.insufficient_nutrient = False
        self.soil_nutr = 0.0

    def read(self) -> MtsCamera:
        """Take the next reading."""
        with self._lock:
            prob = self._rng.randrange(0, 10)

            if not self.dry_moisture:
                if prob < 7:
                    self.soil_moist = self._rng.randrange(300, 401)
                else:
                    self.soil_moist = self._rng.randrange(200, 300)
                    self.dry_moisture = True
            else:
                self.soil_moist += 20
                if self.soil_moist > 299:
                    self.dry_moisture = False

            if not self.insufficient_nutrient:
                if prob < 7:
                    self.soil_nutr = _round_tenth(self._rng.uniform(0.6, 1.0))
                else:
                    self.soil_nutr = _round_tenth(self._rng.uniform(0.1, 0.6))
                    self.insufficient_nutrient = True
            else:
                self.soil_nutr += 0.1
                if self.soil_nutr > 0.5:
                    self.insufficient_nutrient = False

            return MtsCamera(soil_moist=self.soil_moist, soil_nutr=self.soil_nutr)


class ThermalSensor:
    """Produces temperature readings in degrees Celsius."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng if rng is not None else random.Random()
        self._lock = threading.Lock()
        self.high_thermal = False
        self.value = 0

    def read(self) -> int:
        """Take the next reading."""
        with self._lock:
            prob = self._rng.randrange(0, 10)
            if not self.high_thermal:
                if prob < 7:
                    self.value = self._rng.randrange(20, 31)
                else:
                    self.value = self._rng.randrange(31, 40)
                    self.high_thermal = True
            else:
                self.value -= 2
                if self.value < 31:
                    self.high_thermal = False
            return self.value


class GpsSensor:
    """Tracks the drone's position along its preset path."""

    def __init__(
        self,
        rng: random.Random | None = None,
        position: GPS = GPS(longitude=_PATH_LONGITUDE, latitude=_LATITUDE_START),
    ) -> None:
        self._rng = rng if rng is not None else random.Random()
        self._lock = threading.Lock()
        self.position = position

    def read(self, state: DroneState) -> GPS | None:
        """Advance the position and return the reading, or None when idle."""
        with self._lock:
            prob = self._rng.randrange(0, 10)
            with state:
                task_ongoing = state.task_ongoing
                back_home = state.back_home
                resume = state.resume_operation

            longitude = self.position.longitude
            latitude = self.position.latitude

            if task_ongoing and not back_home:
                deviation = 0 if prob < 7 else self._rng.randrange(-3, 5)
                if latitude != _LATITUDE_END:
                    latitude += 1 if resume else 5
            elif back_home:
                deviation = 0 if prob < 7 else self._rng.randrange(-3, 5)
                moving = (
                    latitude > _LATITUDE_START
                    if prob < 7
                    else latitude != _LATITUDE_START
                )
                if moving:
                    latitude = max(latitude - 2, _LATITUDE_START)
            else:
                return None

            self.position = GPS(longitude=longitude, latitude=latitude)
            return GPS(longitude=longitude + deviation, latitude=latitude)


class UltrasonicSensor:
    """Measures obstacle distance and altitude."""

    def __init__(self, rng: random.Random | None = None, altitude: int = 0) -> None:
        self._rng = rng if rng is not None else random.Random()
        self._lock = threading.Lock()
        self.altitude = altitude

    def read(self, state: DroneState) -> Ultrasonic:
        """Take the next reading, climbing, hovering or descending as the state asks."""
        with self._lock:
            prob = self._rng.randrange(0, 10)
            if prob < 7:
                distance = self._rng.randrange(101, 200)
            else:
                distance = self._rng.randrange(50, 101)

            with state:
                if not state.landing:
                    if not state.reached_max_altitude:
                        self.altitude += 5
                        if self.altitude == _MAX_ALTITUDE:
                            state.reached_max_altitude = True
                    elif self._rng.randrange(0, 10) < 7:
                        self.altitude = _MAX_ALTITUDE
                    else:
                        self.altitude = _MAX_ALTITUDE + self._rng.randint(-5, 5)
                else:
                    self.altitude = max(self.altitude - 10, 0)

            return Ultrasonic(obstacles_dtc=distance, altitude=self.altitude)


class BatteryManagement:
    """Drains the shared battery level and reports it."""

    def read(self, state: DroneState) -> int:
        """Drain the battery by one step and return the new level."""
        with state:
            if state.battery_level < 21:
                state.battery_level = max(state.battery_level - 1, 2)
            elif not state.resume_operation and state.task_ongoing:
                state.battery_level -= 1
            else:
                state.battery_level -= 5
            return state.battery_level


def monitor(
    bus: MessageBus,
    mts_data: MtsCamera | None = None,
    thermal: int | None = None,
    gps: GPS | None = None,
    ultrasonic: Ultrasonic | None = None,
    battery: int | None = None,
) -> None:
    """Publish every reading that is present to its queue on the bus."""
    if mts_data is not None:
        bus.send(mts_data.to_json(), _MTS_CAM_QUEUE)
    if thermal is not None:
        bus.send(str(thermal), _THERMAL_QUEUE)
    if gps is not None:
        bus.send(gps.to_json(), _GPS_QUEUE)
    if ultrasonic is not None:
        bus.send(ultrasonic.to_json(), _ULTRA_SENSOR_QUEUE)
    if battery is not None:
        bus.send(str(battery), _BATT_QUEUE)
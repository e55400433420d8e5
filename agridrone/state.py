"""Shared, lock-protected state of the drone."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field

FULL_LEVEL = 100


@dataclass
class DroneState:
    """Flags and levels shared between sensors, main control and actuators.

    Use the instance as a context manager to hold its lock while reading or
    changing several fields together.
    """

    task_ongoing: bool = True
    back_home: bool = False
    landing: bool = False
    resume_operation: bool = True
    latest_latitude: int = 100

    water_dispenser_on: bool = False
    water_tank_level: int = FULL_LEVEL
    fertiliser_dispenser_on: bool = False
    fertiliser_tank_level: int = FULL_LEVEL
    pesticide_dispenser_on: bool = False
    pesticide_tank_level: int = FULL_LEVEL

    gear_up: bool = False
    battery_level: int = 105
    reached_max_altitude: bool = False

    sensor_operating: bool = True
    main_control_operating: bool = True
    actuator_operating: bool = True

    lock: threading.RLock = field(
        default_factory=threading.RLock, repr=False, compare=False
    )

    def __enter__(self) -> DroneState:
        self.lock.acquire()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.lock.release()

    def suspend_sprayers(self) -> None:
        """Switch off the water, fertiliser and pesticide dispensers."""
        with self.lock:
            self.water_dispenser_on = False
            self.fertiliser_dispenser_on = False
            self.pesticide_dispenser_on = False
        print(
            "Sprayers [Water, Fertiliser, & Pesticide Dispenser] "
            "operations temporarily suspended."
        )

    def refill(self) -> None:
        """Refill every tank, replace the battery and clear the return-home flags."""
        with self.lock:
            self.water_tank_level = FULL_LEVEL
            self.fertiliser_tank_level = FULL_LEVEL
            self.pesticide_tank_level = FULL_LEVEL
            self.battery_level = FULL_LEVEL
            self.back_home = False
            self.landing = False
            self.reached_max_altitude = False

    def shut_down(self) -> None:
        """Stop the sensors, the main control and the actuators."""
        with self.lock:
            self.sensor_operating = False
            self.actuator_operating = False
            self.main_control_operating = False
"""Main control: turns sensor readings into instructions for the actuators."""

from __future__ import annotations

import re
import time
from enum import Enum

from agridrone.bus import MessageBus
from agridrone.models import GPS, MtsCamera, Ultrasonic
from agridrone.state import DroneState

_MTS_CAM_QUEUE = "mts_cam"
_THERMAL_QUEUE = "thermal"
_GPS_QUEUE = "gps"
_ULTRA_SENSOR_QUEUE = "ultra_sensor"
_BATT_QUEUE = "batt"
_WATER_LEVEL_QUEUE = "water_disp_mc"
_FERT_LEVEL_QUEUE = "fert_disp_mc"
_PEST_LEVEL_QUEUE = "pest_disp_mc"

_SOIL_MOIST_ACT = "soil_moist_act"
_SOIL_NUTR_ACT = "soil_nutr_act"
_THERMAL_ACT = "thermal_act"
_GPS_ACT = "gps_act"
_OBS_DETC_ACT = "obs_detc_act"
_ALTITUDE_GEAR_ACT = "altitude_gear_act"
_ALTITUDE_MOTOR_ACT = "altitude_motor_act"
_ALTITUDE_REFILL_ACT = "altitude_refill_act"

_PATH_LONGITUDE = 5
_LATITUDE_START = 100
_LATITUDE_END = 130

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1
_INT_PATTERN = re.compile(r"[+-]?[0-9]+")

_BANNER = "------------------------------"


class Tank(str, Enum):
    """The three spraying tanks whose levels the main control watches."""

    WATER = "water"
    FERTILISER = "fertiliser"
    PESTICIDE = "pesticide"

    @property
    def label(self) -> str:
        return self.value.capitalize()


def _parse_int(text: str) -> int | None:
    """Parse a signed 32-bit decimal integer, or return None if it is not one."""
    if not _INT_PATTERN.fullmatch(text):
        return None
    value = int(text)
    if not _INT32_MIN <= value <= _INT32_MAX:
        return None
    return value


def soil_moist_logic(state: DroneState, soil_moist: int) -> str:
    """Instruction for the water dispenser from the soil moisture reading."""
    with state:
        operating = state.water_dispenser_on
    if soil_moist > 299:
        return "Off water dispenser" if operating else "Maintain"
    return "Maintain" if operating else "On water dispenser"


def soil_nutr_logic(state: DroneState, soil_nutr: float) -> str:
    """Instruction for the fertiliser dispenser from the soil nutrient reading."""
    with state:
        operating = state.fertiliser_dispenser_on
    if soil_nutr > 0.5:
        return "Off fertiliser dispensing" if operating else "Maintain"
    return "Maintain" if operating else "On fertiliser dispensing"


def thermal_logic(state: DroneState, thermal: int) -> str:
    """Instruction for the pesticide dispenser from the temperature reading."""
    with state:
        operating = state.pesticide_dispenser_on
    if thermal < 31:
        return "Off pesticide dispensing" if operating else "Maintain"
    return "Maintain" if operating else "On pesticide dispensing"


def gps_logic(state: DroneState, longitude: int, latitude: int) -> str:
    """Update the mission flags from a position and return the course correction.

    The correction is the preset path longitude minus the current longitude.
    """
    with state:
        if latitude > state.latest_latitude:
            state.latest_latitude = latitude

        if not state.resume_operation and latitude >= state.latest_latitude:
            state.resume_operation = True
            print(
                f"Drone: Reached last location [{longitude}, {latitude}], "
                "operation rusumed...."
            )

        if state.task_ongoing and not state.back_home and latitude == _LATITUDE_END:
            state.task_ongoing = False
            state.back_home = True
            print("Drone mission accomplished! Backing to home...")
        elif state.back_home and latitude == _LATITUDE_START:
            state.landing = True

    return str(_PATH_LONGITUDE - longitude)


def obstacle_logic(obstacles_dtc: int) -> str:
    """Instruction for the motors from the obstacle distance."""
    if obstacles_dtc < 100:
        return "Increase thrust to avoid obstacles"
    return "Maintain thrust"


def altitude_gear_logic(state: DroneState, altitude: int) -> str:
    """Instruction for the landing gear from the altitude."""
    with state:
        gear_up = state.gear_up
        landing = state.landing
    if not gear_up and altitude > 5:
        return "Retract gear"
    if gear_up and altitude < 20 and landing:
        return "Deploy gear"
    return "Maintain"


def altitude_motor_logic(state: DroneState, altitude: int) -> str:
    """Instruction for the motors from the altitude."""
    with state:
        landing = state.landing
    if not landing and altitude < 50:
        return "Increase thrust for more lift"
    if not landing and altitude > 50:
        return "Reduce thrust to lower"
    if landing:
        return "Reduce thrust for landing"
    return "Maintain thrust"


def _go_home(state: DroneState, message: str) -> None:
    print(message)
    state.back_home = True
    state.resume_operation = False
    state.suspend_sprayers()


def battery_logic(state: DroneState, level: int) -> None:
    """Send the drone home when the battery drops below 21%."""
    with state:
        if level < 21 and not state.back_home:
            _go_home(state, "Battery: Low battery, going home....")


def tank_level_logic(state: DroneState, tank: Tank | str, level: int) -> None:
    """Send the drone home when the given tank is empty.

    Raises ValueError for an unknown tank.
    """
    tank = Tank(tank)
    with state:
        if level <= 0 and not state.back_home:
            _go_home(state, f"{tank.label} Tank: Empty, going home....")


class MainControl:
    """Reads sensor and tank queues from the bus and sends actuator instructions."""

    def __init__(
        self, state: DroneState | None = None, bus: MessageBus | None = None
    ) -> None:
        self.state = state if state is not None else DroneState()
        self.bus = bus if bus is not None else MessageBus()

    def _operating(self) -> bool:
        with self.state:
            return self.state.main_control_operating

    def _take(self, queue: str) -> str | None:
        message = self.bus.try_receive(queue)
        if message is None or not self._operating():
            return None
        return message

    def _handle_level(
        self, queue: str, title: str, handler
    ) -> None:
        message = self._take(queue)
        if message is None:
            return
        value = _parse_int(message)
        if value is None:
            return
        print(f"{_BANNER}[{title}: {message}%]")
        handler(value)

    def process(self) -> None:
        """Handle at most one pending message from each input queue."""
        state, bus = self.state, self.bus

        message = self._take(_MTS_CAM_QUEUE)
        if message is not None:
            mts = MtsCamera.from_json(message)
            print(f"{_BANNER}[Soil Moisture: {mts.soil_moist}]")
            print(f"{_BANNER}[Soil Nutrient: {mts.soil_nutr:.1f}]")
            bus.send(soil_moist_logic(state, mts.soil_moist), _SOIL_MOIST_ACT)
            bus.send(soil_nutr_logic(state, mts.soil_nutr), _SOIL_NUTR_ACT)

        message = self._take(_THERMAL_QUEUE)
        if message is not None:
            temp = _parse_int(message)
            if temp is not None:
                print(f"{_BANNER}[Thermal: {message} Degree Celsius]")
                bus.send(thermal_logic(state, temp), _THERMAL_ACT)

        message = self._take(_GPS_QUEUE)
        if message is not None:
            gps = GPS.from_json(message)
            print(f"{_BANNER}[GPS: ({gps.longitude}, {gps.latitude})]")
            bus.send(gps_logic(state, gps.longitude, gps.latitude), _GPS_ACT)

        message = self._take(_ULTRA_SENSOR_QUEUE)
        if message is not None:
            ultra = Ultrasonic.from_json(message)
            print(f"{_BANNER}[Obstacles Detection: {ultra.obstacles_dtc} metre]")
            print(f"{_BANNER}[Altitude: {ultra.altitude} metre]")
            obstacle = obstacle_logic(ultra.obstacles_dtc)
            gear = altitude_gear_logic(state, ultra.altitude)
            motor = altitude_motor_logic(state, ultra.altitude)
            bus.send(obstacle, _OBS_DETC_ACT)
            bus.send(gear, _ALTITUDE_GEAR_ACT)
            bus.send(motor, _ALTITUDE_MOTOR_ACT)
            bus.send(str(ultra.altitude), _ALTITUDE_REFILL_ACT)

        self._handle_level(
            _BATT_QUEUE, "Battery Level", lambda v: battery_logic(state, v)
        )
        self._handle_level(
            _WATER_LEVEL_QUEUE,
            "Water Tank Level",
            lambda v: tank_level_logic(state, Tank.WATER, v),
        )
        self._handle_level(
            _FERT_LEVEL_QUEUE,
            "Fertiliser Tank Level",
            lambda v: tank_level_logic(state, Tank.FERTILISER, v),
        )
        self._handle_level(
            _PEST_LEVEL_QUEUE,
            "Pesticide Tank Level",
            lambda v: tank_level_logic(state, Tank.PESTICIDE, v),
        )

    def run(self, interval: float = 0.05) -> None:
        """Process messages until the main control is shut down."""
        while True:
            self.process()
            if not self._operating():
                print("Main Control is shut down.")
                break
            time.sleep(interval)
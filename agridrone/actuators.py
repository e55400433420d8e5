"""Actuators: sprayers, landing gear, motors and propellers, and the refill station."""

from __future__ import annotations

import random
import re
import time
from dataclasses import dataclass
from enum import Enum

from agridrone.bus import MessageBus
from agridrone.state import DroneState

_SOIL_MOIST_ACT = "soil_moist_act"
_SOIL_NUTR_ACT = "soil_nutr_act"
_THERMAL_ACT = "thermal_act"
_GPS_ACT = "gps_act"
_OBS_DETC_ACT = "obs_detc_act"
_ALTITUDE_MOTOR_ACT = "altitude_motor_act"
_ALTITUDE_GEAR_ACT = "altitude_gear_act"
_ALTITUDE_REFILL_ACT = "altitude_refill_act"

_WATER_LEVEL_QUEUE = "water_disp_mc"
_FERT_LEVEL_QUEUE = "fert_disp_mc"
_PEST_LEVEL_QUEUE = "pest_disp_mc"

_DISPENSE_STEP = 10

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1
_INT_PATTERN = re.compile(r"[+-]?[0-9]+")


class Touchdown(Enum):
    """What happened when the drone reached the ground."""

    REFILLED = "refilled"
    LANDED = "landed"


@dataclass(frozen=True)
class _Sprayer:
    name: str
    substance: str
    on_instruction: str
    off_instruction: str
    operating_field: str
    level_field: str
    level_queue: str


_WATER = _Sprayer(
    name="Water Dispenser",
    substance="water",
    on_instruction="On water dispenser",
    off_instruction="Off water dispenser",
    operating_field="water_dispenser_on",
    level_field="water_tank_level",
    level_queue=_WATER_LEVEL_QUEUE,
)
_FERTILISER = _Sprayer(
    name="Fertiliser Dispenser",
    substance="fertiliser",
    on_instruction="On fertiliser dispensing",
    off_instruction="Off fertiliser dispensing",
    operating_field="fertiliser_dispenser_on",
    level_field="fertiliser_tank_level",
    level_queue=_FERT_LEVEL_QUEUE,
)
_PESTICIDE = _Sprayer(
    name="Pesticide Dispenser",
    substance="pesticide",
    on_instruction="On pesticide dispensing",
    off_instruction="Off pesticide dispensing",
    operating_field="pesticide_dispenser_on",
    level_field="pesticide_tank_level",
    level_queue=_PEST_LEVEL_QUEUE,
)


def _parse_int(text: str) -> int | None:
    """Parse a signed 32-bit decimal integer, or return None if it is not one."""
    if not _INT_PATTERN.fullmatch(text):
        return None
    value = int(text)
    if not _INT32_MIN <= value <= _INT32_MAX:
        return None
    return value


def _dispense(
    sprayer: _Sprayer, state: DroneState, bus: MessageBus, instruction: str
) -> int:
    with state:
        operating = getattr(state, sprayer.operating_field)
        remaining = getattr(state, sprayer.level_field)
        if instruction == sprayer.off_instruction:
            print(f"{sprayer.name}: Stop operating")
            setattr(state, sprayer.operating_field, False)
        elif instruction == sprayer.on_instruction:
            print(f"{sprayer.name}: Start operating")
            setattr(state, sprayer.operating_field, True)
            remaining -= _DISPENSE_STEP
        elif instruction == "Maintain" and operating:
            remaining -= _DISPENSE_STEP
            print(f"{sprayer.name}: Dispensing {sprayer.substance}")
        setattr(state, sprayer.level_field, remaining)
    bus.send(str(remaining), sprayer.level_queue)
    return remaining


def water_dispenser(state: DroneState, bus: MessageBus, instruction: str) -> int:
    """Apply an instruction to the water dispenser and report the tank level."""
    return _dispense(_WATER, state, bus, instruction)


def fertiliser_dispenser(state: DroneState, bus: MessageBus, instruction: str) -> int:
    """Apply an instruction to the fertiliser dispenser and report the tank level."""
    return _dispense(_FERTILISER, state, bus, instruction)


def pesticide_dispenser(state: DroneState, bus: MessageBus, instruction: str) -> int:
    """Apply an instruction to the pesticide dispenser and report the tank level."""
    return _dispense(_PESTICIDE, state, bus, instruction)


def gear(state: DroneState, instruction: str) -> bool:
    """Retract or deploy the landing gear; return whether the gear is up."""
    with state:
        if instruction == "Retract gear":
            state.gear_up = True
            print("Gear: Retracting gear")
        elif instruction == "Deploy gear":
            state.gear_up = False
            print("Gear: Deploying gear")
        return state.gear_up


def _propeller_gps(command: str | None) -> None:
    if command is None:
        return
    if command == "Remain":
        print("Propellers: Remain spinning degree (on track)")
    else:
        print(f"Propellers: {command} (off track)")


def _propeller_obstacle(command: str | None) -> None:
    if command is None:
        return
    if command == "Remain":
        print("Propellers: Remain spinning degree (no obstacles)")
    else:
        print(f"Propellers: {command} (obstacles detected)")


def _propeller_altitude(command: str | None) -> None:
    if command is None:
        return
    if command == "Remain":
        print("Propellers: Remain spinning degree (normal altitude)")
    elif command == "Lifting the drone":
        print(f"Propellers: {command} (altitude low)")
    else:
        print(f"Propellers: {command}")


def motor_gps(instruction: str, rng: random.Random | None = None) -> str | None:
    """Correct the course from a longitude offset; return the propeller command."""
    rng = rng if rng is not None else random.Random()
    command: str | None = None
    if instruction == "0":
        print("Motor: Thrust remained at 80% (on-track)")
        command = "Remain"
    else:
        thrust = rng.randrange(81, 101)
        print(f"Motor: Thrust increased to {thrust}% (off-track)")
        offset = _parse_int(instruction)
        if offset is not None:
            if offset < 0:
                command = f"Roll left {-offset} degree"
            else:
                command = f"Roll right {offset} degree"
    _propeller_gps(command)
    return command


def motor_obstacle(instruction: str, rng: random.Random | None = None) -> str | None:
    """Steer around obstacles; return the propeller command."""
    rng = rng if rng is not None else random.Random()
    command: str | None = None
    if instruction == "Increase thrust to avoid obstacles":
        thrust = rng.randrange(81, 101)
        print(f"Motor: Thrust increased to {thrust}% (obstacles detected)")
        command = "Roll to left" if rng.randrange(0, 2) == 0 else "Roll to right"
    elif instruction == "Maintain thrust":
        print("Motor: Thrust remained at 80% (no obstacles)")
        command = "Remain"
    _propeller_obstacle(command)
    return command


def motor_altitude(instruction: str, rng: random.Random | None = None) -> str | None:
    """Adjust thrust for altitude; return the propeller command."""
    rng = rng if rng is not None else random.Random()
    command: str | None = None
    if instruction == "Increase thrust for more lift":
        thrust = rng.randrange(81, 101)
        print(f"Motor: Thrust increased to {thrust}% (altitude low)")
        command = "Lifting the drone"
    elif instruction == "Reduce thrust to lower":
        thrust = rng.randrange(50, 80)
        print(f"Motor: Thrust reduced to {thrust}% (altitude high)")
        command = "Lowering the drone (altitude high)"
    elif instruction == "Maintain thrust":
        print("Motor: Thrust remained at 80% (normal altitude)")
        command = "Remain"
    elif instruction == "Reduce thrust for landing":
        print("Motor: Reducing trust (landing)")
        command = "Lowering the drone (landing)"
    _propeller_altitude(command)
    return command


def refill_or_land(state: DroneState, altitude: str) -> Touchdown | None:
    """On the ground, refill mid-task or shut everything down after the task."""
    if altitude != "0":
        return None
    with state:
        if state.task_ongoing:
            state.refill()
            print("Drone: Landed for battery replacement and tanks refill.")
            print("Drone: Battery is replaced and all tanks are refilled")
            return Touchdown.REFILLED
        state.shut_down()
    print("Drone: Landed safely.")
    print("END OF SIMULATION")
    return Touchdown.LANDED


class Actuators:
    """Reads actuator instructions from the bus and carries them out."""

    def __init__(
        self,
        state: DroneState | None = None,
        bus: MessageBus | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.state = state if state is not None else DroneState()
        self.bus = bus if bus is not None else MessageBus()
        self.rng = rng if rng is not None else random.Random()

    def _operating(self) -> bool:
        with self.state:
            return self.state.actuator_operating

    def step(self) -> None:
        """Carry out at most one pending instruction from each actuator queue."""
        state, bus, rng = self.state, self.bus, self.rng
        handlers = (
            (_SOIL_MOIST_ACT, lambda m: water_dispenser(state, bus, m)),
            (_SOIL_NUTR_ACT, lambda m: fertiliser_dispenser(state, bus, m)),
            (_THERMAL_ACT, lambda m: pesticide_dispenser(state, bus, m)),
            (_GPS_ACT, lambda m: motor_gps(m, rng)),
            (_OBS_DETC_ACT, lambda m: motor_obstacle(m, rng)),
            (_ALTITUDE_MOTOR_ACT, lambda m: motor_altitude(m, rng)),
            (_ALTITUDE_GEAR_ACT, lambda m: gear(state, m)),
            (_ALTITUDE_REFILL_ACT, lambda m: refill_or_land(state, m)),
        )
        for queue, handle in handlers:
            message = bus.try_receive(queue)
            if message is not None:
                handle(message)

    def run(self, interval: float = 0.05) -> None:
        """Carry out instructions until the actuators are shut down."""
        while True:
            self.step()
            if not self._operating():
                print("Actuators are shut down.")
                break
            time.sleep(interval)
import random
import re

import pytest

from agridrone.actuators import (
    Actuators,
    Touchdown,
    fertiliser_dispenser,
    gear,
    motor_altitude,
    motor_gps,
    motor_obstacle,
    pesticide_dispenser,
    refill_or_land,
    water_dispenser,
)
from agridrone.bus import MessageBus
from agridrone.state import DroneState


@pytest.fixture
def state():
    return DroneState()


@pytest.fixture
def bus():
    return MessageBus()


def test_water_on_dispenses_and_reports(state, bus):
    remaining = water_dispenser(state, bus, "On water dispenser")
    assert remaining == 90
    assert state.water_dispenser_on is True
    assert state.water_tank_level == 90
    assert bus.try_receive("water_disp_mc") == "90"


def test_water_maintain_while_off_keeps_level(state, bus):
    remaining = water_dispenser(state, bus, "Maintain")
    assert remaining == state.water_tank_level == 100
    assert bus.try_receive("water_disp_mc") == "100"


def test_water_maintain_while_on_keeps_draining(state, bus):
    first = water_dispenser(state, bus, "On water dispenser")
    second = water_dispenser(state, bus, "Maintain")
    assert first - second == 10


def test_water_off_stops_without_draining(state, bus):
    water_dispenser(state, bus, "On water dispenser")
    level = state.water_tank_level
    remaining = water_dispenser(state, bus, "Off water dispenser")
    assert state.water_dispenser_on is False
    assert remaining == level


def test_fertiliser_and_pesticide_use_their_own_tanks(state, bus):
    fertiliser_dispenser(state, bus, "On fertiliser dispensing")
    pesticide_dispenser(state, bus, "On pesticide dispensing")
    assert state.fertiliser_dispenser_on and state.pesticide_dispenser_on
    assert state.water_tank_level == 100
    assert bus.try_receive("fert_disp_mc") == "90"
    assert bus.try_receive("pest_disp_mc") == "90"


def test_pesticide_off_after_on(state, bus):
    pesticide_dispenser(state, bus, "On pesticide dispensing")
    pesticide_dispenser(state, bus, "Off pesticide dispensing")
    assert state.pesticide_dispenser_on is False
    assert state.pesticide_tank_level == 90


def test_gear_retract_deploy_and_maintain(state):
    assert gear(state, "Retract gear") is True
    assert gear(state, "Maintain") is True
    assert gear(state, "Deploy gear") is False
    assert state.gear_up is False


def test_motor_gps_on_track():
    assert motor_gps("0", random.Random(1)) == "Remain"


def test_motor_gps_rolls_by_offset(capsys):
    assert motor_gps("-3", random.Random(1)) == "Roll left 3 degree"
    assert motor_gps("2", random.Random(1)) == "Roll right 2 degree"
    out = capsys.readouterr().out
    thrusts = [int(t) for t in re.findall(r"Thrust increased to (\d+)%", out)]
    assert len(thrusts) == 2
    assert all(81 <= t <= 100 for t in thrusts)


def test_motor_gps_unparsable_offset_gives_no_command():
    assert motor_gps("abc", random.Random(1)) is None


def test_motor_obstacle():
    rng = random.Random(7)
    commands = {motor_obstacle("Increase thrust to avoid obstacles", rng) for _ in range(50)}
    assert commands == {"Roll to left", "Roll to right"}
    assert motor_obstacle("Maintain thrust", rng) == "Remain"
    assert motor_obstacle("Unknown", rng) is None


@pytest.mark.parametrize(
    "instruction, command",
    [
        ("Increase thrust for more lift", "Lifting the drone"),
        ("Reduce thrust to lower", "Lowering the drone (altitude high)"),
        ("Maintain thrust", "Remain"),
        ("Reduce thrust for landing", "Lowering the drone (landing)"),
        ("Something else", None),
    ],
)
def test_motor_altitude(instruction, command):
    assert motor_altitude(instruction, random.Random(3)) == command


def test_motor_altitude_reduced_thrust_range(capsys):
    rng = random.Random(5)
    for _ in range(20):
        motor_altitude("Reduce thrust to lower", rng)
    thrusts = [int(t) for t in re.findall(r"Thrust reduced to (\d+)%", capsys.readouterr().out)]
    assert len(thrusts) == 20
    assert all(50 <= t <= 79 for t in thrusts)


def test_refill_when_landed_mid_task(state):
    state.water_tank_level = 0
    state.battery_level = 10
    state.back_home = True
    state.landing = True
    state.reached_max_altitude = True
    assert refill_or_land(state, "0") is Touchdown.REFILLED
    assert state.water_tank_level == state.battery_level == 100
    assert not (state.back_home or state.landing or state.reached_max_altitude)
    assert state.actuator_operating is True


def test_landing_after_task_shuts_down(state):
    state.task_ongoing = False
    assert refill_or_land(state, "0") is Touchdown.LANDED
    assert not state.sensor_operating
    assert not state.actuator_operating
    assert not state.main_control_operating


def test_airborne_does_nothing(state):
    state.water_tank_level = 20
    assert refill_or_land(state, "50") is None
    assert state.water_tank_level == 20


def test_actuators_step_dispatches_queues(state, bus):
    bus.send("On water dispenser", "soil_moist_act")
    bus.send("Retract gear", "altitude_gear_act")
    Actuators(state, bus, random.Random(0)).step()
    assert state.water_dispenser_on is True
    assert state.gear_up is True
    assert bus.try_receive("water_disp_mc") == "90"


def test_actuators_run_stops_after_final_landing(state, bus, capsys):
    state.task_ongoing = False
    bus.send("0", "altitude_refill_act")
    Actuators(state, bus, random.Random(0)).run(interval=0)
    assert state.actuator_operating is False
    assert "Actuators are shut down." in capsys.readouterr().out
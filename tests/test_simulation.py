import random

import pytest

from agridrone.actuators import Actuators
from agridrone.bus import MessageBus
from agridrone.control import MainControl
from agridrone.models import GPS, MtsCamera, Ultrasonic
from agridrone.simulation import Sensors, main, run_simulation
from agridrone.state import DroneState


def _stopped_state():
    return DroneState(
        sensor_operating=False,
        main_control_operating=False,
        actuator_operating=False,
    )


def test_step_publishes_every_reading_while_working():
    state = DroneState()
    bus = MessageBus()
    Sensors(state, bus, random.Random(1)).step()

    mts = MtsCamera.from_json(bus.try_receive("mts_cam"))
    assert 200 <= mts.soil_moist <= 400
    assert 20 <= int(bus.try_receive("thermal")) <= 39
    gps = GPS.from_json(bus.try_receive("gps"))
    assert gps.latitude == 101
    ultra = Ultrasonic.from_json(bus.try_receive("ultra_sensor"))
    assert ultra.altitude == 5
    assert bus.try_receive("batt") == str(state.battery_level)


def test_step_skips_camera_and_thermal_on_way_home():
    state = DroneState(back_home=True)
    bus = MessageBus()
    Sensors(state, bus, random.Random(2)).step()

    assert bus.try_receive("mts_cam") is None
    assert bus.try_receive("thermal") is None
    assert GPS.from_json(bus.try_receive("gps")).latitude == 100
    assert bus.try_receive("batt") == str(state.battery_level)


def test_step_without_task_sends_no_position():
    state = DroneState(task_ongoing=False)
    bus = MessageBus()
    Sensors(state, bus, random.Random(3)).step()

    assert bus.try_receive("gps") is None
    assert bus.try_receive("mts_cam") is None
    assert bus.try_receive("ultra_sensor") is not None and True


def test_run_stops_after_one_step_when_shut_down(capsys):
    state = _stopped_state()
    bus = MessageBus()
    Sensors(state, bus, random.Random(4)).run(interval=0)

    assert bus.try_receive("batt") == str(state.battery_level)
    assert bus.try_receive("batt") is None
    assert "Sensors are shut down." in capsys.readouterr().out


@pytest.mark.parametrize("seed", [0, 1, 2, 3, 4])
def test_single_threaded_mission_ends_with_landing(seed, capsys):
    state = DroneState()
    bus = MessageBus()
    rng = random.Random(seed)
    sensors = Sensors(state, bus, rng)
    control = MainControl(state, bus)
    actuators = Actuators(state, bus, rng)

    for _ in range(5000):
        sensors.step()
        control.process()
        actuators.step()
        if not state.actuator_operating:
            break

    assert state.task_ongoing is False
    assert state.sensor_operating is False
    assert state.main_control_operating is False
    assert state.actuator_operating is False
    assert "END OF SIMULATION" in capsys.readouterr().out


def test_run_simulation_returns_state_when_already_stopped(capsys):
    state = _stopped_state()
    bus = MessageBus()
    result = run_simulation(0, state, bus)

    assert result is state
    out = capsys.readouterr().out
    assert "Sensors are shut down." in out
    assert "Main Control is shut down." in out
    assert "Actuators are shut down." in out


def test_run_simulation_rejects_negative_interval():
    with pytest.raises(ValueError):
        run_simulation(-1, _stopped_state(), MessageBus())


def test_main_rejects_negative_interval():
    with pytest.raises(SystemExit) as excinfo:
        main(["--interval", "-1"])
    assert excinfo.value.code == 2


def test_main_rejects_non_numeric_interval():
    with pytest.raises(SystemExit) as excinfo:
        main(["--interval", "fast"])
    assert excinfo.value.code == 2
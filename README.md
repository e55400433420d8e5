# agridrone

This package simulates an agricultural drone that flies a preset path over a
field. The drone waters dry soil, spreads fertiliser where nutrients are low
and sprays pesticide where the ground runs hot. When its battery runs low or
a tank empties, it returns home to have the battery replaced and the tanks
refilled. When the mission is done, it lands and the simulation stops.

Three subsystems run at the same time, each in its own thread:

- **Sensors** (`agridrone.simulation.Sensors`, built from the classes in
  `agridrone.sensors`): `MultispectralCamera`, `ThermalSensor`, `GpsSensor`,
  `UltrasonicSensor` and `BatteryManagement`. Each tick, `monitor()`
  publishes the readings to named queues. The camera and the thermal sensor
  only take readings while the drone is working its task, not while it is
  flying home.
- **Main control** (`agridrone.control.MainControl`) reads those queues and
  the tank-level queues. It updates the shared mission flags and sends
  instructions such as `"On water dispenser"`, `"Retract gear"` or
  `"Reduce thrust for landing"` to the actuator queues.
- **Actuators** (`agridrone.actuators.Actuators`) carry out those
  instructions: the water, fertiliser and pesticide dispensers, the landing
  gear, the motors with their propellers, and the refill station. Each
  dispenser reports its tank level back to the main control.

All shared flags and levels live in one `agridrone.state.DroneState`. Use
the instance as a context manager to hold its lock. Messages travel as text
through an `agridrone.bus.MessageBus`, whose FIFO queues are addressed by
name. `MessageBus` has three methods:

- `send(message, queue)`
- `receive(queue, timeout)`, which raises `TimeoutError` when nothing
  arrives in time
- `try_receive(queue)`, which returns `None` when the queue is empty

## Installation

```
pip install .
```

## Running the simulation

```
agridrone
agridrone --interval 0.01
```

By default each subsystem runs one cycle per second; `--interval` sets the
number of seconds between cycles. The negative values are refused. Each
component prints its actions as it performs them. Once the drone has landed
after the mission, the output shows `END OF SIMULATION`, and each subsystem
then reports that it has shut down.

## Using it from Python

```python
from agridrone.state import DroneState
from agridrone.bus import MessageBus
from agridrone.simulation import run_simulation

state = run_simulation(0.01, DroneState(), MessageBus())  # one cycle every 10 ms
assert not state.task_ongoing
```

`run_simulation` returns the final shared state. If any subsystem raises an
exception, all three are shut down and the first error is raised again once
every thread has stopped.

You can also drive each subsystem one tick at a time:

```python
from agridrone.state import DroneState
from agridrone.bus import MessageBus
from agridrone.simulation import Sensors
from agridrone.control import MainControl
from agridrone.actuators import Actuators

state = DroneState()
bus = MessageBus()
sensors = Sensors(state, bus)
control = MainControl(state, bus)
actuators = Actuators(state, bus)

sensors.step()
control.process()
actuators.step()
```

The decision rules in `agridrone.control` are plain functions:

- `soil_moist_logic`, `soil_nutr_logic`, `thermal_logic`,
  `altitude_gear_logic` and `altitude_motor_logic` take the state and a
  reading. They return an instruction string.
- `obstacle_logic` takes only the obstacle distance.
- `gps_logic` updates the mission flags and returns the course correction:
  the path longitude minus the current longitude, as a string.
- `battery_logic` sends the drone home when the battery drops below 21%.
  `tank_level_logic(state, tank, level)` does the same when the given tank
  (`"water"`, `"fertiliser"` or `"pesticide"`) is empty. Both return nothing.

The actuator functions in `agridrone.actuators` can also be called directly:

- `water_dispenser`, `fertiliser_dispenser` and `pesticide_dispenser` return
  the remaining tank level.
- `gear` returns whether the gear is up.
- `motor_gps`, `motor_obstacle` and `motor_altitude` return the propeller
  command, or `None`.
- `refill_or_land` returns a `Touchdown` value when the altitude is `"0"`,
  and `None` otherwise.

The sensor readings are frozen dataclasses in `agridrone.models`: `MtsCamera`,
`Ultrasonic` and `GPS`. They convert to and from JSON with `to_json()` and
`from_json()`. `from_json()` raises `ValueError` when a field is missing or
has the wrong type.

## What it does not do

Everything runs inside one process. The message queues are in-memory and
are not connected to any external message broker. The readings come from
random generators, not from real sensors. No hardware is driven, and nothing
is stored once a run ends.

## Tests

```
pip install .[test]
pytest
```
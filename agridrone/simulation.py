"""Runs the sensors, the main control and the actuators together."""

from __future__ import annotations

import argparse
import random
import threading
import time
from collections.abc import Callable, Sequence

from agridrone.actuators import Actuators
from agridrone.bus import MessageBus
from agridrone.control import MainControl
from agridrone.sensors import (
    BatteryManagement,
    GpsSensor,
    MultispectralCamera,
    ThermalSensor,
    UltrasonicSensor,
    monitor,
)
from agridrone.state import DroneState

DEFAULT_INTERVAL = 1.0


class Sensors:
    """Takes readings from every sensor and publishes them on the bus."""

    def __init__(
        self,
        state: DroneState | None = None,
        bus: MessageBus | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.state = state if state is not None else DroneState()
        self.bus = bus if bus is not None else MessageBus()
        rng = rng if rng is not None else random.Random()
        self.camera = MultispectralCamera(rng)
        self.thermal = ThermalSensor(rng)
        self.gps = GpsSensor(rng)
        self.ultrasonic = UltrasonicSensor(rng)
        self.battery = BatteryManagement()

    def _spraying(self) -> bool:
        with self.state:
            return (
                not self.state.back_home
                and self.state.resume_operation
                and self.state.task_ongoing
            )

    def _operating(self) -> bool:
        with self.state:
            return self.state.sensor_operating

    def step(self) -> None:
        """Take one reading from each sensor and publish what was read.

        The camera and the thermal sensor only read while the drone is out
        working its task, not on the way home.
        """
        state = self.state
        if self._spraying():
            mts_data = self.camera.read()
            thermal = self.thermal.read()
        else:
            mts_data = None
            thermal = None
        gps = self.gps.read(state)
        ultrasonic = self.ultrasonic.read(state)
        battery = self.battery.read(state)
        monitor(self.bus, mts_data, thermal, gps, ultrasonic, battery)

    def run(self, interval: float = DEFAULT_INTERVAL) -> None:
        """Read and publish until the sensors are shut down."""
        while True:
            self.step()
            if not self._operating():
                print("Sensors are shut down.")
                break
            time.sleep(interval)


def run_simulation(
    interval: float = DEFAULT_INTERVAL,
    state: DroneState | None = None,
    bus: MessageBus | None = None,
) -> DroneState:
    """Run sensors, main control and actuators in threads until the drone lands.

    Returns the final shared state. If any subsystem fails, everything is
    shut down and the first error is raised once all threads have stopped.
    """
    if interval < 0:
        raise ValueError(f"interval must not be negative, got {interval!r}")
    state = state if state is not None else DroneState()
    bus = bus if bus is not None else MessageBus()

    errors: list[BaseException] = []
    errors_lock = threading.Lock()

    def guarded(target: Callable[[float], None]) -> Callable[[], None]:
        def body() -> None:
            try:
                target(interval)
            except BaseException as exc:  # noqa: BLE001 - reported after join
                with errors_lock:
                    errors.append(exc)
                state.shut_down()

        return body

    subsystems = (
        ("sensors", Sensors(state, bus).run),
        ("main-control", MainControl(state, bus).run),
        ("actuators", Actuators(state, bus).run),
    )
    threads = [
        threading.Thread(target=guarded(run), name=name, daemon=True)
        for name, run in subsystems
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    if errors:
        raise errors[0]
    return state


def _non_negative_float(text: str) -> float:
    try:
        value = float(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {text!r}") from None
    if value < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {text!r}")
    return value


def main(argv: Sequence[str] | None = None) -> int:
    """Command-line entry point: run the whole drone simulation."""
    parser = argparse.ArgumentParser(
        prog="agridrone",
        description="Simulate an agricultural spraying drone.",
    )
    parser.add_argument(
        "--interval",
        type=_non_negative_float,
        default=DEFAULT_INTERVAL,
        help="seconds between cycles of each subsystem (default: %(default)s)",
    )
    args = parser.parse_args(argv)
    run_simulation(args.interval)
    return 0
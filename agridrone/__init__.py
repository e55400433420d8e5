"""Agricultural drone simulation: sensors, main control and actuators over an in-process message bus."""

__version__ = "0.1.0"
__all__ = ["actuators", "bus", "control", "models", "sensors", "simulation", "state"]
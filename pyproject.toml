[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "agridrone"
version = "0.1.0"
description = "Simulation of an agricultural spraying drone: sensors, main control and actuators exchanging messages over in-process queues"
requires-python = ">=3.10"
dependencies = []
keywords = ["drone", "agriculture", "simulation", "sensors", "actuators", "message-queue"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
agridrone = "agridrone.simulation:main"

[tool.hatch.build.targets.wheel]
packages = ["agridrone"]

[tool.pytest.ini_options]
addopts = "-ra"

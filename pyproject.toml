[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pulseox"
version = "0.1.0"
description = "Pulse oximeter toolkit: MAX30102 heart-rate and SpO2 estimation, ESP8266 link handling and a TCP measurement receiver with patient history"
requires-python = ">=3.10"
dependencies = []
keywords = ["pulse oximeter", "spo2", "heart rate", "max30102", "esp8266", "ppg"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Healthcare Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: AsyncIO",
    "Topic :: Scientific/Engineering :: Medical Science Apps.",
]

[project.optional-dependencies]
test = ["pytest", "pytest-asyncio"]

[project.scripts]
pulseox-receiver = "pulseox.receiver:main"

[tool.hatch.build.targets.wheel]
packages = ["pulseox"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tdsscope"
version = "1.0.0"
description = "Waveform measurement, display layout, GPIB protocol helpers and WebSocket/HTTP building blocks for a TDS 520A oscilloscope viewer"
requires-python = ">=3.10"
dependencies = []
keywords = ["oscilloscope", "gpib", "tektronix", "websocket", "waveform"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Visualization",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tdsscope"]

[tool.pytest.ini_options]
addopts = "-ra"

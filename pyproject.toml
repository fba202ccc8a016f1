[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gbemu"
version = "0.1.0"
description = "Game Boy timer, interrupt, cartridge banking, real-time clock and save-state components"
requires-python = ">=3.10"
dependencies = []
keywords = ["game boy", "emulator", "mbc", "cartridge", "timer", "game genie"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Emulators",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["gbemu"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

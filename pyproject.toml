[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "blastlobby"
version = "0.1.0"
description = "Matchmaking lobby server, wire messages and pygame menu widgets for a bomb-dropping arena game"
requires-python = ">=3.10"
dependencies = [
    "pygame",
]
keywords = ["game", "matchmaking", "lobby", "multiplayer", "pygame"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Games/Entertainment",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
blastlobby-server = "blastlobby.server:main"

[tool.hatch.build.targets.wheel]
packages = ["blastlobby"]

[tool.pytest.ini_options]
addopts = "-ra"

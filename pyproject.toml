[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bevy_cli"
version = "0.1.0.dev0"
description = "Command-line tooling for Bevy projects: templates, running natively or in the browser, and linting"
requires-python = ">=3.11"
keywords = ["bevy", "cargo", "wasm", "game-development", "cli"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
]
dependencies = [
    "aiohttp",
    "requests",
    "semver",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[project.scripts]
bevy = "bevy_cli.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["bevy_cli"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"

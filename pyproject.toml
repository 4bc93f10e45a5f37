[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "travesim_adapters"
version = "0.1.0"
description = "Robot soccer simulator adapters: UDP transport, wire messages, state data structures and endpoint configuration"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "robot soccer",
    "simulation",
    "udp",
    "multicast",
    "vss",
    "referee",
    "adapter",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Interface Engine/Protocol Translator",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
travesim-adapters = "travesim_adapters.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["travesim_adapters"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true

[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "reactornet"
version = "1.5.26"
description = "Reactor-style networking building blocks: endpoints, channels, a selector-based poller, socket helpers, send-queue buffer nodes and a cached DNS resolver."
requires-python = ">=3.10"
dependencies = []
keywords = ["reactor", "tcp", "networking", "non-blocking", "poller", "dns"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["reactornet"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

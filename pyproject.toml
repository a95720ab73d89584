[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "seednet"
version = "0.1.0"
description = "Network addresses, wire serialization, name lookup and SOCKS connection helpers for a peer-to-peer DNS seeder"
requires-python = ">=3.10"
dependencies = []
keywords = ["p2p", "seeder", "dns", "socks", "serialization", "onion", "i2p", "base32"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: Name Service (DNS)",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["seednet"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

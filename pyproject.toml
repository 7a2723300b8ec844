[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "spongetcp"
version = "0.1.0"
description = "Building blocks for a user-space TCP: flow-controlled byte streams, stream reassembly, TCP/IPv4 headers, segments and segment adapters"
requires-python = ">=3.10"
dependencies = []
keywords = ["tcp", "ipv4", "networking", "reassembly", "byte-stream", "checksum"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
spongetcp-webget = "spongetcp.webget:main"

[tool.hatch.build.targets.wheel]
packages = ["spongetcp"]

[tool.pytest.ini_options]
addopts = "-ra"

[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sockchat"
version = "0.1.0"
description = "Small TCP and UDP chat tools: a multi-client relay, a duplex console chat, an acknowledging echo chat and one-shot senders and receivers."
requires-python = ">=3.10"
dependencies = []
keywords = ["chat", "socket", "tcp", "udp", "relay", "console"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Chat",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
sockchat-relay = "sockchat.relay:main"
sockchat-relay-client = "sockchat.relay_client:main"
sockchat-duplex-server = "sockchat.duplex:server_main"
sockchat-duplex-client = "sockchat.duplex:client_main"
sockchat-echo-server = "sockchat.echo:server_main"
sockchat-echo-client = "sockchat.echo:client_main"
sockchat-oneshot = "sockchat.oneshot:main"

[tool.hatch.build.targets.wheel]
packages = ["sockchat"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true

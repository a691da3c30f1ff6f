[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nyabot"
version = "0.1.0"
description = "A cat-girl group chat bot library: command dispatch, role-play chat memory and emoji reactions"
requires-python = ">=3.10"
dependencies = [
    "httpx",
]
keywords = ["chatbot", "group-chat", "openai", "commands", "role-play", "asyncio"]
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
    "Framework :: AsyncIO",
    "Topic :: Communications :: Chat",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[tool.hatch.build.targets.wheel]
packages = ["nyabot"]

[tool.hatch.build.targets.sdist]
include = ["nyabot", "tests", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"

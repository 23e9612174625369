[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "zbkit"
version = "0.1.0"
description = "Chat bot feature logic: emoji mixing, request events, epidemic lookups, repository and card search, fortunes, jokes, gacha draws and a song guessing game"
requires-python = ">=3.10"
keywords = ["chatbot", "emoji", "gacha", "fortune", "hearthstone", "music-quiz"]
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
    "Topic :: Communications :: Chat",
    "Topic :: Games/Entertainment",
]
dependencies = [
    "requests",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[tool.hatch.build.targets.wheel]
packages = ["zbkit"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "wiremix"
version = "0.7.0"
description = "PipeWire mixer state model: objects, events, commands and a render-ready view"
requires-python = ">=3.10"
keywords = ["mixer", "pipewire", "volume", "audio"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio :: Mixers",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["wiremix"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

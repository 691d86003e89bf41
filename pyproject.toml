[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "stackdump"
version = "0.1.0"
description = "Capture, dump, reload and pretty-print Python call stacks as compact binary address dumps."
requires-python = ">=3.10"
dependencies = []
keywords = ["stacktrace", "backtrace", "debugging", "crash", "dump", "addr2line"]
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
    "Programming Language :: Python :: Implementation :: CPython",
    "Topic :: Software Development :: Debuggers",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
stackdump-demo = "stackdump.recipes:main"

[tool.hatch.build.targets.wheel]
packages = ["stackdump"]

[tool.pytest.ini_options]
addopts = "-ra"

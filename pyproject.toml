[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "swifttools"
version = "0.1.0"
description = "Command-line utilities for field extraction, file finding and disk usage"
requires-python = ">=3.10"
dependencies = []
keywords = ["cut", "find", "du", "awk", "cli", "text", "filesystem"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
fcut = "swifttools.cut.main:main"
ffind = "swifttools.find.main:main"
fdu = "swifttools.du:main"

[tool.hatch.build.targets.wheel]
packages = ["swifttools"]

[tool.pytest.ini_options]
addopts = "-ra"

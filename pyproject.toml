[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "biblioteca"
version = "0.1.0"
description = "Small library management system backed by a single binary data file"
requires-python = ">=3.10"
dependencies = []
keywords = ["library", "books", "loans", "binary-file", "catalogue"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Natural Language :: Portuguese (Brazilian)",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
biblioteca = "biblioteca.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["biblioteca"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tinyshell"
version = "0.1.0"
description = "Core pieces of a small POSIX-flavoured shell: environment, word expansion and builtins"
requires-python = ">=3.10"
dependencies = []
keywords = ["shell", "expansion", "wildcard", "environment", "builtins"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Shells",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tinyshell"]

[tool.pytest.ini_options]
addopts = "-ra"

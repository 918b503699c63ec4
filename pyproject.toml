[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pubdatahub"
version = "0.1.0"
description = "Hacker News API client, configuration handling, a small JSON HTTP API and an interactive command parser."
requires-python = ">=3.10"
dependencies = []
keywords = ["hacker news", "api client", "rate limiter", "http api", "command parser", "public data"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Front-Ends",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["pubdatahub"]

[tool.hatch.build.targets.sdist]
include = ["pubdatahub", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"

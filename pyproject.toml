[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fsmsearch"
version = "0.1.0"
description = "Regex engines built on finite state machines, with trigram-indexed file search and an interactive terminal search view"
requires-python = ">=3.10"
dependencies = []
keywords = ["regex", "finite-state-machine", "nfa", "search", "trigram", "grep"]
classifiers = [
    "Development Status :: 3 - Alpha",
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
    "Topic :: Text Processing :: General",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
fsmsearch = "fsmsearch.app:main"
fsmsearch-nfa = "fsmsearch.nfa_cli:main"

[tool.hatch.build.targets.wheel]
packages = ["fsmsearch"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

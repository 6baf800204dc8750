[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cowbot"
version = "0.1.0"
description = "Chat bot building blocks: levelling and ranks, plus UC Merced campus lookups for courses, professors, reminders, dining, library and facility hours."
requires-python = ">=3.10"
keywords = ["chat", "bot", "ranking", "levels", "ucmerced", "courses", "reminders", "scraping"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Communications :: Chat",
]
dependencies = [
    "beautifulsoup4",
    "requests",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[tool.hatch.build.targets.wheel]
packages = ["cowbot"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true

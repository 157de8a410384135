[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mindhub"
version = "0.1.0"
description = "Course, session and step content from a headless CMS, with per-user notes, progress and timemaps."
requires-python = ">=3.10"
keywords = ["graphql", "cms", "courses", "progress", "notes", "jwt"]
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
    "Topic :: Internet :: WWW/HTTP :: Dynamic Content",
]
dependencies = [
    "pyjwt",
    "requests",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pyjwt",
]

[tool.hatch.build.targets.wheel]
packages = ["mindhub"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true

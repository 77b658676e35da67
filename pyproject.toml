[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "noda"
version = "0.1.0"
description = "Service layer for a to-do application: users, lists and tasks with validation, trimming and pagination."
requires-python = ">=3.10"
dependencies = [
    "bcrypt",
]
keywords = ["todo", "tasks", "lists", "scheduling", "service", "validation"]
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
    "Topic :: Office/Business :: Scheduling",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["noda"]

[tool.pytest.ini_options]
addopts = "-ra"

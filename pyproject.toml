[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "releaseplz"
version = "0.1.0"
description = "Release helpers for Cargo workspaces: next versions from conventional commits, requirement upgrades, changelog reading, registry lookup, configuration and git/cargo helpers"
requires-python = ">=3.11"
keywords = [
    "release",
    "semver",
    "changelog",
    "conventional-commits",
    "cargo",
    "git",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
    "Topic :: Software Development :: Version Control :: Git",
]
dependencies = []

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["releaseplz"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]

[tool.mypy]
python_version = "3.11"
warn_unused_ignores = true

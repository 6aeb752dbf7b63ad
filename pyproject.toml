[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "runxpkg"
version = "0.1.0"
description = "Install and run command-line tools straight from GitHub releases"
requires-python = ">=3.11"
keywords = ["github", "releases", "package-manager", "installer", "cli"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Software Distribution",
]
dependencies = [
    "python-slugify",
    "platformdirs",
    "requests",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[project.scripts]
runx = "runxpkg.runx_cli:main"
pkg = "runxpkg.pkg_cli:main"

[tool.hatch.build.targets.wheel]
packages = ["runxpkg"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"

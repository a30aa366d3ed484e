[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "vfsguard"
version = "0.1.0"
description = "A permission-enforcing wrapper with metadata caching for pluggable filesystem backends."
requires-python = ">=3.10"
dependencies = [
    "cachetools",
]
keywords = ["filesystem", "vfs", "posix", "permissions", "access-control", "sticky-bit"]
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
    "Topic :: System :: Filesystems",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["vfsguard"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "autodirkit"
version = "1.0.0"
description = "Concurrency helpers: per-name locks, a reusable worker-thread cache and monotonic time utilities."
requires-python = ">=3.10"
dependencies = []
keywords = ["threads", "locking", "worker-pool", "monotonic-clock", "named-locks"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Filesystems",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["autodirkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

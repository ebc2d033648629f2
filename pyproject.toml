[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "accutil"
version = "0.1.0"
description = "Option parsing, sysfs access, size parsing and bitmap helpers for accelerator configuration tools"
requires-python = ">=3.10"
dependencies = []
keywords = ["accelerator", "sysfs", "option-parsing", "bitmap", "idxd"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Hardware",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["accutil"]

[tool.pytest.ini_options]
addopts = "-ra"

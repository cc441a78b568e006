[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ctrspec"
version = "0.1.0"
description = "Turn container run, stop and top flags into validated configuration objects"
requires-python = ">=3.10"
dependencies = []
keywords = ["containers", "oci", "cgroups", "gpus", "seccomp", "capabilities", "ps"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["ctrspec"]

[tool.pytest.ini_options]
addopts = "-ra"

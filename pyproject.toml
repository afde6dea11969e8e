[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "userschedbench"
version = "1.0.0"
description = "Run commands under chosen Linux scheduling policies and benchmark a per-user scheduler"
requires-python = ">=3.10"
dependencies = []
keywords = ["scheduler", "benchmark", "sched_setscheduler", "linux", "SCHED_USER"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Benchmark",
    "Topic :: System :: Operating System Kernels :: Linux",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
chpol = "userschedbench.chpol:main"
userschedtest = "userschedbench.userschedtest:main"
userschedrun = "userschedbench.runner:main"

[tool.hatch.build.targets.wheel]
packages = ["userschedbench"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

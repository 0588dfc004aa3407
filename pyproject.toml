[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "clinicsvc"
version = "0.1.0"
description = "Domain logic for a clinic: patients, staff, tasks and appointment scheduling with in-memory repositories"
requires-python = ">=3.10"
dependencies = []
keywords = ["clinic", "appointments", "scheduling", "patients", "staff", "hospital"]
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
    "Topic :: Scientific/Engineering :: Medical Science Apps.",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["clinicsvc"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

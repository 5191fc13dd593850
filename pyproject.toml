[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "densemap"
version = "0.1.0"
description = "Building blocks for dense RGB-D mapping: configuration, frame logs, timing, threading helpers and volumetric maths."
requires-python = ">=3.10"
keywords = ["rgb-d", "slam", "tsdf", "depth", "mapping", "log-reader"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Image Processing",
]
dependencies = [
    "numpy",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["densemap"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

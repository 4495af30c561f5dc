[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "thcore"
version = "0.1.0"
description = "Typed reference-counted storages, reference BLAS, LAPACK routines and a Mersenne Twister generator"
requires-python = ">=3.10"
dependencies = [
    "numpy",
    "scipy",
]
keywords = ["storage", "blas", "lapack", "random", "mersenne-twister", "mmap", "numerics"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["thcore"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

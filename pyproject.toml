[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "penetra"
version = "0.1.0"
description = "Penetration depth of intersecting convex shapes by polytope expansion, plus a small text scanning helper"
requires-python = ">=3.10"
dependencies = ["numpy"]
keywords = ["collision detection", "penetration depth", "EPA", "convex", "geometry", "minkowski"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["penetra"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true

[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fnplot"
version = "0.1.0"
description = "Core model of a mathematical function plotter: values, equations, functions, plots, constants and editing helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["plotting", "functions", "equations", "mathematics", "differential equations", "calculator"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["fnplot"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sipkit"
version = "0.1.0"
description = "Supporting machinery for subgraph isomorphism solvers: restart schedules, nogood watches, solution verification, proof logging and result tabulation"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "subgraph isomorphism",
    "graph homomorphism",
    "constraint programming",
    "pseudo-boolean",
    "proof logging",
    "opb",
]
classifiers = [
    "Development Status :: 4 - Beta",
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

[project.scripts]
sipkit-plot-outputs = "sipkit.plot_outputs:main"

[tool.hatch.build.targets.wheel]
packages = ["sipkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true

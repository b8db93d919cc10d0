[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mandelzoom"
version = "0.3.4"
description = "Arbitrary-precision Mandelbrot and Julia set explorer and deep-zoom frame renderer"
requires-python = ">=3.10"
keywords = [
    "mandelbrot",
    "julia",
    "fractal",
    "deep zoom",
    "arbitrary precision",
    "animation",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics",
    "Topic :: Scientific/Engineering :: Mathematics",
]
dependencies = [
    "mpmath",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
mandelzoom-explorer = "mandelzoom.explorer:main"
mandelzoom-zoom = "mandelzoom.zoom:main"
mandelzoom-logo = "mandelzoom.logo:main"

[tool.hatch.build.targets.wheel]
packages = ["mandelzoom"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true

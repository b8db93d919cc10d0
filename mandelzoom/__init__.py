"""Arbitrary-precision Mandelbrot and Julia set rendering, deep zooms and C byte-array embedding."""

__version__ = "0.3.4"

__all__ = [
    "animation",
    "explorer",
    "logo",
    "palette",
    "precision",
    "sequence",
    "worklist",
    "zoom",
]
"""Progressive escape-time explorer for the Mandelbrot and Julia sets."""

from __future__ import annotations

import argparse
import random
import sys
from dataclasses import dataclass
from fractions import Fraction
from pathlib import Path

import mpmath
from PIL import Image

from .palette import BLACK, COLOR_MASK, Color, explorer_palette
from .precision import iterate, parse_real, precision_for
from .worklist import UpdateList

SCREEN_WIDTH = 160
SCREEN_HEIGHT = 120
BASE_ITERATIONS = 1
ITERATIONS_PER_PASS = 16
DEFAULT_PRECISION = 64
VIEW_FILE_BITS = 32 * 80
VIEW_FILE_DIGITS = 500
DISPLAY_DIGITS = 420
SEED_ODDS = 10000


def _rounded(value, bits: int):
    with mpmath.workprec(bits):
        return +mpmath.mpf(value)


def _fixed(value, digits: int, signed: bool = False) -> str:
    """Format an ``mpf`` exactly, rounded to ``digits`` decimals."""
    negative = value < 0
    man, exp = value.man_exp
    exact = Fraction(abs(int(man))) * Fraction(2) ** int(exp)
    scale = 10**digits
    scaled = round(exact * scale)
    whole, fraction = divmod(scaled, scale)
    text = f"{whole}.{fraction:0{digits}d}" if digits else str(whole)
    if negative:
        return "-" + text
    return ("+" + text) if signed else text


@dataclass(frozen=True)
class View:
    """A rectangle of the complex plane and the precision used for it."""

    from_re: mpmath.mpf
    from_im: mpmath.mpf
    to_re: mpmath.mpf
    to_im: mpmath.mpf
    precision: int = DEFAULT_PRECISION

    def center(self):
        """Return the centre as ``(re, im)``."""
        with mpmath.workprec(self.precision):
            return (
                (self.from_re + self.to_re) * 0.5,
                (self.from_im + self.to_im) * 0.5,
            )

    def span(self):
        """Return the width of the view along the real axis."""
        with mpmath.workprec(self.precision):
            return self.to_re - self.from_re

    def zoomed_out(self) -> "View":
        """Return a view twice as wide and high around the same centre."""
        with mpmath.workprec(self.precision):
            half_re = (self.from_re - self.to_re) / 2
            half_im = (self.from_im - self.to_im) / 2
            return View(
                self.from_re + half_re,
                self.from_im + half_im,
                self.to_re - half_re,
                self.to_im - half_im,
                self.precision,
            )

    def point_at(self, x: int, y: int, width: int, height: int):
        """Map a screen position to ``(re, im)``."""
        with mpmath.workprec(self.precision):
            return (
                self.from_re + (self.to_re - self.from_re) * x / width,
                self.from_im + (self.to_im - self.from_im) * y / height,
            )

    def select(self, x0: int, y0: int, x1: int, y1: int, width: int, height: int) -> "View":
        """Zoom into a screen rectangle, widened to a 4:3 shape."""
        if x0 == x1 or y0 == y1:
            raise ValueError("selection has no area")
        left, top, right, bottom = fit_selection(x0, y0, x1, y1)
        with mpmath.workprec(self.precision):
            span_re = self.to_re - self.from_re
            span_im = self.to_im - self.from_im
            from_re = self.from_re + span_re * left / width
            to_re = self.from_re + span_re * right / width
            from_im = self.from_im + span_im * top / height
            to_im = self.from_im + span_im * bottom / height
            bits = precision_for(to_re - from_re)
        return View(
            _rounded(from_re, bits),
            _rounded(from_im, bits),
            _rounded(to_re, bits),
            _rounded(to_im, bits),
            bits,
        )


def default_view(julia: bool = False) -> View:
    """Return the initial view for the Mandelbrot or the Julia set."""
    with mpmath.workprec(DEFAULT_PRECISION):
        if julia:
            return View(mpmath.mpf(-2.0), mpmath.mpf(-1.5), mpmath.mpf(2.0), mpmath.mpf(1.5))
        return View(mpmath.mpf(-2.2), mpmath.mpf(-1.65), mpmath.mpf(2.2), mpmath.mpf(1.65))


def fit_selection(x0: int, y0: int, x1: int, y1: int) -> tuple[int, int, int, int]:
    """Order a pixel rectangle and grow it to exactly 4:3.

    Returns ``(left, top, right, bottom)``.
    """
    left, right = sorted((x0, x1))
    top, bottom = sorted((y0, y1))
    if (right - left) * 0.75 < (bottom - top):
        bottom += 3 - (bottom - top) % 3
        left -= (bottom - top) // 3 * 4 // 2 - (right - left) // 2
        right = left + (bottom - top) // 3 * 4
    else:
        right += 4 - (right - left) % 4
        top -= (right - left) * 3 // 4 // 2 - (bottom - top) // 2
        bottom = top + (right - left) * 3 // 4
    return left, top, right, bottom


def load_view(path: str | Path) -> View:
    """Read a view stored as centre real part, centre imaginary part and width."""
    lines = Path(path).read_text(encoding="ascii").splitlines()
    if len(lines) < 3:
        raise ValueError(f"{path}: expected three lines")
    center_re, center_im, span = (parse_real(line, VIEW_FILE_BITS) for line in lines[:3])
    with mpmath.workprec(VIEW_FILE_BITS):
        half_re = span / 2
        half_im = half_re * 0.75
        corners = (
            center_re - half_re,
            center_im - half_im,
            center_re + half_re,
            center_im + half_im,
        )
    bits = precision_for(half_re)
    return View(*(_rounded(value, bits) for value in corners), precision=bits)


def save_view(view: View, path: str | Path) -> None:
    """Write ``view`` in the form read by :func:`load_view`."""
    center_re, center_im = view.center()
    values = (center_re, center_im, view.span())
    text = "".join(_fixed(value, VIEW_FILE_DIGITS) + "\n" for value in values)
    Path(path).write_text(text, encoding="ascii", newline="\n")


@dataclass(slots=True)
class _Pixel:
    z: mpmath.mpc
    iterations: int
    escaped: bool


class Explorer:
    """Renders a view coarsely, then refines the unresolved pixels pass by pass."""

    def __init__(
        self,
        view: View | None = None,
        width: int = SCREEN_WIDTH,
        height: int = SCREEN_HEIGHT,
        julia_c=None,
        rng: random.Random | None = None,
    ) -> None:
        if width < 1 or height < 1:
            raise ValueError("width and height must be positive")
        self.width = width
        self.height = height
        self._rng = rng if rng is not None else random.Random()
        self._palette = explorer_palette()
        self._worklist = UpdateList()
        self._pixels: list[_Pixel] = []
        self._colors: list[Color] = []
        self.deepest_escape = 0
        if view is None:
            view = default_view(julia_c is not None)
        self.restart(view, julia_c)

    def _color_for(self, pixel: _Pixel) -> Color:
        if pixel.escaped:
            return self._palette[pixel.iterations & COLOR_MASK]
        return BLACK

    def restart(self, view: View, julia_c=None) -> None:
        """Draw ``view`` from scratch and queue the pixels worth refining."""
        self.view = view
        self.julia_c = None if julia_c is None else mpmath.mpc(julia_c)
        self.deepest_escape = 0
        width, height = self.width, self.height
        pixels: list[_Pixel] = []
        with mpmath.workprec(view.precision):
            span_re = view.to_re - view.from_re
            span_im = view.to_im - view.from_im
            for y in range(height):
                im = view.from_im + span_im * (y / height)
                for x in range(width):
                    point = mpmath.mpc(view.from_re + span_re * (x / width), im)
                    if self.julia_c is None:
                        z, c = mpmath.mpc(0), point
                    else:
                        z, c = point, self.julia_c
                    z, steps, has_escaped = iterate(z, c, BASE_ITERATIONS)
                    pixels.append(_Pixel(z, steps, has_escaped))
        self._pixels = pixels
        self._colors = [self._color_for(pixel) for pixel in pixels]
        self._seed_worklist()

    def _seed_worklist(self) -> None:
        width, height = self.width, self.height
        pixels = self._pixels
        queued = [False] * (width * height)
        for y in range(height):
            for x in (0, width - 1):
                if not pixels[y * width + x].escaped:
                    queued[y * width + x] = True
        for x in range(width):
            for y in (0, height - 1):
                if not pixels[y * width + x].escaped:
                    queued[y * width + x] = True
        for y in range(1, height - 1):
            for x in range(1, width - 1):
                if pixels[y * width + x].escaped:
                    for nx, ny in ((x, y - 1), (x, y + 1), (x - 1, y), (x + 1, y)):
                        queued[ny * width + nx] = True
        self._worklist.clear()
        for index, pixel in enumerate(pixels):
            x, y = index % width, index // width
            if queued[index]:
                self._worklist.push(x, y)
            elif not pixel.escaped and self._rng.randrange(SEED_ODDS) == 0:
                self._worklist.push(x, y)
        cx, cy = width // 2, height // 2
        if not pixels[cy * width + cx].escaped:
            self._worklist.push(cx, cy)
        self._worklist.swap()

    def _add_point(self, x: int, y: int) -> None:
        if 0 <= x < self.width and 0 <= y < self.height:
            if not self._pixels[y * self.width + x].escaped:
                self._worklist.push(x, y)

    def refine(self) -> int:
        """Run one pass over the queued pixels; return how many escaped."""
        view = self.view
        width, height = self.width, self.height
        newly_escaped = 0
        with mpmath.workprec(view.precision):
            span_re = view.to_re - view.from_re
            span_im = view.to_im - view.from_im
            for x, y in self._worklist.drain():
                index = y * width + x
                pixel = self._pixels[index]
                if pixel.escaped:
                    continue
                if self.julia_c is None:
                    c = mpmath.mpc(
                        view.from_re + span_re * (x / width),
                        view.from_im + span_im * (y / height),
                    )
                else:
                    c = self.julia_c
                pixel.z, steps, has_escaped = iterate(pixel.z, c, ITERATIONS_PER_PASS)
                pixel.iterations += steps
                if has_escaped:
                    pixel.escaped = True
                    self.deepest_escape = max(self.deepest_escape, pixel.iterations)
                    for nx, ny in ((x, y - 1), (x, y + 1), (x - 1, y), (x + 1, y)):
                        self._add_point(nx, ny)
                    self._colors[index] = self._color_for(pixel)
                    newly_escaped += 1
                else:
                    self._add_point(x, y)
        self._worklist.swap()
        return newly_escaped

    def pending(self) -> int:
        """Return the number of queued entries for the next pass."""
        return len(self._worklist)

    def image(self) -> Image.Image:
        """Return the current rendering as an RGB image."""
        picture = Image.new("RGB", (self.width, self.height))
        picture.putdata(self._colors)
        return picture

    def save_image(self, path: str | Path) -> None:
        """Save the current rendering; the format follows the file suffix."""
        self.image().save(path)


def main(argv: list[str] | None = None) -> int:
    """Render a view, optionally zoomed or switched to a Julia set, to an image."""
    parser = argparse.ArgumentParser(description="Explore the Mandelbrot set.")
    parser.add_argument("--view", default="MandelbrotSet.ini", help="view file to start from")
    parser.add_argument(
        "--select",
        nargs=4,
        type=int,
        action="append",
        default=[],
        metavar=("X0", "Y0", "X1", "Y1"),
        help="zoom into a pixel rectangle (repeatable)",
    )
    parser.add_argument("--zoom-out", type=int, default=0, help="times to double the view")
    parser.add_argument("--julia", nargs=2, type=int, metavar=("X", "Y"),
                        help="switch to the Julia set of the point under this pixel")
    parser.add_argument("--size", nargs=2, type=int, default=[SCREEN_WIDTH, SCREEN_HEIGHT],
                        metavar=("WIDTH", "HEIGHT"))
    parser.add_argument("--passes", type=int, default=1024, help="maximum refinement passes")
    parser.add_argument("--output", default="m.bmp", help="image file to write")
    parser.add_argument("--save-view", help="file to store the final view in")
    parser.add_argument("--seed", type=int, help="seed for the random starting pixels")
    args = parser.parse_args(argv)

    width, height = args.size
    if width < 1 or height < 1:
        print("error: size must be positive", file=sys.stderr)
        return 2
    try:
        view = load_view(args.view)
    except FileNotFoundError:
        view = default_view(False)
    except (OSError, ValueError) as error:
        print(f"error: {error}", file=sys.stderr)
        return 1

    try:
        for x0, y0, x1, y1 in args.select:
            view = view.select(x0, y0, x1, y1, width, height)
    except ValueError as error:
        print(f"error: {error}", file=sys.stderr)
        return 2
    for _ in range(max(0, args.zoom_out)):
        view = view.zoomed_out()

    julia_c = None
    if args.julia is not None:
        re, im = view.point_at(args.julia[0], args.julia[1], width, height)
        julia_c = mpmath.mpc(re, im)
        # Switching to a Julia set starts from the wide Mandelbrot frame.
        view = default_view(False)

    explorer = Explorer(view, width, height, julia_c, random.Random(args.seed))
    for _ in range(max(0, args.passes)):
        if not explorer.pending():
            break
        explorer.refine()

    try:
        explorer.save_image(args.output)
        if args.save_view:
            save_view(view, args.save_view)
    except OSError as error:
        print(f"error: {error}", file=sys.stderr)
        return 1

    center_re, center_im = view.center()
    print(_fixed(center_re, DISPLAY_DIGITS, signed=True))
    print(_fixed(center_im, DISPLAY_DIGITS, signed=True))
    print(_fixed(view.span(), DISPLAY_DIGITS, signed=True))
    print(f"{view.precision:<6d} {explorer.deepest_escape:9d}")
    return 0
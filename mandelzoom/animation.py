"""Frame renderer for zoom animations.

Each frame starts from the border (and optionally the diagonals) of the
view and spreads inwards along iteration-count boundaries, raising the
iteration budget while pixels keep resolving.
"""

from __future__ import annotations

from dataclasses import dataclass

import mpmath
from PIL import Image

from .palette import BLACK, COLOR_MASK, Color, gradient
from .precision import escaped, iterate
from .worklist import UpdateList

MAXCOLOR = 0x20
ITERATIONS_PER_PASS = 256
FAST_FORWARD_BLOCK = 8
INITIAL_BUDGET = 0xFFFFFFF
UNSET_ESCAPE = 0x7FFFFFFF
SCREEN_WIDTH = 640
SCREEN_HEIGHT = 480
ANIMATION_HUES = (
    (240, 180),
    (300, 240),
    (0, 300),
    (60, 0),
    (120, 60),
    (180, 120),
    (270, 210),
    (330, 270),
    (30, 330),
    (90, 30),
    (150, 90),
    (210, 150),
    (270, 210),
    (45, 345),
    (225, 165),
    (315, 255),
)

# Pixels examined when a newly escaped pixel differs from a neighbour.
_SPREAD = (
    ((-1, 0), ((0, -1), (-1, -1), (0, 1), (-1, 1))),
    ((1, 0), ((0, -1), (1, -1), (0, 1), (1, 1))),
    ((0, -1), ((-1, -1), (-1, 0), (1, -1), (1, 0))),
    ((0, 1), ((-1, 1), (-1, 0), (1, 1), (1, 0))),
)


def animation_palette() -> list[Color]:
    """Return the 512-entry table of sixteen two-hue bands."""
    colors: list[Color] = []
    for hue_start, hue_end in ANIMATION_HUES:
        colors.extend(
            gradient(
                MAXCOLOR,
                hue_start,
                hue_end,
                saturation=0.8,
                lightness_span=0.8,
                lightness_base=0.1,
                squared=False,
            )
        )
    return colors


@dataclass(slots=True)
class _Pixel:
    z: mpmath.mpc | None = None
    c: mpmath.mpc | None = None
    iterations: int = 0
    min_iterations: int = 0
    escaped: bool = False
    queued: bool = False


class FrameRenderer:
    """Renders one view at a time into an in-memory picture.

    Subclasses may change when a frame stops early by overriding
    :meth:`_stop_after_progress` and :meth:`_after_stall`.
    """

    def __init__(
        self,
        width: int = SCREEN_WIDTH,
        height: int = SCREEN_HEIGHT,
        palette: list[Color] | None = None,
    ) -> None:
        if width < 1 or height < 1:
            raise ValueError("width and height must be positive")
        if palette is None:
            palette = animation_palette()
        if len(palette) <= COLOR_MASK:
            raise ValueError(f"palette needs at least {COLOR_MASK + 1} colours")
        self.width = width
        self.height = height
        self._palette = list(palette)
        self._worklist = UpdateList()
        self._pixels = [_Pixel() for _ in range(width * height)]
        self._colors: list[Color] = [BLACK] * (width * height)
        self.max_iterations = 0
        self._deepest = 0
        self._shallowest = UNSET_ESCAPE
        self._updates = 0

    def _stop_after_progress(self, half_span, shallowest: int) -> bool:
        limit = 500 if half_span > 0.005 else 10000
        return shallowest > limit

    def _after_stall(self, budget: int, max_iter: int, last_min: int) -> int | None:
        """Return the new pass budget, or ``None`` to end the frame."""
        if max_iter > 0x100 and budget != INITIAL_BUDGET:
            return 2
        return budget

    def _reset(self, cross: bool) -> None:
        width, height = self.width, self.height
        pixels = [_Pixel() for _ in range(width * height)]
        for y in range(height):
            pixels[y * width].queued = True
            pixels[y * width + width - 1].queued = True
        for x in range(width):
            pixels[x].queued = True
            pixels[(height - 1) * width + x].queued = True
        if cross:
            for x in range(width):
                row = x * height // width
                pixels[row * width + x].queued = True
                pixels[(height - row - 1) * width + x].queued = True
        self._pixels = pixels
        self._colors = [BLACK] * (width * height)
        self._worklist.clear()
        for index, pixel in enumerate(pixels):
            if pixel.queued:
                self._worklist.push(index % width, index // width)
        self._worklist.swap()

    def _add_point(self, x: int, y: int, hint: int | None = None) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            return
        pixel = self._pixels[y * self.width + x]
        if pixel.escaped or pixel.queued:
            return
        pixel.queued = True
        if hint is not None:
            if hint > 64:
                hint -= 16
            pixel.min_iterations = hint
        self._worklist.push(x, y)

    def _advance(self, pixel: _Pixel, max_iter: int) -> int:
        pixel.queued = False
        if pixel.iterations < pixel.min_iterations:
            step = min(pixel.min_iterations, FAST_FORWARD_BLOCK)
            remaining = pixel.min_iterations - step
            saved = pixel.z
            while step > 2:
                z = saved
                for _ in range(step):
                    z = z * z + pixel.c
                if escaped(z):
                    break
                pixel.iterations += step
                saved = z
                step = min(remaining >> 1, FAST_FORWARD_BLOCK)
                remaining -= step
            pixel.z = saved
            pixel.min_iterations = 0
        if pixel.iterations > (max_iter << 1):
            return pixel.iterations
        limit = max(ITERATIONS_PER_PASS, max_iter - pixel.iterations)
        pixel.z, steps, has_escaped = iterate(pixel.z, pixel.c, limit)
        if has_escaped:
            pixel.escaped = True
            total = pixel.iterations + steps
            self._deepest = max(self._deepest, total)
            self._shallowest = min(self._shallowest, total)
        pixel.iterations += steps
        return pixel.iterations

    def _pass(self, from_re, from_im, span_re, span_im, max_iter: int) -> None:
        width, height = self.width, self.height
        pixels = self._pixels
        for x, y in self._worklist.drain():
            pixel = pixels[y * width + x]
            if pixel.iterations == 0 and not pixel.escaped:
                pixel.z = mpmath.mpc(0)
                pixel.c = mpmath.mpc(
                    from_re + span_re * (x / width),
                    from_im + span_im * (y / height),
                )
            if pixel.escaped:
                continue
            count = self._advance(pixel, max_iter)
            if not pixel.escaped:
                self._add_point(x, y)
                continue
            for (dx, dy), targets in _SPREAD:
                nx, ny = x + dx, y + dy
                if not (0 <= nx < width and 0 <= ny < height):
                    continue
                neighbour = pixels[ny * width + nx]
                if neighbour.escaped and neighbour.iterations != count:
                    for tx, ty in targets:
                        self._add_point(x + tx, y + ty, count)
            self._updates += 1
            self._colors[y * width + x] = self._palette[count & COLOR_MASK]
        self._worklist.swap()

    def render(self, from_re, from_im, to_re, to_im, cross: bool = True, precision: int = 64) -> int:
        """Render the rectangle at ``precision`` bits; return how many pixels escaped.

        Gaps left inside uniform regions are filled by :meth:`fill_gaps`.
        """
        if precision < 1:
            raise ValueError("precision must be positive")
        with mpmath.workprec(precision):
            from_re, from_im = mpmath.mpf(from_re), mpmath.mpf(from_im)
            to_re, to_im = mpmath.mpf(to_re), mpmath.mpf(to_im)
            span_re = to_re - from_re
            span_im = to_im - from_im
            half_span = span_re / 2
            self._reset(cross)
            self._deepest = 16
            budget = INITIAL_BUDGET
            max_iter = 16 if precision <= 64 else 2048
            last_min = 0
            passes = 0
            while len(self._worklist) and passes < budget:
                self._updates = 0
                self._shallowest = UNSET_ESCAPE
                self._pass(from_re, from_im, span_re, span_im, max_iter)
                if self._updates > 0:
                    if budget == INITIAL_BUDGET:
                        budget = 16
                    passes = 0
                    if self._stop_after_progress(half_span, self._shallowest):
                        break
                    shallow = max(self._shallowest, last_min)
                    if self._deepest >= max_iter:
                        max_iter = self._deepest << 1
                    if max_iter > shallow << 1:
                        max_iter = shallow << 1
                    last_min = shallow
                else:
                    new_budget = self._after_stall(budget, max_iter, last_min)
                    if new_budget is None:
                        break
                    budget = new_budget
                    if max_iter <= 0x10000:
                        max_iter <<= 1
                    elif max_iter < 0x1000000:
                        max_iter += max_iter >> 1
                    passes += 1
            self.max_iterations = max_iter
        return sum(1 for pixel in self._pixels if pixel.escaped)

    def fill_gaps(self) -> int:
        """Fill untouched interior pixels whose upper and left neighbours agree.

        Returns the number of pixels filled.
        """
        width = self.width
        pixels = self._pixels
        filled = 0
        for y in range(1, self.height - 1):
            for x in range(1, width - 1):
                pixel = pixels[y * width + x]
                if pixel.iterations != 0:
                    continue
                up = pixels[(y - 1) * width + x]
                left = pixels[y * width + x - 1]
                if up.escaped and left.escaped and left.iterations == up.iterations:
                    pixel.iterations = up.iterations
                    pixel.escaped = True
                    self._colors[y * width + x] = self._palette[pixel.iterations & COLOR_MASK]
                    filled += 1
        return filled

    def iterations(self, x: int, y: int) -> int | None:
        """Return the escape count at a pixel, or ``None`` if it has not escaped."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height}")
        pixel = self._pixels[y * self.width + x]
        return pixel.iterations if pixel.escaped else None

    def image(self) -> Image.Image:
        """Return the current frame as an RGB image."""
        picture = Image.new("RGB", (self.width, self.height))
        picture.putdata(self._colors)
        return picture
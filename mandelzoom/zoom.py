"""Render a zoom animation as a numbered series of snapshot images."""

from __future__ import annotations

import argparse
import re
import sys
from dataclasses import dataclass
from pathlib import Path

from .animation import INITIAL_BUDGET, SCREEN_HEIGHT, SCREEN_WIDTH, FrameRenderer
from .precision import parse_real
from .sequence import (
    CENTER_IM,
    CENTER_RE,
    MIN_SPAN,
    SPAN_FACTOR,
    START_SPAN,
    WORK_BITS,
    claim_snapshot,
    frame_views,
)

SETTINGS_FILE = "MandelbrotSetAni.ini"
LARGE_WIDTH = SCREEN_WIDTH * 2
LARGE_HEIGHT = SCREEN_HEIGHT * 2
LARGE_START_SPAN = "2.0"
LARGE_FACTOR = 0.5
CROSS_THRESHOLD = 0.005

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


@dataclass(frozen=True)
class ZoomSettings:
    """Parameters of one zoom animation.

    With ``large`` set, frames stop once the iteration budget outgrows twice
    the shallowest escape seen, and diagonals are seeded only at low precision.
    """

    center_re: str = CENTER_RE
    center_im: str = CENTER_IM
    min_span: str = MIN_SPAN
    start_span: str = START_SPAN
    factor: float = SPAN_FACTOR
    first: int = -1
    width: int = SCREEN_WIDTH
    height: int = SCREEN_HEIGHT
    large: bool = False


class _LargeFrameRenderer(FrameRenderer):
    """Frame renderer that ends a frame once the budget has outrun the escapes."""

    def _stop_after_progress(self, half_span, shallowest: int) -> bool:
        return False

    def _after_stall(self, budget: int, max_iter: int, last_min: int) -> int | None:
        if budget != INITIAL_BUDGET and max_iter > last_min * 2:
            return None
        return budget


def load_settings(path: str | Path) -> ZoomSettings:
    """Read the centre, the smallest half-width and the first frame from a file.

    Lines hold the centre's real part, its imaginary part, the smallest
    half-width, an unused line and the number of the first frame to render.
    The result uses the large-frame layout.
    """
    lines = Path(path).read_text(encoding="ascii").splitlines()
    if len(lines) < 3:
        raise ValueError(f"{path}: expected at least three lines")
    center_re, center_im, min_span = (line.strip() for line in lines[:3])
    for text in (center_re, center_im, min_span):
        parse_real(text, WORK_BITS)
    first = -1
    if len(lines) >= 5:
        match = _LEADING_INT.match(lines[4])
        if match:
            first = int(match.group(1))
    return ZoomSettings(
        center_re=center_re,
        center_im=center_im,
        min_span=min_span,
        start_span=LARGE_START_SPAN,
        factor=LARGE_FACTOR,
        first=first,
        width=LARGE_WIDTH,
        height=LARGE_HEIGHT,
        large=True,
    )


def run(settings: ZoomSettings, directory: str | Path = ".") -> list[Path]:
    """Render every frame whose snapshot can be claimed; return the files written."""
    renderer_class = _LargeFrameRenderer if settings.large else FrameRenderer
    renderer = renderer_class(settings.width, settings.height)
    written: list[Path] = []
    for frame in frame_views(
        settings.center_re,
        settings.center_im,
        settings.start_span,
        settings.min_span,
        settings.factor,
    ):
        path = claim_snapshot(directory, frame.index, settings.first)
        if path is None:
            continue
        if settings.large:
            cross = frame.precision <= 64
        else:
            cross = frame.half_span > CROSS_THRESHOLD
        renderer.render(
            frame.from_re,
            frame.from_im,
            frame.to_re,
            frame.to_im,
            cross=cross,
            precision=frame.precision,
        )
        renderer.fill_gaps()
        renderer.image().save(path, format="BMP")
        written.append(path)
    return written


def main(argv: list[str] | None = None) -> int:
    """Command-line entry point."""
    parser = argparse.ArgumentParser(description="Render a Mandelbrot zoom as snapshots.")
    parser.add_argument("--ini", help=f"settings file such as {SETTINGS_FILE}")
    parser.add_argument("--directory", default=".", help="where snapshots are written")
    parser.add_argument("--size", nargs=2, type=int, metavar=("WIDTH", "HEIGHT"))
    args = parser.parse_args(argv)

    settings = ZoomSettings()
    if args.ini is not None:
        try:
            settings = load_settings(args.ini)
        except (OSError, ValueError) as error:
            print(f"error: {error}", file=sys.stderr)
            return 1
    if args.size is not None:
        width, height = args.size
        if width < 1 or height < 1:
            print("error: size must be positive", file=sys.stderr)
            return 2
        settings = ZoomSettings(
            settings.center_re,
            settings.center_im,
            settings.min_span,
            settings.start_span,
            settings.factor,
            settings.first,
            width,
            height,
            settings.large,
        )
    try:
        written = run(settings, args.directory)
    except (OSError, ValueError) as error:
        print(f"error: {error}", file=sys.stderr)
        return 1
    for path in written:
        print(path)
    return 0
"""Sequence of shrinking views and snapshot file bookkeeping for zoom animations."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

import mpmath

from .precision import parse_real, precision_for

WORK_BITS = 2048
CENTER_RE = "-0.768331231741422458314381560804"
CENTER_IM = "-0.107632864930921566605138748951"
START_SPAN = "8.0"
MIN_SPAN = "0.00000000000002"
SPAN_FACTOR = 0.97857206208770013450916112581344
ASPECT = 0.75


@dataclass(frozen=True)
class FrameView:
    """One frame of a zoom: its number, centre, half-width, corners and precision."""

    index: int
    center_re: mpmath.mpf
    center_im: mpmath.mpf
    half_span: mpmath.mpf
    from_re: mpmath.mpf
    from_im: mpmath.mpf
    to_re: mpmath.mpf
    to_im: mpmath.mpf
    precision: int


def _to_mpf(value):
    if isinstance(value, str):
        return parse_real(value, WORK_BITS)
    with mpmath.workprec(WORK_BITS):
        return mpmath.mpf(value)


def _rounded(value, bits: int):
    with mpmath.workprec(bits):
        return +value


def frame_views(
    center_re=CENTER_RE,
    center_im=CENTER_IM,
    start_span=START_SPAN,
    min_span=MIN_SPAN,
    factor=SPAN_FACTOR,
) -> Iterator[FrameView]:
    """Yield views around a centre whose half-width shrinks by ``factor`` each frame.

    Frames continue while the half-width stays above ``min_span``.
    """
    center_re = _to_mpf(center_re)
    center_im = _to_mpf(center_im)
    start = _to_mpf(start_span)
    minimum = _to_mpf(min_span)
    ratio = _to_mpf(factor)
    if not 0 < ratio < 1:
        raise ValueError(f"factor must lie strictly between 0 and 1, got {factor!r}")
    if not minimum > 0:
        raise ValueError("min_span must be positive")
    return _generate(center_re, center_im, start, minimum, ratio)


def _generate(center_re, center_im, half, minimum, ratio) -> Iterator[FrameView]:
    index = 0
    while half > minimum:
        bits = precision_for(half)
        with mpmath.workprec(WORK_BITS):
            half_im = half * ASPECT
            corners = (
                center_re - half,
                center_im - half_im,
                center_re + half,
                center_im + half_im,
            )
        yield FrameView(
            index,
            center_re,
            center_im,
            half,
            *(_rounded(value, bits) for value in corners),
            precision=bits,
        )
        with mpmath.workprec(WORK_BITS):
            half = half * ratio
        index += 1


def snapshot_name(index: int) -> str:
    """Return the file name used for frame ``index``."""
    return f"snap{index:06d}.bmp"


def claim_snapshot(directory: str | Path, index: int, first: int = -1) -> Path | None:
    """Reserve the snapshot file for frame ``index`` by creating it empty.

    Returns its path, or ``None`` when the frame comes before ``first``, the
    file already exists or it cannot be created.
    """
    if index < first:
        return None
    path = Path(directory) / snapshot_name(index)
    try:
        with open(path, "x"):
            pass
    except OSError:
        return None
    return path
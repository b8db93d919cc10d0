"""Arbitrary-precision helpers for the quadratic escape-time iteration."""

from __future__ import annotations

import mpmath

ESCAPE_RADIUS_SQUARED = 4.0


def precision_for(span) -> int:
    """Return the number of mantissa bits to use for a view of width ``span``.

    The result grows with the number of halvings needed to bring ``span``
    up to one, in steps of 32 bits, with some headroom.
    """
    value = span if isinstance(span, mpmath.mpf) else mpmath.mpf(span)
    if mpmath.isnan(value) or mpmath.isinf(value) or value <= 0:
        raise ValueError(f"span must be a positive finite number, got {span!r}")
    if value >= 1:
        halvings = 0
    else:
        _, exponent = mpmath.frexp(value)
        halvings = 1 - int(exponent)
    words = halvings // 32 + 1
    words = words + words // 16 + 1
    return words * 32


def escaped(z) -> bool:
    """Tell whether ``z`` has left the disc of radius two."""
    real = float(z.real)
    imag = float(z.imag)
    return real * real + imag * imag > ESCAPE_RADIUS_SQUARED


def iterate(z, c, limit: int):
    """Apply ``z -> z*z + c`` up to ``limit`` times.

    Returns ``(z, steps, has_escaped)``; ``steps`` includes the step on
    which the orbit escaped.
    """
    if limit < 0:
        raise ValueError("limit must not be negative")
    for step in range(1, limit + 1):
        z = z * z + c
        if escaped(z):
            return z, step, True
    return z, limit, False


def parse_real(text: str, bits: int):
    """Parse a decimal number into an ``mpf`` holding ``bits`` bits of mantissa."""
    if bits < 1:
        raise ValueError("bits must be positive")
    stripped = text.strip()
    if not stripped:
        raise ValueError("empty number")
    with mpmath.workprec(bits):
        return mpmath.mpf(stripped)
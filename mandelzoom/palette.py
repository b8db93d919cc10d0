"""Colour tables for escape-time rendering.

Colours are ``(red, green, blue)`` tuples with channels in ``0..255``.
"""

from __future__ import annotations

import colorsys

Color = tuple[int, int, int]

BLOCK_LENGTH = 0x40
COLOR_MASK = 0x200 - 1
EXPLORER_HUES = (240, 30, 330, 180, 270, 0, 300, 150)
BLACK: Color = (0, 0, 0)


def _channel(value: float) -> int:
    return min(255, max(0, int(round(value * 255))))


def _check_unit(name: str, value: float) -> None:
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{name} must lie in [0, 1], got {value!r}")


def hsl_to_rgb(hue: float, saturation: float, lightness: float) -> Color:
    """Convert a hue in degrees plus saturation and lightness in [0, 1] to RGB."""
    _check_unit("saturation", saturation)
    _check_unit("lightness", lightness)
    red, green, blue = colorsys.hls_to_rgb((hue % 360.0) / 360.0, lightness, saturation)
    return (_channel(red), _channel(green), _channel(blue))


def square_channels(color: Color) -> Color:
    """Darken a colour by squaring each normalised channel."""
    for channel in color:
        if not 0 <= channel <= 255:
            raise ValueError(f"channel out of range: {channel!r}")
    red, green, blue = (int((channel / 255.0) ** 2 * 255) for channel in color)
    return (red, green, blue)


def gradient(
    length: int,
    hue_start: float,
    hue_end: float,
    saturation: float = 0.9,
    lightness_span: float = 0.7,
    lightness_base: float = 0.15,
    squared: bool = True,
) -> list[Color]:
    """Build a band that brightens from both ends towards the middle.

    The first half uses ``hue_start``, the mirrored second half ``hue_end``.
    For an odd length the middle entry is black.
    """
    if length < 0:
        raise ValueError("length must not be negative")
    colors: list[Color] = [BLACK] * length
    for step in range(length // 2):
        lightness = step * 2.0 / length * lightness_span + lightness_base
        head = hsl_to_rgb(hue_start, saturation, lightness)
        tail = hsl_to_rgb(hue_end, saturation, lightness)
        if squared:
            head, tail = square_channels(head), square_channels(tail)
        colors[step] = head
        colors[length - 1 - step] = tail
    return colors


def explorer_palette() -> list[Color]:
    """Return the 512-entry table used by the interactive explorer."""
    colors: list[Color] = []
    for hue in EXPLORER_HUES:
        colors.extend(gradient(BLOCK_LENGTH, hue, hue))
    return colors
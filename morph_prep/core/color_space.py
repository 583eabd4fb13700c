#!/usr/bin/env python3
"""
Color space conversion between 8-bit sRGB and CIE Lab (D50)
"""

import math
from typing import Any, NamedTuple

# Lab nonlinearity constants (epsilon = 6/29)
T1 = 6 / 29
T2 = 3 * T1 * T1
T3 = T1 * T1 * T1


class RGB(NamedTuple):
    """8-bit sRGB color"""
    r: int
    g: int
    b: int

    def to_dict(self):
        return {'r': self.r, 'g': self.g, 'b': self.b}


class Lab(NamedTuple):
    """CIE Lab color"""
    l: float
    a: float
    b: float

    def to_dict(self):
        return {'l': self.l, 'a': self.a, 'b': self.b}


def as_rgb(color: Any) -> RGB:
    """Coerce a dict with r/g/b keys or a 3-sequence to RGB"""
    if isinstance(color, RGB):
        return color
    if isinstance(color, dict):
        return RGB(color['r'], color['g'], color['b'])
    r, g, b = color
    return RGB(r, g, b)


def as_lab(color: Any) -> Lab:
    """Coerce a dict with l/a/b keys or a 3-sequence to Lab"""
    if isinstance(color, Lab):
        return color
    if isinstance(color, dict):
        return Lab(color['l'], color['a'], color['b'])
    l, a, b = color
    return Lab(l, a, b)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up; NaN and infinities become 0"""
    if not math.isfinite(value):
        return 0
    return int(math.floor(value + 0.5))


def rgb2lrgb(channel: float) -> float:
    """Undo sRGB gamma encoding for one 0-255 channel"""
    x = channel / 255
    return x / 12.92 if x <= 0.04045 else ((x + 0.055) / 1.055) ** 2.4


def lrgb2rgb(channel: float) -> int:
    """Apply sRGB gamma encoding and quantize to an 8-bit channel"""
    if channel <= 0.0031308:
        encoded = 12.92 * channel
    else:
        encoded = 1.055 * channel ** (1 / 2.4) - 0.055
    return round_half_up(255 * encoded)


def xyz2lab(t: float) -> float:
    return t ** (1 / 3) if t > T3 else t / T2 + 4 / 29


def lab2xyz(t: float) -> float:
    return t * t * t if t > T1 else T2 * (t - 4 / 29)


def rgb_to_lab(color: Any) -> Lab:
    """
    Convert an sRGB color to Lab

    Args:
        color: RGB tuple, dict with r/g/b keys or 3-sequence of 0-255 values

    Returns:
        Lab color
    """
    color = as_rgb(color)
    r = rgb2lrgb(color.r)
    g = rgb2lrgb(color.g)
    b = rgb2lrgb(color.b)
    y = xyz2lab(0.2225045 * r + 0.7168786 * g + 0.0606169 * b)

    # Neutral greys map straight onto the white point
    if r == g and g == b:
        x = z = y
    else:
        x = xyz2lab((0.4360747 * r + 0.3850649 * g + 0.1430804 * b) / 0.96422)
        z = xyz2lab((0.0139322 * r + 0.0971045 * g + 0.7141733 * b) / 0.82521)

    return Lab(
        l=116 * y - 16,
        a=500 * (x - y),
        b=200 * (y - z),
    )


def lab_to_rgb(color: Any) -> RGB:
    """
    Convert a Lab color back to 8-bit sRGB

    Channels are rounded half up and NaN results collapse to 0. Values are
    not clamped to [0, 255], so out-of-gamut Lab input yields out-of-range
    channels.

    Args:
        color: Lab tuple, dict with l/a/b keys or 3-sequence

    Returns:
        RGB color
    """
    color = as_lab(color)
    base_y = (color.l + 16) / 116
    x = 0.96422 * lab2xyz(base_y + color.a / 500)
    y = lab2xyz(base_y)
    z = 0.82521 * lab2xyz(base_y - color.b / 200)

    return RGB(
        r=lrgb2rgb(3.1338561 * x - 1.6168667 * y - 0.4906146 * z),
        g=lrgb2rgb(-0.9787684 * x + 1.9161415 * y + 0.033454 * z),
        b=lrgb2rgb(0.0719453 * x - 0.2289914 * y + 1.4052427 * z),
    )


def hsl_to_rgb(h: float, s: float, l: float):
    """
    Convert HSL (all components in [0, 1]) to unquantized RGB on a 0-255 scale
    """
    if s == 0:
        r = g = b = l  # achromatic
    else:
        def hue2rgb(p, q, t):
            if t < 0:
                t += 1
            if t > 1:
                t -= 1
            if t < 1 / 6:
                return p + (q - p) * 6 * t
            if t < 1 / 2:
                return q
            if t < 2 / 3:
                return p + (q - p) * (2 / 3 - t) * 6
            return p

        q = l * (1 + s) if l < 0.5 else l + s - l * s
        p = 2 * l - q
        r = hue2rgb(p, q, h + 1 / 3)
        g = hue2rgb(p, q, h)
        b = hue2rgb(p, q, h - 1 / 3)

    return r * 255, g * 255, b * 255


def polar_to_hsl(radius: float, angle: float, max_radius: float):
    """Map a color-wheel polar coordinate to HSL with fixed saturation"""
    return angle, 0.5, radius / max_radius


def polar_to_lab(radius: float, angle: float, max_radius: float) -> Lab:
    """Map a color-wheel polar coordinate directly onto the Lab a/b plane"""
    return Lab(
        l=100 * radius / max_radius,
        a=128 * math.cos(angle),
        b=128 * math.sin(angle),
    )

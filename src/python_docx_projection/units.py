"""
Unit conversions between user-facing measures and OOXML storage units.

OOXML stores most layout lengths in twips (1/20 pt), run font sizes in
half-points, line spacing in 240ths of a line, border widths in eighths of
a point, and drawing extents in EMUs (914400 per inch).
"""

import math

EMU_PER_INCH = 914400
PIXELS_PER_INCH = 96
TWIPS_PER_POINT = 20
LINE_SPACING_UNIT = 240


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero (2.5 -> 3, -2.5 -> -3)."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def points_to_twips(points: float) -> int:
    """Convert points to twips, rounding to the nearest twip."""
    return round_half_away(points * TWIPS_PER_POINT)


def twips_to_points(twips: int) -> float:
    """Convert twips back to points."""
    return twips / TWIPS_PER_POINT


def points_to_half_points(points: float) -> int:
    """Convert a font size in points to half-points (the w:sz unit)."""
    return round_half_away(points * 2)


def half_points_to_points(half_points: int) -> float:
    """Convert a w:sz half-point value back to points."""
    return half_points / 2


def points_to_eighths(points: float) -> int:
    """Convert a border width in points to eighths of a point (the w:sz unit for borders)."""
    return round_half_away(points * 8)


def line_spacing_to_ooxml(multiplier: float) -> int:
    """Convert a line-spacing multiplier (1.0 = single) to OOXML units."""
    return round_half_away(multiplier * LINE_SPACING_UNIT)


def ooxml_to_line_spacing(value: int) -> float:
    """Convert an OOXML line-spacing value back to a multiplier."""
    return value / LINE_SPACING_UNIT


def pixels_to_emu(pixels: int) -> int:
    """Convert pixels to EMUs at 96 DPI.

    The result is truncated toward zero; non-positive input yields 0.

    Example:
        >>> pixels_to_emu(96)
        914400
    """
    if pixels <= 0:
        return 0
    return int(pixels) * EMU_PER_INCH // PIXELS_PER_INCH


def emu_to_pixels(emu: int) -> int:
    """Convert EMUs back to whole pixels at 96 DPI."""
    if emu <= 0:
        return 0
    return emu * PIXELS_PER_INCH // EMU_PER_INCH


def fit_to_width(width: int, height: int, max_width: int) -> tuple[int, int]:
    """Scale a pixel size down to ``max_width`` preserving the aspect ratio.

    No scaling happens when ``max_width`` is not positive or the width
    already fits. The scaled height is floored.

    Args:
        width: Native width in pixels
        height: Native height in pixels
        max_width: Maximum width in pixels (<= 0 disables the limit)

    Returns:
        Tuple of (width, height) in pixels

    Example:
        >>> fit_to_width(400, 200, 100)
        (100, 50)
    """
    if max_width > 0 and width > max_width:
        return max_width, math.floor(height * max_width / width)
    return width, height

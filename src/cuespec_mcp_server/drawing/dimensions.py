"""Dimension parsing and unit conversion for the drawing core.

Dimension text comes straight from hand-filled forms: fractions ("3/8"),
mixed numbers ("1 1/2"), decimals ("0.375"), and metric values with a unit
suffix ("9.5mm", "2.54cm"). Geometry always works in inches.

Conversion factors:
    - 1 in = 25.4 mm
    - 1 in = 2.54 cm

Nothing here raises: unparsable or absent text degrades to zero.
"""

import math
import re
from fractions import Fraction
from typing import Any, List, Optional, Tuple

from ..models.machining import Dimension, DimensionUnit


MM_PER_INCH = 25.4
CM_PER_INCH = 2.54

# Sixteenth-inch snap tolerance for display
FRACTION_TOLERANCE = 0.001

SIXTEENTHS: List[Tuple[float, str]] = [
    (n / 16, str(Fraction(n, 16))) for n in range(1, 16)
]

_METRIC_SUFFIXES: Tuple[Tuple[str, DimensionUnit], ...] = (
    ("mm", DimensionUnit.MILLIMETERS),
    ("cm", DimensionUnit.CENTIMETERS),
)
# Longest first so "inches" is not cut down to "inch" + "es"
_INCH_MARKERS: Tuple[str, ...] = ("inches", "inch", "in", '"')

_LEADING_NUMBER = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_MIXED_NUMBER = re.compile(r"^(\d+)(?:\s+|-)(\d+)\s*/\s*(\d+)$")


def _clean(value: float) -> float:
    if not math.isfinite(value) or value < 0:
        return 0.0
    return value


def _strict_float(text: str) -> Optional[float]:
    try:
        value = float(text.strip())
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def parse_value(text: Any) -> float:
    """Parse numeric dimension text to a float.

    Args:
        text: Fraction ("3/8"), mixed number ("1 1/2" or "1-1/2"),
            decimal ("0.375", "0.5 thru") or a number

    Returns:
        Parsed value, or 0.0 if the text cannot be parsed, is negative,
        or is a fraction with a zero denominator
    """
    if isinstance(text, bool):
        return 0.0
    if isinstance(text, (int, float)):
        return _clean(float(text))
    if not isinstance(text, str):
        return 0.0

    s = text.strip()
    if not s:
        return 0.0

    mixed = _MIXED_NUMBER.match(s)
    if mixed:
        whole, numerator, denominator = (int(g) for g in mixed.groups())
        if denominator == 0:
            return 0.0
        return whole + numerator / denominator

    if "/" in s:
        parts = s.split("/")
        if len(parts) != 2:
            return 0.0
        numerator = _strict_float(parts[0])
        denominator = _strict_float(parts[1])
        if numerator is None or denominator is None or denominator == 0:
            return 0.0
        return _clean(numerator / denominator)

    match = _LEADING_NUMBER.match(s)
    if not match:
        return 0.0
    return _clean(float(match.group()))


def parse_dimension(
    text: Any,
    default_unit: DimensionUnit = DimensionUnit.INCHES,
) -> Dimension:
    """Parse dimension text with an optional unit suffix.

    Args:
        text: Dimension text or number. Numbers are taken as inches.
        default_unit: Unit applied when the text carries no metric suffix

    Returns:
        Dimension with a non-negative value
    """
    if isinstance(text, (int, float)) and not isinstance(text, bool):
        return Dimension(
            value=parse_value(text),
            unit=DimensionUnit.INCHES,
            original_text=str(text),
        )
    if not isinstance(text, str):
        return Dimension()

    original = text.strip()
    lowered = original.lower()

    for suffix, unit in _METRIC_SUFFIXES:
        if lowered.endswith(suffix):
            return Dimension(
                value=parse_value(lowered[: -len(suffix)]),
                unit=unit,
                original_text=original,
            )

    unit = DimensionUnit(default_unit)
    for marker in _INCH_MARKERS:
        if lowered.endswith(marker):
            lowered = lowered[: -len(marker)]
            unit = DimensionUnit.INCHES
            break

    return Dimension(value=parse_value(lowered), unit=unit, original_text=original)


def convert_to_inches(dimension: Dimension) -> float:
    """Convert a parsed dimension to inches.

    Args:
        dimension: Parsed dimension

    Returns:
        Value in inches
    """
    if dimension.unit == DimensionUnit.MILLIMETERS:
        return dimension.value / MM_PER_INCH
    if dimension.unit == DimensionUnit.CENTIMETERS:
        return dimension.value / CM_PER_INCH
    return dimension.value


def to_inches(text: Any, default_unit: DimensionUnit = DimensionUnit.INCHES) -> float:
    """Parse text and convert it to inches in one step."""
    return convert_to_inches(parse_dimension(text, default_unit))


def format_dimension(dimension: Dimension) -> str:
    """Format a dimension for display.

    Inch values snap to the nearest sixteenth when within 0.001 in
    (e.g. '3/8"', '1 1/2"'), otherwise three decimals ('0.401"').
    Metric values keep their unit with one decimal ('9.5mm').
    """
    if dimension.unit == DimensionUnit.INCHES:
        whole = math.floor(dimension.value)
        fractional = dimension.value - whole
        for decimal, label in SIXTEENTHS:
            if abs(decimal - fractional) < FRACTION_TOLERANCE:
                return f'{whole} {label}"' if whole > 0 else f'{label}"'
        return f'{dimension.value:.3f}"'

    return f"{dimension.value:.1f}{dimension.unit.value}"

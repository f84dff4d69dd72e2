"""
Numeric hardening helpers.

Every score the engine emits passes through these helpers, so non-finite
values, wrong types and out-of-range inputs are handled in one place.
"""

import math
import numbers
from typing import Any


def is_finite_number(value: Any) -> bool:
    """True for finite real numbers. Booleans and numeric strings are rejected."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return math.isfinite(float(value))


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def round1(value: float) -> float:
    """
    Round to one decimal place, halves rounding up.
    
    Python's round() uses banker's rounding, so round(0.25, 1) == 0.2 while
    round1(0.25) == 0.3.
    """
    return math.floor(float(value) * 10.0 + 0.5) / 10.0

"""
Classes and functions that provide general utility.
"""
import re

from decimal import Decimal, DecimalException
from numbers import Real
from typing import TypeVar

from .classes.base import MeasureFraction

__all__ = [
    "clamp",
    "parse_decimal",
    "parse_int_list",
    "measure_duration",
    "check_tempo",
]

T = TypeVar("T", int, float, Real, Decimal)

DECIMAL_REGEX = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)")

SECONDS_PER_WHOLE_NOTE_AT_1BPM = 240
"""Length in seconds of a 4/4 measure at 1 beat per minute."""


def clamp(value: T, low_bound: T | None = None, high_bound: T | None = None) -> T:
    """
    Clamp a value to a range.

    If a bound is set to `None`, then the value will not be clamped on that side.

    :param value: The value to clamp.
    :param low_bound: The lower value to clamp to. If `None`, the low side is unbounded.
    :param high_bound: The higher value to clamp to. If `None`, the high side is unbounded.
    :returns: The clamped value.
    """
    if low_bound is not None and high_bound is not None and low_bound > high_bound:
        raise ValueError("low bound cannot be larger than high bound")
    if low_bound is not None and value < low_bound:
        return low_bound
    if high_bound is not None and value > high_bound:
        return high_bound
    return value


def parse_decimal(s: str) -> Decimal:
    """
    Parse a decimal number as written in a chart.

    Only plain decimal notation is accepted: no exponents, digit separators or special values.

    :raises ValueError: if the string is not a decimal number.
    """
    s = s.strip()
    if DECIMAL_REGEX.fullmatch(s) is None:
        raise ValueError(f"invalid number (got {s!r})")
    return Decimal(s)


def parse_int_list(s: str) -> list[int]:
    """Parse a comma-separated list of integers, such as the value of a ``BALLOON`` header."""
    return [int(part) for part in s.split(",") if part.strip()]


def measure_duration(bpm: Decimal, measure: MeasureFraction) -> Decimal:
    """
    Calculate the length of a measure in seconds.

    tl;dr: 60 (sec/min) / bpm (beat/min) * 4 (beats/whole) * measure (whole)

    :param bpm: The prevailing tempo.
    :param measure: The prevailing measure length.
    :returns: The duration of a full measure.
    :raises ValueError: if the tempo is not positive, or so extreme that the duration cannot be represented.
    """
    if bpm <= 0:
        raise ValueError(f"bpm must be positive (got {bpm})")
    fraction = measure.as_fraction()
    try:
        return Decimal(SECONDS_PER_WHOLE_NOTE_AT_1BPM * fraction.numerator) / (bpm * fraction.denominator)
    except DecimalException as e:
        raise ValueError(f"bpm out of range (got {bpm})") from e


def check_tempo(bpm: Decimal) -> Decimal:
    """
    Check that a tempo can be used for timing.

    :returns: The tempo, unchanged.
    :raises ValueError: if a 4/4 measure at this tempo has no representable duration.
    """
    measure_duration(bpm, MeasureFraction())
    return bpm

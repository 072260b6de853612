"""Rounding helpers for monetary amounts"""

import math


def round_half_up(value: float) -> int:
    """Round to the nearest whole unit; .5 goes up rather than to even"""
    return int(math.floor(value + 0.5))


def round_cents(value: float) -> float:
    return math.floor(value * 100 + 0.5) / 100

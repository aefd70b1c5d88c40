"""
Numeric ranges used by every relation.

A Range is a predicate over one number plus a short human-readable
description.  The description ends up in violation details as ``expected``
so reports say ``"[0, 16]"`` rather than repeating the check.

    from uilint.layout.ranges import between, gte

    between(0, 16)(10)     # True
    gte(0).desc            # ">= 0"
"""
from __future__ import annotations

from typing import Callable


class Range:
    """Callable numeric predicate with a description."""

    __slots__ = ("_test", "desc")

    def __init__(self, test: Callable[[float], bool], desc: str):
        self._test = test
        self.desc  = desc

    def __call__(self, value: float) -> bool:
        return bool(self._test(value))

    def __repr__(self):
        return f"Range({self.desc})"


def _fmt(n: float) -> str:
    # 16.0 reads better as 16 in reports
    if isinstance(n, float) and n.is_integer():
        return str(int(n))
    return str(n)


def eq(target: float) -> Range:
    return Range(lambda v: v == target, f"== {_fmt(target)}")


def gt(target: float) -> Range:
    return Range(lambda v: v > target, f"> {_fmt(target)}")


def gte(target: float) -> Range:
    return Range(lambda v: v >= target, f">= {_fmt(target)}")


def lt(target: float) -> Range:
    return Range(lambda v: v < target, f"< {_fmt(target)}")


def lte(target: float) -> Range:
    return Range(lambda v: v <= target, f"<= {_fmt(target)}")


def between(lo: float, hi: float) -> Range:
    """Inclusive on both ends."""
    return Range(lambda v: lo <= v <= hi, f"[{_fmt(lo)}, {_fmt(hi)}]")


def approx(expected: float, tolerance: float) -> Range:
    """Absolute tolerance: |v - expected| <= tolerance."""
    return Range(
        lambda v: abs(v - expected) <= tolerance,
        f"~= {_fmt(expected)} (±{_fmt(tolerance)})",
    )


def approx_relative(expected: float, tolerance: float) -> Range:
    """
    Relative tolerance against the larger magnitude of value and expected.

    ``approx_relative(100, 0.05)`` accepts 95.24 .. 105.  When both sides
    are zero the range only accepts an exact match.

    Raises ValueError for a negative tolerance.
    """
    if tolerance < 0:
        raise ValueError(f"approx_relative tolerance must be >= 0, got {tolerance}")

    def _test(v: float) -> bool:
        delta   = abs(v - expected)
        max_mag = max(abs(v), abs(expected))
        if max_mag == 0:
            return delta == 0
        return delta <= tolerance * max_mag

    return Range(_test, f"~= {_fmt(expected)} (±{_fmt(round(tolerance * 100, 6))}%)")


def any_range() -> Range:
    return Range(lambda v: True, "any")

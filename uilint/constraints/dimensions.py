"""
uilint.constraints.dimensions — sizes and proportions.

  width_in(e, between(200, 400))
  height_in(e, lte(60))
  width_matches(e, ref, tolerance=0.05)        relative, via approx_relative
  height_matches(e, ref, ratio=between(0.45, 0.55))
  ratio(a, b, expected, tolerance)              plain numbers, e.g. measured
                                                inside a must_ref factory
"""
from __future__ import annotations

from uilint.layout.constraint import Constraint, Violation, evaluate_range, resolve_elem
from uilint.layout.ranges import Range, approx_relative


def _size_in(dimension: str, e, rng: Range, name):
    def factory(rt):
        el    = resolve_elem(rt, e)
        cname = name or f"{dimension}_in({el.name})"

        def check():
            value = getattr(el, dimension)
            v = evaluate_range(
                rng, value, cname,
                f"{el.name} {dimension}={_num(value)} is out of range", {"value": value},
            )
            return [v] if v else []

        return Constraint(cname, check)
    return factory


def width_in(e, rng: Range, name: "str | None" = None):
    return _size_in("width", e, rng, name)


def height_in(e, rng: Range, name: "str | None" = None):
    return _size_in("height", e, rng, name)


def _num(n: float) -> str:
    return str(int(n)) if float(n).is_integer() else str(n)


# ── Matching another element ──────────────────────────────────────────────────

def _dimension_matches(dimension, element, reference, tolerance, ratio_range, name):
    if tolerance is None and ratio_range is None:
        raise ValueError(f"{dimension}_matches() requires either tolerance or ratio range")
    if tolerance is not None:
        approx_relative(0, tolerance)  # rejects a negative tolerance up front

    def factory(rt):
        el    = resolve_elem(rt, element)
        ref   = resolve_elem(rt, reference)
        cname = name or f"{dimension}_matches({el.name},{ref.name})"

        def check():
            violations = []
            value  = getattr(el, dimension)
            target = getattr(ref, dimension)

            if tolerance is not None and not approx_relative(target, tolerance)(value):
                violations.append(Violation(
                    f"{cname}.tolerance", f"{dimension} mismatch within tolerance",
                    {"value": value, "target": target, "tolerance": tolerance},
                ))

            if ratio_range is not None:
                if target == 0:
                    if value != 0:
                        violations.append(Violation(
                            f"{cname}.ratio", f"{dimension} ratio denominator is zero",
                            {"value": value, "target": target},
                        ))
                else:
                    ratio_value = value / target
                    v = evaluate_range(
                        ratio_range, ratio_value, f"{cname}.ratio",
                        f"{dimension} ratio is out of range", {"ratio": ratio_value},
                    )
                    if v:
                        violations.append(v)
            return violations

        return Constraint(cname, check)
    return factory


def width_matches(element, reference, *, tolerance: "float | None" = None,
                  ratio: "Range | None" = None, name: "str | None" = None):
    """
    element's width compared with reference's width.

    Args:
        tolerance: relative tolerance (0.05 = within 5% of the larger width)
        ratio:     Range over element.width / reference.width
    """
    return _dimension_matches("width", element, reference, tolerance, ratio, name)


def height_matches(element, reference, *, tolerance: "float | None" = None,
                   ratio: "Range | None" = None, name: "str | None" = None):
    """Same as width_matches() on heights."""
    return _dimension_matches("height", element, reference, tolerance, ratio, name)


# ── Ratio of two numbers ──────────────────────────────────────────────────────

def ratio(a: float, b: float, expected: float, tolerance: float, name: "str | None" = None):
    """|a / b - expected| <= tolerance.  A zero denominator is a violation."""
    cname = name or "ratio"

    def check():
        if b == 0:
            return [Violation(
                cname, "Ratio denominator is zero",
                {"a": a, "b": b, "expected": expected, "tolerance": tolerance},
            )]
        actual = a / b
        if abs(actual - expected) <= tolerance:
            return []
        return [Violation(
            cname, "Ratio is outside tolerance",
            {"actual": actual, "expected": expected, "tolerance": tolerance},
        )]

    return lambda rt: Constraint(cname, check)

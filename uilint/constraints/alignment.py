"""
uilint.constraints.alignment — groups sharing an axis.

Every check compares each member against the *first* member of the group
and reports ``name[i]`` for each member beyond tolerance (px).  Groups of
zero or one element always pass.

  aligned_horizontally(g, tol)          center_y
  aligned_vertically(g, tol)            center_x
  aligned_horizontally_top / _bottom    top / bottom edge
  aligned_vertically_left / _right      left / right edge
  aligned_horizontally_edges            top and bottom together
  aligned_vertically_edges              left and right together
"""
from __future__ import annotations

from uilint.layout.constraint import Constraint, Violation, resolve_group


def _align_by(elems, extract, tolerance: float, cname: str, message: str):
    def factory(rt):
        group = resolve_group(rt, elems)

        def check():
            if len(group) <= 1:
                return []
            base = extract(group[0])
            violations = []
            for i, elem in enumerate(group):
                delta = abs(extract(elem) - base)
                if delta > tolerance:
                    violations.append(Violation(
                        f"{cname}[{i}]", message.format(elem=elem.name),
                        {"delta": delta, "tolerance": tolerance},
                    ))
            return violations

        return Constraint(cname, check)
    return factory


def _align_both(elems, first: str, second: str, tolerance: float, cname: str):
    def factory(rt):
        group = resolve_group(rt, elems)

        def check():
            if len(group) <= 1:
                return []
            base_a = getattr(group[0], first)
            base_b = getattr(group[0], second)
            violations = []
            for i, elem in enumerate(group):
                delta_a = abs(getattr(elem, first) - base_a)
                delta_b = abs(getattr(elem, second) - base_b)
                if delta_a > tolerance or delta_b > tolerance:
                    violations.append(Violation(
                        f"{cname}[{i}]", f"{elem.name} edges are misaligned",
                        {f"{first}_delta": delta_a, f"{second}_delta": delta_b, "tolerance": tolerance},
                    ))
            return violations

        return Constraint(cname, check)
    return factory


def aligned_horizontally(elems, tolerance: float, name: "str | None" = None):
    """Members share a horizontal center line."""
    return _align_by(elems, lambda e: e.center_y, tolerance,
                     name or "aligned_horizontally", "{elem} is misaligned")


def aligned_vertically(elems, tolerance: float, name: "str | None" = None):
    """Members share a vertical center line."""
    return _align_by(elems, lambda e: e.center_x, tolerance,
                     name or "aligned_vertically", "{elem} is misaligned")


def aligned_horizontally_top(elems, tolerance: float, name: "str | None" = None):
    return _align_by(elems, lambda e: e.top, tolerance,
                     name or "aligned_horizontally_top", "{elem} top edge is misaligned")


def aligned_horizontally_bottom(elems, tolerance: float, name: "str | None" = None):
    return _align_by(elems, lambda e: e.bottom, tolerance,
                     name or "aligned_horizontally_bottom", "{elem} bottom edge is misaligned")


def aligned_vertically_left(elems, tolerance: float, name: "str | None" = None):
    return _align_by(elems, lambda e: e.left, tolerance,
                     name or "aligned_vertically_left", "{elem} left edge is misaligned")


def aligned_vertically_right(elems, tolerance: float, name: "str | None" = None):
    return _align_by(elems, lambda e: e.right, tolerance,
                     name or "aligned_vertically_right", "{elem} right edge is misaligned")


def aligned_horizontally_edges(elems, tolerance: float, name: "str | None" = None):
    """Top and bottom edges both line up."""
    return _align_both(elems, "top", "bottom", tolerance, name or "aligned_horizontally_edges")


def aligned_vertically_edges(elems, tolerance: float, name: "str | None" = None):
    """Left and right edges both line up."""
    return _align_both(elems, "left", "right", tolerance, name or "aligned_vertically_edges")

"""
uilint.constraints.positions — relative placement of two elements.

Every relation measures one signed gap between fixed edges and tests it
against a Range.  A negative gap means the elements overlap on that axis,
so any range whose lower bound is >= 0 rejects it.

  below(a, b, r)     a.top    - b.bottom
  above(a, b, r)     b.top    - a.bottom
  left_of(a, b, r)   b.left   - a.right
  right_of(a, b, r)  a.left   - b.right

Edge-wise relations:

  near(a, b, top=..., left=...)     gaps per requested side; overlap is its
                                    own violation, distinct from "not near"
  inside(a, b)                      all four edge gaps >= 0
  inside(a, b, left=between(-4, 0)) only the listed edges
  on(a, b, horizontal=("left", "right", r))
  centered(a, b, h=approx(0, 1))
"""
from __future__ import annotations

from uilint.layout.constraint import Constraint, Violation, evaluate_range, resolve_elem
from uilint.layout.ranges import Range, gte


HORIZONTAL_EDGES = ("left", "right")
VERTICAL_EDGES   = ("top", "bottom")


def _gap_relation(kind: str, verb: str, gap, a, b, rng: Range, name):
    def factory(rt):
        el_a = resolve_elem(rt, a)
        el_b = resolve_elem(rt, b)
        cname = name or f"{kind}({el_a.name},{el_b.name})"

        def check():
            diff = gap(el_a, el_b)
            v = evaluate_range(
                rng, diff, cname,
                f"{el_a.name} is not {verb} {el_b.name} within expected range",
                {"diff": diff},
            )
            return [v] if v else []

        return Constraint(cname, check)
    return factory


def below(a, b, rng: Range, name: "str | None" = None):
    """a sits below b: gap = a.top - b.bottom."""
    return _gap_relation("below", "below", lambda x, y: x.top - y.bottom, a, b, rng, name)


def above(a, b, rng: Range, name: "str | None" = None):
    """a sits above b: gap = b.top - a.bottom."""
    return _gap_relation("above", "above", lambda x, y: y.top - x.bottom, a, b, rng, name)


def left_of(a, b, rng: Range, name: "str | None" = None):
    """a sits left of b: gap = b.left - a.right."""
    return _gap_relation("left_of", "left of", lambda x, y: y.left - x.right, a, b, rng, name)


def right_of(a, b, rng: Range, name: "str | None" = None):
    """a sits right of b: gap = a.left - b.right."""
    return _gap_relation("right_of", "right of", lambda x, y: x.left - y.right, a, b, rng, name)


# ── near ──────────────────────────────────────────────────────────────────────

def near(
    a,
    b,
    *,
    left: "Range | None" = None,
    right: "Range | None" = None,
    top: "Range | None" = None,
    bottom: "Range | None" = None,
    name: "str | None" = None,
):
    """
    a is close to b on each requested side.

    Args:
        left:   gap a.left - b.right   (a sits to the right of b)
        right:  gap b.left - a.right   (a sits to the left of b)
        top:    gap a.top - b.bottom   (a sits below b)
        bottom: gap b.top - a.bottom   (a sits above b)

    Raises ValueError when no side is given.
    """
    if left is None and right is None and top is None and bottom is None:
        raise ValueError("near() requires at least one direction")

    sides = (
        ("left",   left,   lambda x, y: x.left - y.right),
        ("right",  right,  lambda x, y: y.left - x.right),
        ("top",    top,    lambda x, y: x.top - y.bottom),
        ("bottom", bottom, lambda x, y: y.top - x.bottom),
    )

    def factory(rt):
        el_a = resolve_elem(rt, a)
        el_b = resolve_elem(rt, b)
        cname = name or f"near({el_a.name},{el_b.name})"

        def check():
            violations = []
            for side, rng, gap in sides:
                if rng is None:
                    continue
                diff  = gap(el_a, el_b)
                label = f"{cname}.{side}"
                if diff < 0:
                    violations.append(Violation(
                        label, f"{el_a.name} overlaps {el_b.name} on {side} side", {"diff": diff},
                    ))
                    continue
                v = evaluate_range(
                    rng, diff, label,
                    f"{el_a.name} is not near {el_b.name} on {side} side", {"diff": diff},
                )
                if v:
                    violations.append(v)
            return violations

        return Constraint(cname, check)
    return factory


# ── inside ────────────────────────────────────────────────────────────────────

def inside(
    a,
    b,
    *,
    top: "Range | None" = None,
    right: "Range | None" = None,
    bottom: "Range | None" = None,
    left: "Range | None" = None,
    name: "str | None" = None,
):
    """
    a lies within b.

    With no edges, all four edge gaps must be >= 0.  Otherwise only the
    given edges are checked, each against its own range; negative ranges
    allow deliberate bleed.
    """
    if top is None and right is None and bottom is None and left is None:
        left = right = top = bottom = gte(0)

    edges = (
        ("left",   left,   lambda x, y: x.left - y.left),
        ("right",  right,  lambda x, y: y.right - x.right),
        ("top",    top,    lambda x, y: x.top - y.top),
        ("bottom", bottom, lambda x, y: y.bottom - x.bottom),
    )

    def factory(rt):
        el_a = resolve_elem(rt, a)
        el_b = resolve_elem(rt, b)
        cname = name or f"inside({el_a.name},{el_b.name})"

        def check():
            violations = []
            for edge, rng, gap in edges:
                if rng is None:
                    continue
                diff = gap(el_a, el_b)
                v = evaluate_range(
                    rng, diff, f"{cname}.{edge}",
                    f"{el_a.name} {edge} edge is not inside {el_b.name}", {"diff": diff},
                )
                if v:
                    violations.append(v)
            return violations

        return Constraint(cname, check)
    return factory


# ── on ────────────────────────────────────────────────────────────────────────

def on(
    a,
    b,
    *,
    horizontal: "tuple[str, str, Range] | None" = None,
    vertical: "tuple[str, str, Range] | None" = None,
    name: "str | None" = None,
):
    """
    Edge-to-edge placement of a relative to b.

    Each axis is ``(element_edge, reference_edge, range)`` and measures
    ``reference_edge(b) - element_edge(a)``.  Horizontal edges are
    left/right, vertical edges are top/bottom.

        # a's left edge 8..16px right of b's left edge
        on(a, b, horizontal=("left", "left", between(-16, -8)))
    """
    if horizontal is None and vertical is None:
        raise ValueError("on() requires horizontal and/or vertical axis configuration")
    if horizontal is not None:
        _check_axis(horizontal, HORIZONTAL_EDGES, "Horizontal axis must reference left/right edges")
    if vertical is not None:
        _check_axis(vertical, VERTICAL_EDGES, "Vertical axis must reference top/bottom edges")

    def factory(rt):
        el_a = resolve_elem(rt, a)
        el_b = resolve_elem(rt, b)
        cname = name or f"on({el_a.name},{el_b.name})"

        def check():
            violations = []
            for label, axis in (("horizontal", horizontal), ("vertical", vertical)):
                if axis is None:
                    continue
                element_edge, reference_edge, rng = axis
                diff = getattr(el_b, reference_edge) - getattr(el_a, element_edge)
                v = evaluate_range(
                    rng, diff, f"{cname}.{label}",
                    f"{el_a.name} is not positioned correctly on {el_b.name} ({label})",
                    {"diff": diff},
                )
                if v:
                    violations.append(v)
            return violations

        return Constraint(cname, check)
    return factory


def _check_axis(axis, allowed, message):
    if len(axis) != 3:
        raise ValueError("on() axis must be (element_edge, reference_edge, range)")
    element_edge, reference_edge, _ = axis
    if element_edge not in allowed or reference_edge not in allowed:
        raise ValueError(message)


# ── centered ──────────────────────────────────────────────────────────────────

def centered(a, b, *, h: "Range | None" = None, v: "Range | None" = None, name: "str | None" = None):
    """Center offsets of a relative to b: h on center_x, v on center_y."""
    def factory(rt):
        el_a = resolve_elem(rt, a)
        el_b = resolve_elem(rt, b)
        cname = name or f"centered({el_a.name},{el_b.name})"

        def check():
            violations = []
            if h is not None:
                diff = el_a.center_x - el_b.center_x
                viol = evaluate_range(
                    h, diff, f"{cname}.horizontal",
                    f"{el_a.name} is not horizontally centered relative to {el_b.name}",
                    {"diff": diff},
                )
                if viol:
                    violations.append(viol)
            if v is not None:
                diff = el_a.center_y - el_b.center_y
                viol = evaluate_range(
                    v, diff, f"{cname}.vertical",
                    f"{el_a.name} is not vertically centered relative to {el_b.name}",
                    {"diff": diff},
                )
                if viol:
                    violations.append(viol)
            return violations

        return Constraint(cname, check)
    return factory

"""
uilint.constraints.extras — composite layout patterns.

  almost_squared(e, tolerance=0.1)          width / height within 10% of 1
  aligned_horiz_equal_gap(items, tol)       equal spacing along x
  aligned_vert_equal_gap(items, tol)        equal spacing along y
  table_layout(items, columns=3, ...)       grid rows, column ceiling, margins
  sides_horizontally_inside(items, box)     a row filling a container

Equal-gap checks compare every gap with the *first* gap, not with its
neighbour, so a steady drift is caught once it exceeds tolerance.
"""
from __future__ import annotations

from uilint.constraints.combinators import pairwise
from uilint.layout.constraint import (
    Constraint,
    Violation,
    evaluate_range,
    resolve_elem,
    resolve_group,
)
from uilint.layout.ranges import Range, gte


ROW_TOLERANCE_PX = 5


def almost_squared(e, tolerance: float = 0.1, name: str = "almost_squared"):
    """A zero-height element passes."""
    def factory(rt):
        el = resolve_elem(rt, e)

        def check():
            if el.height == 0:
                return []
            actual = el.width / el.height
            if abs(actual - 1) <= tolerance:
                return []
            return [Violation(name, "Not squared", {"actual": actual, "tolerance": tolerance})]

        return Constraint(name, check)
    return factory


# ── Equal gaps ────────────────────────────────────────────────────────────────

def _equal_gap(items, gap_tolerance: float, name: str, sort_key, gap):
    def factory(rt):
        group = resolve_group(rt, items)

        def check():
            if len(group) <= 2:
                return []
            ordered  = sorted(group, key=sort_key)
            gaps     = [gap(a, b) for a, b in pairwise(ordered)]
            baseline = gaps[0]
            violations = []
            for i, g in enumerate(gaps):
                if abs(g - baseline) > gap_tolerance:
                    a, b = ordered[i], ordered[i + 1]
                    violations.append(Violation(
                        f"{name}.gap({a.name},{b.name})",
                        f"Gap between {a.name} and {b.name} differs from baseline",
                        {"gap": g, "baseline": baseline, "tolerance": gap_tolerance},
                    ))
            return violations

        return Constraint(name, check)
    return factory


def aligned_horiz_equal_gap(items, gap_tolerance: float, name: str = "equal_gap"):
    return _equal_gap(items, gap_tolerance, name,
                      lambda e: e.left, lambda a, b: b.left - a.right)


def aligned_vert_equal_gap(items, gap_tolerance: float, name: str = "equal_gap_vertical"):
    return _equal_gap(items, gap_tolerance, name,
                      lambda e: e.top, lambda a, b: b.top - a.bottom)


# ── Tables ────────────────────────────────────────────────────────────────────

def group_into_rows(items: list) -> "list[list]":
    """
    Cluster elements into visual rows.

    Items are ordered by (top, left); an item joins the current row while its
    top is within ROW_TOLERANCE_PX of the row's first member's top.
    """
    rows = []
    current = []
    row_top = None
    for item in sorted(items, key=lambda e: (e.top, e.left)):
        if row_top is None or abs(item.top - row_top) <= ROW_TOLERANCE_PX:
            current.append(item)
            if row_top is None:
                row_top = item.top
        else:
            rows.append(current)
            current = [item]
            row_top = item.top
    if current:
        rows.append(current)
    return rows


def table_layout(
    items,
    columns: int,
    *,
    horizontal_margin: "Range | None" = None,
    vertical_margin: "Range | None" = None,
    name: str = "table_layout",
):
    """
    Items form a grid of at most ``columns`` per row.

    Args:
        columns:           maximum members per row
        horizontal_margin: Range for left-to-right gaps inside a row
        vertical_margin:   Range for the gap from a row's tallest bottom to
                           the next row's shallowest top
    """
    def factory(rt):
        group = resolve_group(rt, items)

        def check():
            if not group:
                return []
            rows = group_into_rows(group)
            violations = []

            for r, row in enumerate(rows):
                if len(row) > columns:
                    violations.append(Violation(
                        f"{name}.columns[row={r}]",
                        f"Expected <= {columns} columns, got {len(row)}",
                    ))
                if horizontal_margin is not None and len(row) > 1:
                    ordered = sorted(row, key=lambda e: e.left)
                    for c, (left, right) in enumerate(pairwise(ordered)):
                        margin = right.left - left.right
                        v = evaluate_range(
                            horizontal_margin, margin, f"{name}.h_margin[row={r},col={c}]",
                            f"Horizontal margin between {left.name} and {right.name} is out of range",
                            {"margin": margin, "left": left.name, "right": right.name,
                             "row_index": r, "gap_index": c},
                        )
                        if v:
                            violations.append(v)

            if vertical_margin is not None:
                for r, (upper, lower) in enumerate(pairwise(rows)):
                    bottom_elem = max(upper, key=lambda e: e.bottom)
                    top_elem    = min(lower, key=lambda e: e.top)
                    margin = top_elem.top - bottom_elem.bottom
                    v = evaluate_range(
                        vertical_margin, margin, f"{name}.v_margin[row={r}]",
                        f"Vertical margin between {bottom_elem.name} (row {r}) and "
                        f"{top_elem.name} (row {r + 1}) is out of range",
                        {"margin": margin, "row_above_index": r, "row_below_index": r + 1,
                         "above_element": bottom_elem.name, "below_element": top_elem.name},
                    )
                    if v:
                        violations.append(v)
            return violations

        return Constraint(name, check)
    return factory


# ── Rows inside a container ───────────────────────────────────────────────────

def sides_horizontally_inside(
    items,
    container,
    margin_range: "Range | None" = None,
    name: str = "sides_horizontally_inside",
):
    """
    A horizontal row of items sits inside container.

    The leftmost and rightmost margins are checked against margin_range
    (default >= 0); neighbours must not overlap and must share top and
    height within 1px.
    """
    rng = margin_range if margin_range is not None else gte(0)

    def factory(rt):
        group = resolve_group(rt, items)
        box   = resolve_elem(rt, container)

        def check():
            if not group:
                return []
            ordered = sorted(group, key=lambda e: e.left)
            first, last = ordered[0], ordered[-1]
            violations = []

            left_margin = first.left - box.left
            v = evaluate_range(rng, left_margin, f"{name}.first.left",
                               f"Left margin of {first.name} relative to container is out of range",
                               {"margin": left_margin})
            if v:
                violations.append(v)

            right_margin = box.right - last.right
            v = evaluate_range(rng, right_margin, f"{name}.last.right",
                               f"Right margin of {last.name} relative to container is out of range",
                               {"margin": right_margin})
            if v:
                violations.append(v)

            for i, (a, b) in enumerate(pairwise(ordered)):
                if a.right > b.left:
                    violations.append(Violation(f"{name}.order[{i}]",
                                                f"Item {a.name} overlaps with {b.name}",
                                                {"a_right": a.right, "b_left": b.left}))
                top_delta = abs(a.top - b.top)
                if top_delta > 1:
                    violations.append(Violation(f"{name}.top[{i}]",
                                                f"Items {a.name} and {b.name} do not share the same top",
                                                {"top_delta": top_delta}))
                height_delta = abs(a.height - b.height)
                if height_delta > 1:
                    violations.append(Violation(f"{name}.height[{i}]",
                                                f"Items {a.name} and {b.name} have different heights",
                                                {"height_delta": height_delta}))
            return violations

        return Constraint(name, check)
    return factory

"""
uilint.constraints.text — visibility, presence and rendered text.

Measurement contract (per element snapshot):
  visible       bool   — rendered and not hidden
  present       bool   — matched in the DOM at all
  text          str    — text content
  canvas        rect   — scroll size of the content box
  text_metrics  lines  — line_count, line_rects, bounding_rect (optional)

Overflow checks allow 1px of sub-pixel slack.
"""
from __future__ import annotations

import re

from uilint.layout.constraint import Constraint, Violation, resolve_constraints, resolve_elem


TEXT_OVERFLOW_TOLERANCE_PX = 1


def visible(e, expect: bool = True, name: "str | None" = None):
    def factory(rt):
        el    = resolve_elem(rt, e)
        cname = name or f"visible({el.name})"

        def check():
            if el.visible == expect:
                return []
            msg = f"{el.name} is not visible" if expect else f"{el.name} should not be visible"
            return [Violation(cname, msg)]

        return Constraint(cname, check)
    return factory


def present(e, expect: bool = True, name: "str | None" = None):
    def factory(rt):
        el    = resolve_elem(rt, e)
        cname = name or f"present({el.name})"

        def check():
            if el.present == expect:
                return []
            msg = f"{el.name} is not present" if expect else f"{el.name} should not be present"
            return [Violation(cname, msg)]

        return Constraint(cname, check)
    return factory


def text_equals(e, expected: str, name: "str | None" = None):
    def factory(rt):
        el    = resolve_elem(rt, e)
        cname = name or f"text_equals({el.name})"

        def check():
            if el.text == expected:
                return []
            return [Violation(cname, f"{el.name} text mismatch",
                              {"expected": expected, "actual": el.text})]

        return Constraint(cname, check)
    return factory


def text_matches(e, pattern: "str | re.Pattern", name: "str | None" = None):
    """Text contains a match for pattern (re.search semantics)."""
    regex = re.compile(pattern) if isinstance(pattern, str) else pattern

    def factory(rt):
        el    = resolve_elem(rt, e)
        cname = name or f"text_matches({el.name})"

        def check():
            if regex.search(el.text):
                return []
            return [Violation(cname, f"{el.name} text does not match pattern",
                              {"pattern": regex.pattern, "actual": el.text})]

        return Constraint(cname, check)
    return factory


# ── Overflow and line counts ──────────────────────────────────────────────────

def text_does_not_overflow(e, name: "str | None" = None):
    """
    Content fits its box.

    Checks the scroll size (canvas) against the box on both axes, and, when
    text metrics are available, that the text's bounding rect does not bleed
    past any box edge.
    """
    def factory(rt):
        el    = resolve_elem(rt, e)
        cname = name or f"text_does_not_overflow({el.name})"

        def check():
            violations = []
            canvas = el.get_rect("canvas")
            box    = el.get_rect("box")

            horizontal = canvas.width - box.width
            if horizontal > TEXT_OVERFLOW_TOLERANCE_PX:
                violations.append(Violation(f"{cname}.horizontal",
                                            f"{el.name} text overflows horizontally",
                                            {"overflow": horizontal}))
            vertical = canvas.height - box.height
            if vertical > TEXT_OVERFLOW_TOLERANCE_PX:
                violations.append(Violation(f"{cname}.vertical",
                                            f"{el.name} text overflows vertically",
                                            {"overflow": vertical}))

            metrics = el.text_metrics
            rect    = metrics.bounding_rect if metrics else None
            if rect is not None:
                bleeds = (
                    ("left",   el.left - rect.left,     "bleeds to the left"),
                    ("right",  rect.right - el.right,   "bleeds to the right"),
                    ("top",    el.top - rect.top,       "bleeds above the element"),
                    ("bottom", rect.bottom - el.bottom, "bleeds below the element"),
                )
                for side, delta, what in bleeds:
                    if delta > TEXT_OVERFLOW_TOLERANCE_PX:
                        violations.append(Violation(f"{cname}.{side}",
                                                    f"{el.name} text {what}",
                                                    {"delta": delta}))
            return violations

        return Constraint(cname, check)
    return factory


def text_lines_at_most(e, max_lines: int, name: "str | None" = None):
    """Rendered text wraps to at most max_lines lines.  Missing metrics fail."""
    if isinstance(max_lines, bool) or not isinstance(max_lines, int) or max_lines < 0:
        raise ValueError("text_lines_at_most: max_lines must be a non-negative integer")

    def factory(rt):
        el    = resolve_elem(rt, e)
        cname = name or f"text_lines_at_most({el.name},{max_lines})"

        def check():
            metrics = el.text_metrics
            if metrics is None:
                return [Violation(f"{cname}.metrics",
                                  "Text metrics are unavailable for this element",
                                  {"element": el.name})]
            if metrics.line_count <= max_lines:
                return []
            return [Violation(cname, f"{el.name} renders too many text lines",
                              {"line_count": metrics.line_count, "max_lines": max_lines})]

        return Constraint(cname, check)
    return factory


def single_line_text(e, name: "str | None" = None):
    """No overflow and exactly one rendered line at most."""
    def factory(rt):
        el    = resolve_elem(rt, e)
        cname = name or f"single_line_text({el.name})"
        parts = resolve_constraints(rt, [
            text_does_not_overflow(el, f"{cname}.overflow"),
            text_lines_at_most(el, 1, f"{cname}.max_lines"),
        ])

        def check():
            violations = []
            for c in parts:
                violations.extend(c.check())
            return violations

        return Constraint(cname, check)
    return factory

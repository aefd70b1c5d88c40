"""
uilint.constraints.combinators — quantifiers over a group.

A combinator takes a group and a closure mapping one Elem to a constraint
source (anything resolve_constraints() accepts):

    for_all(cards, lambda c: [width_in(c, gte(200)), inside(c, ctx.view)])
    exists(buttons, lambda b: text_equals(b, "Save"))
    none(items, lambda i: visible(i))

Violation names are index-prefixed: ``for_all[2].width_in(.card[2]).width_in(.card[2])``.
"""
from __future__ import annotations

from typing import Callable, Sequence, TypeVar

from uilint.layout.constraint import (
    Constraint,
    Violation,
    evaluate_range,
    prefix_violations,
    resolve_constraints,
    resolve_group,
)
from uilint.layout.ranges import Range


T = TypeVar("T")


def _element_violations(rt, cname: str, index: int, source) -> "list[Violation]":
    violations = []
    for c in resolve_constraints(rt, source):
        result = c.check()
        if result:
            violations.extend(prefix_violations(f"{cname}[{index}].{c.name}", result))
    return violations


def for_all(elems, make: Callable, name: "str | None" = None):
    """Every element satisfies make(elem); all failures are reported."""
    cname = name or "for_all"

    def factory(rt):
        group = resolve_group(rt, elems)

        def check():
            violations = []
            for i, elem in enumerate(group):
                violations.extend(_element_violations(rt, cname, i, make(elem)))
            return violations

        return Constraint(cname, check)
    return factory


def exists(elems, make: Callable, name: "str | None" = None):
    """
    At least one element satisfies make(elem).

    Stops at the first element with zero violations.  Otherwise reports one
    violation whose details hold each element's violation list.  An empty
    group fails with no details.
    """
    cname = name or "exists"

    def factory(rt):
        group = resolve_group(rt, elems)

        def check():
            details = []
            for i, elem in enumerate(group):
                violations = _element_violations(rt, cname, i, make(elem))
                if not violations:
                    return []
                details.append(violations)
            return [Violation(cname, "No element satisfied the predicate", details or None)]

        return Constraint(cname, check)
    return factory


def none(elems, make: Callable, name: "str | None" = None):
    """
    No element satisfies make(elem).

    Fails with ``name[i]`` at the first element whose constraints all pass.
    An empty group passes.
    """
    cname = name or "none"

    def factory(rt):
        group = resolve_group(rt, elems)

        def check():
            for i, elem in enumerate(group):
                matched = True
                for c in resolve_constraints(rt, make(elem)):
                    if c.check():
                        matched = False
                        break
                if matched:
                    return [Violation(f"{cname}[{i}]", "Predicate matched but should not",
                                      {"element": elem.name})]
            return []

        return Constraint(cname, check)
    return factory


def count_is(elems, rng: Range, name: "str | None" = None):
    cname = name or "count_is"

    def factory(rt):
        group = resolve_group(rt, elems)

        def check():
            count = len(group)
            v = evaluate_range(rng, count, cname, f"Group size {count} is out of range", {"value": count})
            return [v] if v else []

        return Constraint(cname, check)
    return factory


def amount_of_visible(elems, rng: Range, name: "str | None" = None):
    cname = name or "amount_of_visible"

    def factory(rt):
        group = resolve_group(rt, elems)

        def check():
            count = sum(1 for e in group if e.visible)
            v = evaluate_range(rng, count, cname,
                               f"Visible element count {count} is out of range", {"value": count})
            return [v] if v else []

        return Constraint(cname, check)
    return factory


# ── Sequence helpers ──────────────────────────────────────────────────────────

def pairwise(items: "Sequence[T]") -> "list[tuple[T, T]]":
    """Consecutive pairs: [a, b, c] → [(a, b), (b, c)]."""
    return [(items[i], items[i + 1]) for i in range(len(items) - 1)]


def windowed(items: "Sequence[T]", size: int) -> "list[list[T]]":
    """Sliding windows of size; empty when size <= 0 or larger than items."""
    if size <= 0 or len(items) < size:
        return []
    return [list(items[i:i + size]) for i in range(len(items) - size + 1)]

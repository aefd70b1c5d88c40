"""
Constraint primitives.

A Constraint is a named, pure check over already-resolved elements.  Its
check() returns a list of Violations; an empty list means it holds.

Relations do not build Constraints directly; they return *layout
constraints*: callables taking a RuntimeContext and returning a constraint
source.  A source is one of

  - a Constraint
  - a layout constraint (callable rt → source)
  - a list or tuple of sources, nested arbitrarily

resolve_constraints() is the only place a source is flattened.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Iterable, Union

from uilint.layout.elem import Elem
from uilint.layout.spec import ElemRef, GroupRef

if TYPE_CHECKING:
    from uilint.layout.engine import RuntimeContext
    from uilint.layout.ranges import Range


# ── Violations ────────────────────────────────────────────────────────────────

@dataclass
class Violation:
    constraint: str
    message:    str
    details:    Any = None

    def to_dict(self) -> dict:
        out = {"constraint": self.constraint, "message": self.message}
        if self.details is not None:
            out["details"] = _jsonable(self.details)
        return out


def _jsonable(value):
    if isinstance(value, Violation):
        return value.to_dict()
    if isinstance(value, Elem):
        return value.name
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


# ── Constraints ───────────────────────────────────────────────────────────────

class Constraint:
    """A named check.  ``check`` must not perform I/O."""

    __slots__ = ("name", "_check")

    def __init__(self, name: str, check: "Callable[[], list[Violation]]"):
        self.name   = name
        self._check = check

    def check(self) -> "list[Violation]":
        return list(self._check() or [])

    def __repr__(self):
        return f"Constraint({self.name!r})"


LayoutConstraint = Callable[["RuntimeContext"], Any]
ConstraintSource = Union[Constraint, LayoutConstraint, list, tuple]


def resolve_constraints(rt: "RuntimeContext | None", source) -> "list[Constraint]":
    """Flatten a constraint source into concrete Constraints, in order."""
    if source is None:
        return []
    if isinstance(source, Constraint):
        return [source]
    if isinstance(source, (list, tuple)):
        out = []
        for item in source:
            out.extend(resolve_constraints(rt, item))
        return out
    if callable(source):
        if rt is None:
            raise RuntimeError(
                "A layout constraint needs a runtime context to resolve; "
                "evaluate it through evaluate_layout_spec()."
            )
        return resolve_constraints(rt, source(rt))
    raise TypeError(f"Not a constraint source: {source!r}")


def run_checks(rt: "RuntimeContext | None", source) -> "list[Violation]":
    """Resolve a source and concatenate every constraint's violations."""
    violations = []
    for c in resolve_constraints(rt, source):
        violations.extend(c.check())
    return violations


def evaluate_range(
    rng: "Range",
    value: float,
    constraint: str,
    message: str,
    details: "dict | None" = None,
) -> "Violation | None":
    """
    Test value against rng.  Returns None when it passes, otherwise a
    Violation whose details carry ``expected`` (rng.desc) and ``value``.
    """
    if rng(value):
        return None
    merged = dict(details or {})
    merged["expected"] = rng.desc
    merged.setdefault("value", value)
    return Violation(constraint, message, merged)


def prefix_violations(prefix: str, violations: "Iterable[Violation]") -> "list[Violation]":
    return [Violation(f"{prefix}.{v.constraint}", v.message, v.details) for v in violations]


# ── Targets ───────────────────────────────────────────────────────────────────

def resolve_elem(rt: "RuntimeContext", target) -> Elem:
    """An Elem passes through; an ElemRef is resolved against rt."""
    if isinstance(target, Elem):
        return target
    if isinstance(target, ElemRef):
        return rt.el(target)
    raise TypeError(f"Expected an Elem or ElemRef, got {target!r}")


def resolve_group(rt: "RuntimeContext", target) -> "list[Elem]":
    """A GroupRef is resolved against rt; a list has each member resolved."""
    if isinstance(target, GroupRef):
        return rt.group(target)
    if isinstance(target, (list, tuple)):
        return [resolve_elem(rt, t) for t in target]
    raise TypeError(f"Expected a group (list of elements or GroupRef), got {target!r}")


"""
uilint.layout — spec compiler, element model and evaluation engine.

Nothing in this package performs I/O during evaluation; measurements come
in as ElemSnapshot records and violations come out as data.
"""

from uilint.layout.constraint import (
    Constraint,
    Violation,
    evaluate_range,
    prefix_violations,
    resolve_constraints,
    run_checks,
)
from uilint.layout.elem import (
    Elem,
    ElemSnapshot,
    FrameRect,
    TextMetrics,
    ViewportClass,
    by_viewport,
    classify_viewport,
)
from uilint.layout.engine import LayoutReport, RuntimeContext, evaluate_layout_spec
from uilint.layout.spec import ElemRef, GroupRef, LayoutSpec, SpecBuilder, define_layout_spec

__all__ = [
    "Constraint", "Violation", "evaluate_range", "prefix_violations",
    "resolve_constraints", "run_checks",
    "Elem", "ElemSnapshot", "FrameRect", "TextMetrics",
    "ViewportClass", "by_viewport", "classify_viewport",
    "LayoutReport", "RuntimeContext", "evaluate_layout_spec",
    "ElemRef", "GroupRef", "LayoutSpec", "SpecBuilder", "define_layout_spec",
]

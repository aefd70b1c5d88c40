"""
Evaluation engine — resolves a compiled spec against measured snapshots.

Input:  LayoutSpec            (from define_layout_spec)
        snapshot store        { reference key: [ElemSnapshot, ...] }
        view / canvas records (ElemSnapshot for the page frame)
Output: LayoutReport          { scenarioName, snapshotName, viewTag?, viewSize,
                                viewportClass, violations: [...] }

A store can also be supplied offline as a snapshots document (see
uilint.schema), which is what ``uilint evaluate`` reads:
  - a file path (str or Path)
  - the string "-"  → read from stdin
  - a dict          → used directly
"""
from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Sequence

from uilint.layout.constraint import Violation, resolve_constraints
from uilint.layout.elem import (
    Elem,
    ElemSnapshot,
    ViewportClass,
    by_viewport,
    classify_viewport,
)
from uilint.layout.spec import ElemRef, GroupRef, LayoutSpec


# ── Runtime context ───────────────────────────────────────────────────────────

class RuntimeContext:
    """
    Per-evaluation resolver handed to every constraint factory.

    Resolution is memoised: the same reference always yields the same Elem
    (or the same list) within one evaluation.
    """

    def __init__(
        self,
        spec: LayoutSpec,
        store: "Mapping[str, Sequence[ElemSnapshot]]",
        view: ElemSnapshot,
        canvas: "ElemSnapshot | None" = None,
        viewport_class: "ViewportClass | str | None" = None,
    ):
        self.spec   = spec
        self._store = store
        self._elems  = {}
        self._groups = {}
        self.view   = Elem("view", view)
        self.canvas = Elem("canvas", canvas if canvas is not None else view)
        if viewport_class is None:
            self.viewport_class = classify_viewport(view.view.width)
        else:
            self.viewport_class = ViewportClass(viewport_class)

    def el(self, ref: ElemRef) -> Elem:
        if ref.key == self.spec.view_key:
            return self.view
        if ref.key == self.spec.canvas_key:
            return self.canvas
        if ref.key not in self._elems:
            self._elems[ref.key] = self._resolve_elem(ref)
        return self._elems[ref.key]

    def group(self, ref: GroupRef) -> "list[Elem]":
        if ref.key not in self._groups:
            self._groups[ref.key] = self._resolve_group(ref)
        return self._groups[ref.key]

    def responsive(self, *, mobile, tablet, desktop):
        """Return the branch for this evaluation's viewport class."""
        return by_viewport(self.viewport_class, mobile=mobile, tablet=tablet, desktop=desktop)

    def _label(self, key: str) -> str:
        desc = self.spec.descriptor(key)
        return desc.selector if desc else key

    def _resolve_elem(self, ref: ElemRef) -> Elem:
        label   = self._label(ref.key)
        records = self._store.get(ref.key) or []
        if records:
            return Elem(label, records[0])
        return Elem(label, ElemSnapshot(selector=label))

    def _resolve_group(self, ref: GroupRef) -> "list[Elem]":
        label   = self._label(ref.key)
        records = self._store.get(ref.key) or []
        return [Elem(f"{label}[{i}]", snap) for i, snap in enumerate(records)]


# ── Reports ───────────────────────────────────────────────────────────────────

@dataclass
class LayoutReport:
    scenario_name:  str
    snapshot_name:  str
    view_size:      dict
    viewport_class: ViewportClass
    violations:     "list[Violation]" = field(default_factory=list)
    view_tag:       "str | None" = None

    @property
    def ok(self) -> bool:
        return not self.violations

    def to_dict(self) -> dict:
        out = {
            "scenarioName":  self.scenario_name,
            "snapshotName":  self.snapshot_name,
        }
        if self.view_tag is not None:
            out["viewTag"] = self.view_tag
        out["viewSize"]      = dict(self.view_size)
        out["viewportClass"] = self.viewport_class.value
        out["violations"]    = [v.to_dict() for v in self.violations]
        return out


def evaluate_layout_spec(
    spec: LayoutSpec,
    store: "Mapping[str, Sequence[ElemSnapshot]]",
    view: ElemSnapshot,
    canvas: "ElemSnapshot | None" = None,
    *,
    view_tag: "str | None" = None,
    viewport_class: "ViewportClass | str | None" = None,
    scenario_name: str = "unknown",
    snapshot_name: str = "unknown",
) -> LayoutReport:
    """
    Evaluate every registered factory, in order, and collect violations.

    Args:
        spec:           compiled LayoutSpec
        store:          reference key → snapshots (missing / empty allowed)
        view:           viewport record; its ``view`` frame gives viewSize
        canvas:         document record; defaults to view
        view_tag:       free-form tag copied into the report
        viewport_class: override; otherwise classified from view width
        scenario_name:  copied into the report
        snapshot_name:  copied into the report
    """
    rt = RuntimeContext(spec, store, view, canvas, viewport_class)

    violations = []
    for factory in spec.factories:
        for constraint in resolve_constraints(rt, factory(rt)):
            violations.extend(constraint.check())

    return LayoutReport(
        scenario_name=scenario_name,
        snapshot_name=snapshot_name,
        view_tag=view_tag,
        view_size={"width": view.view.width, "height": view.view.height},
        viewport_class=rt.viewport_class,
        violations=violations,
    )


# ── Offline evaluation ────────────────────────────────────────────────────────

def store_from_document(doc: dict) -> "tuple[dict, ElemSnapshot, ElemSnapshot | None]":
    """Turn a validated snapshots document into (store, view, canvas)."""
    store = {
        key: [ElemSnapshot.from_dict(r) for r in records]
        for key, records in doc.get("store", {}).items()
    }
    view   = ElemSnapshot.from_dict(doc["view"])
    canvas = ElemSnapshot.from_dict(doc["canvas"]) if doc.get("canvas") else None
    return store, view, canvas


def evaluate_snapshot_document(spec: LayoutSpec, doc: dict) -> LayoutReport:
    """Evaluate spec against a snapshots document (already loaded)."""
    from uilint.schema import validate_snapshots

    validate_snapshots(doc)
    store, view, canvas = store_from_document(doc)
    return evaluate_layout_spec(
        spec, store, view, canvas,
        view_tag=doc.get("viewTag"),
        viewport_class=doc.get("viewportClass"),
        scenario_name=doc.get("scenarioName", "unknown"),
        snapshot_name=doc.get("snapshotName", "unknown"),
    )


def run_evaluation(
    spec: LayoutSpec,
    snapshots: "str | Path | dict",
    output_path: "str | Path | None" = None,
    compact: bool = False,
) -> LayoutReport:
    """
    Top-level offline evaluation.

    Args:
        spec:         compiled LayoutSpec
        snapshots:    snapshots JSON as a file path, "-" (stdin), or dict
        output_path:  write the report here; None → write JSON to stdout
        compact:      single-line JSON instead of indented
    """
    doc    = _load_snapshots_doc(snapshots)
    report = evaluate_snapshot_document(spec, doc)
    _write_output(report.to_dict(), output_path, compact=compact)
    return report


def format_report(data: dict, compact: bool = False) -> str:
    if compact:
        return json.dumps(data, separators=(",", ":"))
    return json.dumps(data, indent=2)


def _write_output(data: dict, output_path, compact: bool = False) -> None:
    """Write JSON to a file if output_path given, otherwise stdout."""
    text = format_report(data, compact=compact)
    if output_path:
        Path(output_path).write_text(text)
    else:
        print(text)


def _load_snapshots_doc(source) -> dict:
    if isinstance(source, dict):
        return source
    if str(source) == "-":
        return json.load(sys.stdin)
    with open(source) as f:
        return json.load(f)


# ── Spec loading ──────────────────────────────────────────────────────────────

def load_spec(target: "str | Path") -> LayoutSpec:
    """
    Import a LayoutSpec from ``path/to/file.py`` or ``path/to/file.py:NAME``.

    Without NAME the module must contain exactly one LayoutSpec.
    """
    text = str(target)
    attr = None
    if ":" in text and not Path(text).exists():
        text, attr = text.rsplit(":", 1)
    path = Path(text)
    if not path.exists():
        raise FileNotFoundError(f"Spec file not found: {path}")

    module = _import_file(path)
    if attr:
        spec = getattr(module, attr, None)
        if not isinstance(spec, LayoutSpec):
            raise ValueError(f"{path}:{attr} is not a LayoutSpec")
        return spec

    found = [v for v in vars(module).values() if isinstance(v, LayoutSpec)]
    if len(found) != 1:
        raise ValueError(
            f"{path} defines {len(found)} layout specs; name one with {path}:NAME"
        )
    return found[0]


def _import_file(path: Path):
    """Import a Python file by path, letting it import its siblings."""
    import importlib.util

    script_dir = str(path.resolve().parent)
    if script_dir not in sys.path:
        sys.path.insert(0, script_dir)
    spec = importlib.util.spec_from_file_location(path.stem, path)
    if spec is None or spec.loader is None:
        raise ValueError(f"Cannot import {path}")
    mod = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(mod)
    return mod

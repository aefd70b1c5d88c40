"""
Spec compiler.

A layout spec is declared by a builder function that runs once:

    from uilint import define_layout_spec
    from uilint.constraints import below, inside, between, gte

    def home(ctx):
        header = ctx.el("#header")
        menu   = ctx.el("#menu")
        cards  = ctx.group(".card")
        ctx.must(
            below(menu, header, between(0, 16)),
            inside(header, ctx.view),
        )
        ctx.must_ref(lambda rt: [] if rt.viewport_class == "mobile"
                     else aligned_horizontally(cards, 2))

    HOME = define_layout_spec(home, name="home")

el()/group() return opaque references; nothing is measured or resolved until
the spec is evaluated against a snapshot store.
"""
from __future__ import annotations

import inspect
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable


VIEW_KEY   = "__uilint.view"
CANVAS_KEY = "__uilint.canvas"

SELECTOR_KINDS = ("css", "xpath", "special")


# ── Descriptors and references ────────────────────────────────────────────────

@dataclass(frozen=True)
class SelectorDescriptor:
    kind:     str
    selector: str

    def to_dict(self) -> dict:
        return {"type": self.kind, "selector": self.selector}


@dataclass(frozen=True)
class ElemRef:
    key:   str
    label: str = ""


@dataclass(frozen=True)
class GroupRef:
    key:   str
    label: str = ""


def selector_descriptor(selector) -> SelectorDescriptor:
    """
    Normalise a selector argument.

    Accepts a CSS string, a ``{"type": "css"|"xpath", "selector": ...}``
    mapping, or a SelectorDescriptor.  Raises ValueError otherwise.
    """
    if isinstance(selector, SelectorDescriptor):
        return selector
    if isinstance(selector, str):
        if not selector.strip():
            raise ValueError("Selector must be a non-empty string")
        return SelectorDescriptor("css", selector)
    if isinstance(selector, dict):
        kind  = selector.get("type", "css")
        value = selector.get("selector")
        if kind not in ("css", "xpath"):
            raise ValueError(f"Unknown selector type {kind!r}; expected 'css' or 'xpath'")
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"Selector mapping needs a non-empty 'selector': {selector!r}")
        return SelectorDescriptor(kind, value)
    raise ValueError(f"Unsupported selector: {selector!r}")


# ── Compiled spec ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class LayoutSpec:
    """Immutable result of define_layout_spec()."""
    name:       "str | None"
    elements:   "MappingProxyType[str, SelectorDescriptor]"
    groups:     "MappingProxyType[str, SelectorDescriptor]"
    factories:  tuple
    view_key:   str = VIEW_KEY
    canvas_key: str = CANVAS_KEY

    def descriptor(self, key: str) -> "SelectorDescriptor | None":
        return self.elements.get(key) or self.groups.get(key)

    def measured_keys(self) -> "list[tuple[str, SelectorDescriptor, bool]]":
        """(key, descriptor, is_group) for every DOM reference, declaration order."""
        out = [(k, d, False) for k, d in self.elements.items() if d.kind != "special"]
        out.extend((k, d, True) for k, d in self.groups.items())
        out.sort(key=lambda item: _key_order(item[0]))
        return out


def _key_order(key: str) -> int:
    try:
        return int(key.rsplit(":", 1)[1])
    except (IndexError, ValueError):
        return 0


# ── Builder session ───────────────────────────────────────────────────────────

class SpecBuilder:
    """
    One spec-build session.  Owns the reference-key counter, so every build
    numbers its references from 1 regardless of what else was built before.
    """

    def __init__(self):
        self._counter   = 0
        self._closed    = False
        self._elements  = {
            VIEW_KEY:   SelectorDescriptor("special", "view"),
            CANVAS_KEY: SelectorDescriptor("special", "canvas"),
        }
        self._groups    = {}
        self._factories = []
        self.view       = ElemRef(VIEW_KEY, "view")
        self.canvas     = ElemRef(CANVAS_KEY, "canvas")

    def _next_key(self, prefix: str) -> str:
        self._counter += 1
        return f"{prefix}:{self._counter}"

    def _ensure_open(self):
        if self._closed:
            raise RuntimeError("Spec builder is closed; declare everything inside the builder function")

    def el(self, selector) -> ElemRef:
        self._ensure_open()
        desc = selector_descriptor(selector)
        key  = self._next_key("el")
        self._elements[key] = desc
        return ElemRef(key, desc.selector)

    def group(self, selector) -> GroupRef:
        self._ensure_open()
        desc = selector_descriptor(selector)
        key  = self._next_key("group")
        self._groups[key] = desc
        return GroupRef(key, desc.selector)

    def must(self, *sources) -> None:
        """Register constraints; list/tuple arguments are spread one level."""
        self._ensure_open()
        for source in sources:
            items = source if isinstance(source, (list, tuple)) else [source]
            for item in items:
                self._factories.append(lambda rt, _c=item: _c)

    def must_ref(self, factory: "Callable") -> None:
        """Register a factory that receives the RuntimeContext at evaluation."""
        self._ensure_open()
        if not callable(factory):
            raise TypeError(f"must_ref() expects a callable, got {factory!r}")
        self._factories.append(factory)

    def build(self, name: "str | None" = None) -> LayoutSpec:
        self._closed = True
        return LayoutSpec(
            name=name,
            elements=MappingProxyType(dict(self._elements)),
            groups=MappingProxyType(dict(self._groups)),
            factories=tuple(self._factories),
        )


def define_layout_spec(builder: "Callable[[SpecBuilder], object]", name: "str | None" = None) -> LayoutSpec:
    """
    Run builder once against a fresh SpecBuilder and freeze the result.

    Args:
        builder: function receiving the SpecBuilder; must be synchronous
        name:    optional spec name (defaults to the builder's __name__)

    Raises TypeError if builder is a coroutine function or returns an awaitable.
    """
    if inspect.iscoroutinefunction(builder):
        raise TypeError("Layout spec builders must be synchronous")
    ctx    = SpecBuilder()
    result = builder(ctx)
    if inspect.isawaitable(result):
        if inspect.iscoroutine(result):
            result.close()
        raise TypeError("Layout spec builders must be synchronous")
    return ctx.build(name or getattr(builder, "__name__", None))

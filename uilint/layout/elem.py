"""
Element model: frames, snapshots and the Elem wrapper constraints read from.

A snapshot is one measured record for one DOM element at one instant:

    {
      "selector": "#header", "index": 0,
      "box":    {"left": 0, "top": 0, "width": 1280, "height": 60},
      "view":   {...},   # box clipped to the viewport / clipping ancestors
      "canvas": {...},   # scroll size of the element's content
      "visible": true, "present": true,
      "text": "Welcome",
      "textMetrics": {"lineCount": 1, "lineRects": [...], "boundingRect": {...}}
    }

Wire keys are camelCase (shared with the browser measurement script);
Python attributes are snake_case.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, TypeVar


T = TypeVar("T")

MOBILE_MAX_WIDTH = 767
TABLET_MAX_WIDTH = 1199

FRAMES = ("box", "view", "canvas")


# ── Frames ────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class FrameRect:
    left:   float = 0.0
    top:    float = 0.0
    width:  float = 0.0
    height: float = 0.0

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @classmethod
    def from_dict(cls, d: "dict | None") -> "FrameRect":
        if not d:
            return cls()
        return cls(
            left=float(d.get("left", 0)),
            top=float(d.get("top", 0)),
            width=float(d.get("width", 0)),
            height=float(d.get("height", 0)),
        )

    def to_dict(self) -> dict:
        return {"left": self.left, "top": self.top, "width": self.width, "height": self.height}


ZERO_RECT = FrameRect()


@dataclass(frozen=True)
class TextMetrics:
    line_count:    int
    line_rects:    tuple = ()
    bounding_rect: Optional[FrameRect] = None

    @classmethod
    def from_dict(cls, d: dict) -> "TextMetrics":
        bounding = d.get("boundingRect")
        return cls(
            line_count=int(d.get("lineCount", 0)),
            line_rects=tuple(FrameRect.from_dict(r) for r in d.get("lineRects", [])),
            bounding_rect=FrameRect.from_dict(bounding) if bounding else None,
        )

    def to_dict(self) -> dict:
        return {
            "lineCount":    self.line_count,
            "lineRects":    [r.to_dict() for r in self.line_rects],
            "boundingRect": self.bounding_rect.to_dict() if self.bounding_rect else None,
        }


# ── Snapshots ─────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ElemSnapshot:
    selector:     str
    box:          FrameRect = ZERO_RECT
    view:         FrameRect = ZERO_RECT
    canvas:       FrameRect = ZERO_RECT
    visible:      bool = False
    present:      bool = False
    text:         str = ""
    index:        Optional[int] = None
    text_metrics: Optional[TextMetrics] = None
    meta:         dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d: dict) -> "ElemSnapshot":
        """Build a snapshot from its wire form.  Raises ValueError without a selector."""
        if "selector" not in d:
            raise ValueError(f"Snapshot record is missing 'selector': {d!r}")
        metrics = d.get("textMetrics")
        return cls(
            selector=str(d["selector"]),
            index=d.get("index"),
            box=FrameRect.from_dict(d.get("box")),
            view=FrameRect.from_dict(d.get("view")),
            canvas=FrameRect.from_dict(d.get("canvas")),
            visible=bool(d.get("visible", False)),
            present=bool(d.get("present", False)),
            text=d.get("text") or "",
            text_metrics=TextMetrics.from_dict(metrics) if metrics else None,
            meta=dict(d.get("meta") or {}),
        )

    def to_dict(self) -> dict:
        out = {
            "selector": self.selector,
            "box":      self.box.to_dict(),
            "view":     self.view.to_dict(),
            "canvas":   self.canvas.to_dict(),
            "visible":  self.visible,
            "present":  self.present,
            "text":     self.text,
        }
        if self.index is not None:
            out["index"] = self.index
        if self.text_metrics is not None:
            out["textMetrics"] = self.text_metrics.to_dict()
        if self.meta:
            out["meta"] = dict(self.meta)
        return out


def virtual_snapshot(selector: str, box: FrameRect, view: FrameRect, canvas: FrameRect) -> ElemSnapshot:
    """A present, visible record for a non-DOM frame such as the viewport."""
    return ElemSnapshot(
        selector=selector, box=box, view=view, canvas=canvas,
        visible=True, present=True, text="",
    )


# ── Elem ──────────────────────────────────────────────────────────────────────

class Elem:
    """
    Read-only view over one ElemSnapshot.

    Geometry comes from the ``box`` frame; use get_rect("view") or
    get_rect("canvas") for the others.
    """

    __slots__ = ("name", "snapshot")

    def __init__(self, name: str, snapshot: ElemSnapshot):
        self.name     = name
        self.snapshot = snapshot

    @property
    def left(self) -> float:
        return self.snapshot.box.left

    @property
    def top(self) -> float:
        return self.snapshot.box.top

    @property
    def width(self) -> float:
        return self.snapshot.box.width

    @property
    def height(self) -> float:
        return self.snapshot.box.height

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def center_x(self) -> float:
        return self.left + self.width / 2

    @property
    def center_y(self) -> float:
        return self.top + self.height / 2

    @property
    def visible(self) -> bool:
        return self.snapshot.visible

    @property
    def present(self) -> bool:
        return self.snapshot.present

    @property
    def text(self) -> str:
        return self.snapshot.text

    @property
    def text_metrics(self) -> "TextMetrics | None":
        if self.snapshot.text_metrics is not None:
            return self.snapshot.text_metrics
        raw = self.snapshot.meta.get("textMetrics")
        if isinstance(raw, TextMetrics):
            return raw
        if isinstance(raw, dict):
            return TextMetrics.from_dict(raw)
        return None

    def get_rect(self, frame: str = "box") -> FrameRect:
        if frame not in FRAMES:
            raise ValueError(f"Unknown frame {frame!r}; expected one of {', '.join(FRAMES)}")
        return getattr(self.snapshot, frame)

    def __repr__(self):
        return f"Elem({self.name!r})"


# ── Viewport classes ──────────────────────────────────────────────────────────

class ViewportClass(str, Enum):
    MOBILE  = "mobile"
    TABLET  = "tablet"
    DESKTOP = "desktop"

    def __str__(self):
        return self.value


def classify_viewport(width: float) -> ViewportClass:
    if width <= MOBILE_MAX_WIDTH:
        return ViewportClass.MOBILE
    if width <= TABLET_MAX_WIDTH:
        return ViewportClass.TABLET
    return ViewportClass.DESKTOP


def by_viewport(viewport_class: ViewportClass, *, mobile: T, tablet: T, desktop: T) -> T:
    """
    Pick one value per viewport class.  All three branches are required.
    """
    branches = {
        ViewportClass.MOBILE:  mobile,
        ViewportClass.TABLET:  tablet,
        ViewportClass.DESKTOP: desktop,
    }
    try:
        chosen = branches[ViewportClass(viewport_class)]
    except ValueError:
        raise ValueError(f"Unknown viewport class: {viewport_class!r}") from None
    return chosen

"""
Measure a live Playwright page into ElemSnapshot records.

For every element and group reference in a LayoutSpec, all matching DOM
nodes are measured in page:

  box     getBoundingClientRect() in document coordinates
  view    box clipped to the viewport and to every clipping ancestor
  canvas  scroll size of the node (at least its box)
  text    textContent, plus per-line text metrics from Range client rects

A node whose measurement throws (detached mid-read, for instance) is
recorded with zero frames rather than aborting the whole snapshot.
"""
from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from uilint.layout.elem import ElemSnapshot, FrameRect, TextMetrics, virtual_snapshot
from uilint.layout.engine import LayoutReport, evaluate_layout_spec

if TYPE_CHECKING:
    from playwright.async_api import Locator, Page

    from uilint.layout.spec import LayoutSpec, SelectorDescriptor


# Runs inside the page; receives the element handle.
MEASURE_NODE_JS = """
(node) => {
  const doc = node.ownerDocument || document;
  const win = doc.defaultView || window;
  const scrollX = win.scrollX || 0;
  const scrollY = win.scrollY || 0;
  const toFrame = (r) => ({ left: r.left + scrollX, top: r.top + scrollY, width: r.width, height: r.height });
  const right = (r) => r.left + r.width;
  const bottom = (r) => r.top + r.height;
  const intersect = (a, b) => {
    const l = Math.max(a.left, b.left), t = Math.max(a.top, b.top);
    const r = Math.min(right(a), right(b)), btm = Math.min(bottom(a), bottom(b));
    return { left: l, top: t, width: Math.max(0, r - l), height: Math.max(0, btm - t) };
  };
  const merge = (a, b) => {
    const l = Math.min(a.left, b.left), t = Math.min(a.top, b.top);
    const r = Math.max(right(a), right(b)), btm = Math.max(bottom(a), bottom(b));
    return { left: l, top: t, width: Math.max(0, r - l), height: Math.max(0, btm - t) };
  };

  const base = node.getBoundingClientRect();
  const box = toFrame(base);
  const canvas = {
    left: box.left, top: box.top,
    width: Math.max(node.scrollWidth || 0, base.width),
    height: Math.max(node.scrollHeight || 0, base.height),
  };
  const viewport = { left: scrollX, top: scrollY, width: win.innerWidth || 0, height: win.innerHeight || 0 };
  let view = intersect(box, viewport);
  for (let cur = node.parentElement; cur; cur = cur.parentElement) {
    const style = win.getComputedStyle(cur);
    const ox = style.overflowX === 'visible' ? style.overflow : style.overflowX;
    const oy = style.overflowY === 'visible' ? style.overflow : style.overflowY;
    if ((ox && ox !== 'visible') || (oy && oy !== 'visible')) {
      view = intersect(view, toFrame(cur.getBoundingClientRect()));
    }
  }

  const rects = [];
  const walker = doc.createTreeWalker(node, NodeFilter.SHOW_TEXT, {
    acceptNode: (t) => /\\S/.test(t.textContent || '') ? NodeFilter.FILTER_ACCEPT : NodeFilter.FILTER_REJECT,
  });
  while (walker.nextNode()) {
    const range = doc.createRange();
    range.selectNodeContents(walker.currentNode);
    for (const r of range.getClientRects()) {
      if (r.width > 0 && r.height > 0) rects.push(toFrame(r));
    }
  }
  const lines = [];
  for (const r of rects) {
    const i = lines.findIndex((line) => Math.abs(line.top - r.top) <= 1);
    if (i === -1) lines.push(r); else lines[i] = merge(lines[i], r);
  }
  const boundingRect = lines.reduce((acc, line) => (acc ? merge(acc, line) : line), null);

  return {
    box, view, canvas,
    text: node.textContent || '',
    textMetrics: { lineCount: lines.length, lineRects: lines, boundingRect },
  };
}
"""

DOCUMENT_FRAMES_JS = """
() => {
  const doc = document.documentElement;
  const body = document.body;
  const scrollX = window.scrollX || 0;
  const scrollY = window.scrollY || 0;
  const vw = window.innerWidth || doc.clientWidth || 0;
  const vh = window.innerHeight || doc.clientHeight || 0;
  const width = Math.max(doc.scrollWidth, body ? body.scrollWidth : 0, doc.offsetWidth, body ? body.offsetWidth : 0, vw);
  const height = Math.max(doc.scrollHeight, body ? body.scrollHeight : 0, doc.offsetHeight, body ? body.offsetHeight : 0, vh);
  return {
    view: { left: scrollX, top: scrollY, width: vw, height: vh },
    canvas: { left: 0, top: 0, width, height },
  };
}
"""


def _locator(page: "Page", descriptor: "SelectorDescriptor") -> "Locator":
    if descriptor.kind == "xpath":
        return page.locator(f"xpath={descriptor.selector}")
    return page.locator(descriptor.selector)


async def _measure(descriptor: "SelectorDescriptor", locator: "Locator", index: int) -> ElemSnapshot:
    from playwright.async_api import Error as PlaywrightError

    nth = locator.nth(index)
    try:
        geometry = await nth.evaluate(MEASURE_NODE_JS)
    except PlaywrightError:
        geometry = None
    try:
        is_visible = await nth.is_visible()
    except PlaywrightError:
        is_visible = False

    if geometry is None:
        try:
            text = await nth.text_content() or ""
        except PlaywrightError:
            text = ""
        return ElemSnapshot(selector=descriptor.selector, index=index,
                            visible=is_visible, present=True, text=text)

    metrics = geometry.get("textMetrics")
    return ElemSnapshot(
        selector=descriptor.selector,
        index=index,
        box=FrameRect.from_dict(geometry["box"]),
        view=FrameRect.from_dict(geometry["view"]),
        canvas=FrameRect.from_dict(geometry["canvas"]),
        visible=is_visible,
        present=True,
        text=geometry.get("text") or "",
        text_metrics=TextMetrics.from_dict(metrics) if metrics else None,
    )


async def collect_for_descriptor(page: "Page", descriptor: "SelectorDescriptor") -> "list[ElemSnapshot]":
    """Every node matching descriptor, in DOM order.  Special refs yield []."""
    if descriptor.kind == "special":
        return []
    locator = _locator(page, descriptor)
    count = await locator.count()
    return [await _measure(descriptor, locator, i) for i in range(count)]


async def collect_snapshots(page: "Page", spec: "LayoutSpec") -> "dict[str, list[ElemSnapshot]]":
    """Snapshot store for every DOM reference declared in spec."""
    refs    = spec.measured_keys()
    records = await asyncio.gather(*(collect_for_descriptor(page, desc) for _, desc, _ in refs))
    return {key: snaps for (key, _, _), snaps in zip(refs, records)}


async def get_document_frames(page: "Page") -> "tuple[FrameRect, FrameRect]":
    """(view, canvas): the scrolled viewport and the full document extent."""
    frames = await page.evaluate(DOCUMENT_FRAMES_JS)
    return FrameRect.from_dict(frames["view"]), FrameRect.from_dict(frames["canvas"])


async def measure_page(page: "Page", spec: "LayoutSpec") -> "tuple[dict, ElemSnapshot, ElemSnapshot]":
    """(store, view, canvas) for spec on the page as it is right now."""
    store, (view, canvas) = await asyncio.gather(
        collect_snapshots(page, spec),
        get_document_frames(page),
    )
    return (
        store,
        virtual_snapshot("view", view, view, view),
        virtual_snapshot("canvas", canvas, view, canvas),
    )


async def run_layout_spec(
    page: "Page",
    spec: "LayoutSpec",
    *,
    view_tag: "str | None" = None,
    viewport_class=None,
    scenario_name: str = "unknown",
    snapshot_name: str = "unknown",
) -> LayoutReport:
    """Measure page for spec and evaluate it."""
    store, view, canvas = await measure_page(page, spec)
    return evaluate_layout_spec(
        spec, store, view, canvas,
        view_tag=view_tag,
        viewport_class=viewport_class,
        scenario_name=scenario_name,
        snapshot_name=snapshot_name,
    )


def snapshot_document(store: dict, view: ElemSnapshot, canvas: ElemSnapshot, **meta) -> dict:
    """Serialise a measured store in the offline snapshots format."""
    from uilint.schema import SNAPSHOTS_SCHEMA

    doc = {"schema": SNAPSHOTS_SCHEMA}
    doc.update({k: v for k, v in meta.items() if v is not None})
    doc["store"]  = {key: [s.to_dict() for s in snaps] for key, snaps in store.items()}
    doc["view"]   = view.to_dict()
    doc["canvas"] = canvas.to_dict()
    return doc

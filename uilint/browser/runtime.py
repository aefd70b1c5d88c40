"""
Scenario runtime — what a scenario script sees.

A scenario is an async function taking a ScenarioRuntime:

    from uilint import define_scenario
    from specs.home import HOME

    async def run(rt):
        await rt.goto("/")
        await rt.snapshot("initial", HOME)
        await rt.page.click("#open-menu")
        await rt.snapshot("menu-open", HOME)

    scenario = define_scenario("home", run)

Each snapshot() call measures the page at that moment, evaluates the spec,
and appends one LayoutReport.  There is no implicit waiting or retrying.
"""
from __future__ import annotations

import inspect
import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable

from uilint.browser.snapshots import measure_page, snapshot_document
from uilint.layout.elem import ViewportClass, classify_viewport
from uilint.layout.engine import LayoutReport, evaluate_layout_spec

if TYPE_CHECKING:
    from playwright.async_api import Page

    from uilint.layout.spec import LayoutSpec
    from uilint.viewports import Viewport


_ABSOLUTE_URL = re.compile(r"^https?://", re.IGNORECASE)


@dataclass(frozen=True)
class ScenarioDefinition:
    name: str
    run:  "Callable[[ScenarioRuntime], Any]"


def define_scenario(name_or_run, run: "Callable | None" = None) -> ScenarioDefinition:
    """
    define_scenario("home", fn) or define_scenario(fn).

    Without a name the function's __name__ is used.
    """
    if isinstance(name_or_run, str):
        if run is None:
            raise ValueError("define_scenario: missing scenario function when name provided")
        return ScenarioDefinition(name_or_run, run)
    if not callable(name_or_run):
        raise TypeError(f"define_scenario expects a callable, got {name_or_run!r}")
    return ScenarioDefinition(getattr(name_or_run, "__name__", "unknown"), name_or_run)


class ScenarioRuntime:
    """One page, one viewport, one scenario run."""

    def __init__(
        self,
        page: "Page",
        viewport: "Viewport",
        base_url: str,
        scenario_key: str,
        snapshots_dir: "str | Path | None" = None,
        measure=measure_page,
    ):
        self.page          = page
        self.viewport      = viewport
        self.base_url      = base_url.rstrip("/")
        self.scenario_key  = scenario_key
        self.snapshots_dir = Path(snapshots_dir) if snapshots_dir else None
        self.reports: "list[LayoutReport]" = []
        self._measure      = measure

    @property
    def viewport_class(self) -> ViewportClass:
        return classify_viewport(self.viewport.width)

    def url_for(self, path: str) -> str:
        if _ABSOLUTE_URL.match(path):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    async def goto(self, path: str, **options) -> None:
        """Navigate; relative paths resolve against the static server."""
        options.setdefault("wait_until", "networkidle")
        await self.page.goto(self.url_for(path), **options)

    navigate = goto

    async def snapshot(
        self,
        name: str,
        spec: "LayoutSpec",
        *,
        view_tag: "str | None" = None,
        viewport_class: "ViewportClass | str | None" = None,
    ) -> LayoutReport:
        """Measure the page now and evaluate spec against it."""
        tag = view_tag or f"{self.scenario_key}-{self.viewport.name}-{name}"
        store, view, canvas = await self._measure(self.page, spec)

        if self.snapshots_dir is not None:
            self._save(tag, store, view, canvas, name, viewport_class)

        report = evaluate_layout_spec(
            spec, store, view, canvas,
            view_tag=tag,
            viewport_class=viewport_class,
            scenario_name=self.scenario_key,
            snapshot_name=name,
        )
        self.reports.append(report)
        return report

    def _save(self, tag, store, view, canvas, name, viewport_class) -> None:
        self.snapshots_dir.mkdir(parents=True, exist_ok=True)
        doc = snapshot_document(
            store, view, canvas,
            scenarioName=self.scenario_key,
            snapshotName=name,
            viewTag=tag,
            viewportClass=str(viewport_class) if viewport_class else None,
        )
        (self.snapshots_dir / f"{tag}.json").write_text(json.dumps(doc, indent=2))


async def run_scenario(scenario: "ScenarioDefinition | Callable", runtime: ScenarioRuntime) -> "list[LayoutReport]":
    """Drive one scenario to completion; sync scenario functions are allowed."""
    fn = scenario.run if isinstance(scenario, ScenarioDefinition) else scenario
    result = fn(runtime)
    if inspect.isawaitable(result):
        await result
    return runtime.reports

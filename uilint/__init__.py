"""
uilint — layout linter for web pages

Declare geometric relations between page elements as a layout spec, drive
the page through scenarios, and check every snapshot across a set of
viewports.

Quick start
-----------
  pip install uilint
  playwright install chromium
  uilint init
  # edit uilint/specs/, uilint/scenarios/, uilint.yaml
  uilint layout

Layers
------
  Spec        define_layout_spec(fn)     → LayoutSpec (selectors + factories)
  Scenario    define_scenario(name, fn)  → page actions + rt.snapshot(...)
  Engine      evaluate_layout_spec(...)  → LayoutReport (violations as data)
  Runner      uilint.yaml                → scenario × viewport plan, one browser
  Assertion   assert_layout(page, spec)  → report, or AssertionError on violations
"""

from uilint.browser.assertions import assert_layout
from uilint.browser.runtime import ScenarioDefinition, define_scenario
from uilint.layout.elem import ViewportClass, by_viewport
from uilint.layout.engine import LayoutReport, evaluate_layout_spec, load_spec
from uilint.layout.spec import LayoutSpec, define_layout_spec

__all__ = [
    "define_layout_spec", "LayoutSpec", "load_spec",
    "define_scenario", "ScenarioDefinition",
    "evaluate_layout_spec", "LayoutReport", "assert_layout",
    "ViewportClass", "by_viewport",
]
__version__ = "0.1.0"

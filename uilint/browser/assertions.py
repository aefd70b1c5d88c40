"""
Test helpers for pytest-playwright suites.

    from uilint.browser.assertions import assert_layout

    async def test_home(page):
        await page.goto(url)
        await assert_layout(page, HOME)

assert_layout measures the page as it is now, evaluates the spec, and raises
AssertionError with the first few violations when any are found.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from uilint.browser.snapshots import run_layout_spec
from uilint.layout.engine import LayoutReport

if TYPE_CHECKING:
    from playwright.async_api import Page

    from uilint.layout.spec import LayoutSpec


SUMMARY_LIMIT = 5


def format_violations(report: LayoutReport, limit: int = SUMMARY_LIMIT) -> str:
    """One '- constraint: message' line per violation, first `limit` only."""
    return "\n".join(f"- {v.constraint}: {v.message}" for v in report.violations[:limit])


async def assert_layout(
    page: "Page",
    spec: "LayoutSpec",
    *,
    view_tag: "str | None" = None,
) -> LayoutReport:
    """Return the report when the page satisfies spec; raise AssertionError otherwise."""
    report = await run_layout_spec(page, spec, view_tag=view_tag)
    if report.violations:
        raise AssertionError(
            f'Layout spec "{spec.name}" failed with {len(report.violations)} violation(s):\n'
            f"{format_violations(report)}"
        )
    return report

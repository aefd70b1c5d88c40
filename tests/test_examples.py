"""
Integration tests: run `uilint` end-to-end against the bundled example project.

The offline tests evaluate the committed snapshot documents with
`uilint evaluate`, so they need neither a browser nor a network.  The
browser test drives a real headless Chromium through `uilint layout` and is
skipped unless UILINT_BROWSER_TESTS=1 (it also needs
`playwright install chromium`).

Each test:
  1. Runs `uilint` against the example files
  2. Asserts the exit code (0 clean, 2 violations)
  3. Validates the report JSON structure and the expected violations
"""
from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

from uilint.runner import build_plan, load_config, resolve_scenario_keys
from uilint.schema import validate_report

REPO_ROOT      = Path(__file__).parent.parent
DASHBOARD_DIR  = REPO_ROOT / "examples" / "dashboard"
DASHBOARD_SPEC = str(DASHBOARD_DIR / "uilint" / "specs" / "dashboard_layout.py")
SNAPSHOTS_DIR  = DASHBOARD_DIR / "snapshots"


def _run_uilint(*args: str, stdin: "str | None" = None) -> subprocess.CompletedProcess:
    # run from the repo root: the example keeps its specs in a ./uilint folder
    return subprocess.run(
        [sys.executable, "-m", "uilint.cli", *args],
        cwd=str(REPO_ROOT),
        input=stdin,
        capture_output=True,
        text=True,
    )


def _evaluate(snapshot_file: str, *extra: str) -> subprocess.CompletedProcess:
    return _run_uilint(
        "evaluate",
        "--spec", DASHBOARD_SPEC,
        "--snapshots", str(SNAPSHOTS_DIR / snapshot_file),
        *extra,
    )


# ── Offline evaluation ────────────────────────────────────────────────────────

class TestDashboardSnapshots:
    def test_wide_snapshot_is_clean(self):
        result = _evaluate("dashboard-wide-initial.json")
        assert result.returncode == 0, result.stderr
        report = json.loads(result.stdout)
        validate_report(report)
        assert report["viewportClass"] == "desktop"
        assert report["viewTag"] == "dashboard-wide-initial"
        assert report["violations"] == []
        assert "ALL 1 SNAPSHOTS CLEAN" in result.stderr

    def test_phone_snapshot_reports_wrapped_title(self):
        result = _evaluate("dashboard-iphone-initial.json", "--format", "compact")
        assert result.returncode == 2, result.stderr
        report = json.loads(result.stdout)
        assert report["viewportClass"] == "mobile"
        assert report["viewSize"] == {"width": 390, "height": 844}
        assert [v["constraint"] for v in report["violations"]] == ["single_line_text(#title).max_lines"]
        assert report["violations"][0]["details"] == {"line_count": 2, "max_lines": 1}

    def test_snapshot_from_stdin(self):
        doc = (SNAPSHOTS_DIR / "dashboard-wide-initial.json").read_text()
        result = _run_uilint("evaluate", "--spec", DASHBOARD_SPEC, "--quiet", stdin=doc)
        assert result.returncode == 0, result.stderr
        assert result.stderr == ""

    def test_spec_name_selection(self):
        result = _evaluate("dashboard-wide-initial.json")
        named  = _run_uilint(
            "evaluate",
            "--spec", f"{DASHBOARD_SPEC}:DASHBOARD",
            "--snapshots", str(SNAPSHOTS_DIR / "dashboard-wide-initial.json"),
        )
        assert named.returncode == result.returncode == 0
        assert json.loads(named.stdout) == json.loads(result.stdout)


# ── Config + plan ─────────────────────────────────────────────────────────────

class TestDashboardConfig:
    def test_plan(self):
        cfg  = load_config(DASHBOARD_DIR / "uilint.yaml")
        keys = resolve_scenario_keys(cfg)
        plan = build_plan(cfg, keys, lambda key, entry, vp: None)
        assert [e.label for e in plan] == ["dashboard@iphone", "dashboard@ipad", "dashboard@wide"]
        assert cfg["workers"] == 2

    def test_custom_group(self):
        cfg  = load_config(DASHBOARD_DIR / "uilint.yaml")
        plan = build_plan(cfg, ["dashboard"], lambda key, entry, vp: None, tokens=["portrait"])
        assert [(e.viewport.name, e.viewport.width) for e in plan] == [("iphone", 390), ("kiosk", 1080)]


# ── Real browser ──────────────────────────────────────────────────────────────

@pytest.mark.skipif(
    os.environ.get("UILINT_BROWSER_TESTS") != "1",
    reason="set UILINT_BROWSER_TESTS=1 to drive a real Chromium",
)
class TestDashboardBrowser:
    def test_layout_runs_every_viewport(self):
        result = _run_uilint("layout", "--config", str(DASHBOARD_DIR / "uilint.yaml"),
                             "--viewports", "mobile,wide", "--format", "compact", "--verbose")
        assert result.returncode in (0, 2), result.stderr
        reports = [json.loads(line) for line in result.stdout.splitlines() if line.strip()]
        for report in reports:
            validate_report(report)
        tags = [r["viewTag"] for r in reports]
        assert tags == [
            "dashboard-iphone-initial",
            "dashboard-iphone-menu-open",
            "dashboard-wide-initial",
        ]
        assert "[uilint] plan: 2 entries" in result.stderr

"""
Layout pipeline runner.

Two modes:

1. Config-driven (recommended):
       uilint layout                      # reads uilint.yaml
       uilint layout --config ci.yaml     # explicit config
   uilint runs the build, serves dist_dir, expands every scenario across its
   viewports, drives each (scenario, viewport) pair in its own browser page,
   and prints one JSON report per snapshot.

2. Programmatic (for library use or custom harnesses):
       reports = asyncio.run(run_layout(load_config()))

Config file schema (uilint.yaml):

    version: 1
    dist_dir: dist
    build: "npm run build"           # optional, runs in the config directory
    server:
      host: 127.0.0.1
      port: 4317                      # next free port is used if taken
    scenarios:
      home:
        module: uilint/scenarios/home.py
        export: scenario              # default "scenario"
        viewports: [mobile, desktop]  # default: every preset
    viewports:                        # extra presets
      kiosk: {width: 1080, height: 1920}
    viewport_groups:                  # extra or overriding groups
      portrait: [iphone, kiosk]
    workers: 4                        # default min(4, cpu count)
    snapshots_dir: .uilint/snapshots  # optional: save measured snapshots
    output:
      format: json                    # json | compact
"""
from __future__ import annotations

import asyncio
import contextlib
import subprocess
import sys
from pathlib import Path
from typing import Callable

from uilint.layout.engine import LayoutReport, _import_file, format_report
from uilint.scheduler import PlanEntry, default_worker_count, run_plan_with_concurrency
from uilint.viewports import Viewport, ViewportCatalog


DEFAULT_EXPORT = "scenario"
OUTPUT_FORMATS = ("json", "compact")


# ── Config loading ─────────────────────────────────────────────────────────────

def load_config(path: "str | Path | None" = None) -> dict:
    """
    Load and normalise a uilint.yaml config file.

    Searches the current directory by default.  Raises FileNotFoundError
    if not found and ValueError if the YAML is malformed or required keys
    are missing.
    """
    import yaml

    candidates = [path] if path else ["uilint.yaml", ".uilint.yaml", "uilint.yml"]
    config_path = None
    for c in candidates:
        if Path(c).exists():
            config_path = Path(c)
            break

    if config_path is None:
        searched = ", ".join(str(c) for c in candidates)
        raise FileNotFoundError(
            f"No uilint config found.  Searched: {searched}\n"
            f"Run `uilint init` to create one."
        )

    with open(config_path) as f:
        try:
            raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {config_path}: {e}") from e

    return _normalise_config(raw, config_path.resolve().parent)


def _normalise_config(raw: dict, base_dir: Path) -> dict:
    """Apply defaults, validate required fields, resolve paths."""
    if not isinstance(raw, dict):
        raise ValueError("Config must be a mapping at the top level.")
    cfg = dict(raw)

    if "dist_dir" not in cfg:
        raise ValueError("Config is missing required key: 'dist_dir'")

    scenarios = cfg.get("scenarios")
    if not scenarios:
        raise ValueError("Config 'scenarios' is empty.  Declare at least one scenario.")
    if not isinstance(scenarios, dict):
        raise ValueError("Config 'scenarios' must map scenario names to entries.")

    normalised = {}
    for key, entry in scenarios.items():
        if isinstance(entry, str):
            entry = {"module": entry}
        if not isinstance(entry, dict) or not entry.get("module"):
            raise ValueError(f"Scenario {key!r} needs a 'module' path.")
        tokens = entry.get("viewports")
        if isinstance(tokens, str):
            tokens = [t.strip() for t in tokens.split(",") if t.strip()]
        normalised[str(key)] = {
            "module":    str(entry["module"]),
            "export":    entry.get("export", DEFAULT_EXPORT),
            "viewports": list(tokens) if tokens else None,
        }
    cfg["scenarios"] = normalised

    server = cfg.get("server") or {}
    cfg["server"] = {
        "host": server.get("host", "127.0.0.1"),
        "port": int(server.get("port", 4317)),
    }

    for name, size in (cfg.get("viewports") or {}).items():
        if not isinstance(size, dict) or "width" not in size or "height" not in size:
            raise ValueError(f"Viewport {name!r} needs 'width' and 'height'.")
    ViewportCatalog.from_config(cfg)

    workers = cfg.get("workers")
    if workers is not None and (isinstance(workers, bool) or not isinstance(workers, int) or workers < 1):
        raise ValueError(f"Config 'workers' must be a positive integer, got {workers!r}")

    fmt = (cfg.get("output") or {}).get("format", "json")
    if fmt not in OUTPUT_FORMATS:
        raise ValueError(f"output.format must be one of {', '.join(OUTPUT_FORMATS)}, got {fmt!r}")
    cfg["_format"] = fmt

    cfg["_base_dir"] = base_dir
    cfg["_dist_dir"] = base_dir / cfg["dist_dir"]
    snaps = cfg.get("snapshots_dir")
    cfg["_snapshots_dir"] = base_dir / snaps if snaps else None
    return cfg


# ── Plan building ──────────────────────────────────────────────────────────────

def resolve_scenario_keys(cfg: dict, requested: str = "all") -> "list[str]":
    scenarios = cfg["scenarios"]
    if requested == "all":
        return list(scenarios)
    if requested not in scenarios:
        raise ValueError(
            f"Unknown scenario {requested!r}. Available: {', '.join(scenarios)} or \"all\"."
        )
    return [requested]


def resolve_scenario_viewports(
    cfg: dict,
    scenario: dict,
    tokens: "list[str] | None" = None,
    override: "Viewport | None" = None,
) -> "list[Viewport]":
    """CLI tokens, else the scenario's own tokens, else every preset."""
    catalog = ViewportCatalog.from_config(cfg)
    return catalog.resolve(tokens or scenario.get("viewports"), override)


def build_plan(
    cfg: dict,
    scenario_keys: "list[str]",
    make_run: "Callable[[str, dict, Viewport], Callable]",
    tokens: "list[str] | None" = None,
    override: "Viewport | None" = None,
) -> "list[PlanEntry]":
    """Scenario-major list of (scenario, viewport) entries."""
    plan = []
    for key in scenario_keys:
        scenario = cfg["scenarios"][key]
        for viewport in resolve_scenario_viewports(cfg, scenario, tokens, override):
            plan.append(PlanEntry(
                scenario_key=key,
                scenario=scenario,
                viewport=viewport,
                run=make_run(key, scenario, viewport),
            ))
    return plan


def load_scenario(module_path: "str | Path", export: str = DEFAULT_EXPORT):
    """Import a scenario file and return its export (function or ScenarioDefinition)."""
    from uilint.browser.runtime import ScenarioDefinition

    path = Path(module_path)
    if not path.exists():
        raise FileNotFoundError(f"Scenario module not found: {path}")
    mod = _import_file(path)
    candidate = getattr(mod, export, None)
    if isinstance(candidate, ScenarioDefinition) or callable(candidate):
        return candidate
    raise ValueError(f"Scenario export {export!r} in {path} is not a function.")


# ── Stage runners ──────────────────────────────────────────────────────────────

def run_build_step(cmd: "str | None", base_dir: Path, verbose: bool = False) -> None:
    """Run the configured build command in base_dir.  Raises on non-zero exit."""
    if not cmd:
        return
    if verbose:
        print(f"[uilint] build: {cmd}", file=sys.stderr)
    result = subprocess.run(
        cmd,
        shell=True,
        capture_output=True,
        text=True,
        cwd=str(base_dir),
    )
    if result.returncode != 0:
        raise RuntimeError(
            f"build command failed (exit {result.returncode}):\n"
            f"  cmd: {cmd}\n"
            f"  stderr: {result.stderr.strip()}"
        )
    if verbose and result.stderr.strip():
        print(f"[build] {result.stderr.strip()}", file=sys.stderr)


@contextlib.asynccontextmanager
async def launch_chromium(headless: bool = True):
    """One headless Chromium for the whole run."""
    from playwright.async_api import async_playwright

    async with async_playwright() as p:
        browser = await p.chromium.launch(headless=headless)
        try:
            yield browser
        finally:
            await browser.close()


# ── Config-driven pipeline ─────────────────────────────────────────────────────

async def run_layout(
    cfg: dict,
    scenario: str = "all",
    viewport_tokens: "list[str] | None" = None,
    viewport_override: "Viewport | None" = None,
    workers: "int | None" = None,
    skip_build: bool = False,
    verbose: bool = False,
    launch_browser=launch_chromium,
) -> "list[LayoutReport]":
    """
    Run every (scenario, viewport) pair and return reports in plan order.

    Configuration problems (unknown scenario, bad viewport token, missing
    scenario module) raise before the build runs or a browser starts.

    Args:
        cfg:               normalised config from load_config()
        scenario:          scenario key, or "all"
        viewport_tokens:   overrides every scenario's viewport tokens
        viewport_override: single ad hoc viewport; wins over tokens
        workers:           pool size (default: config, then min(4, cpus))
        skip_build:        do not run the build command
        verbose:           print progress to stderr
        launch_browser:    async context manager yielding a browser
    """
    from uilint.browser.runtime import ScenarioRuntime, run_scenario
    from uilint.server import start_static_server

    keys = resolve_scenario_keys(cfg, scenario)
    base_dir = cfg["_base_dir"]
    loaded = {
        key: load_scenario(base_dir / cfg["scenarios"][key]["module"], cfg["scenarios"][key]["export"])
        for key in keys
    }

    state = {}

    def make_run(key: str, entry: dict, viewport: Viewport):
        async def run():
            page = await state["browser"].new_page(viewport=viewport.size)
            try:
                runtime = ScenarioRuntime(
                    page, viewport, state["base_url"], key,
                    snapshots_dir=cfg["_snapshots_dir"],
                )
                return await run_scenario(loaded[key], runtime)
            finally:
                await page.close()
        return run

    plan = build_plan(cfg, keys, make_run, viewport_tokens, viewport_override)
    count = workers or cfg.get("workers") or default_worker_count()
    if verbose:
        print(f"[uilint] plan: {len(plan)} entr{'y' if len(plan) == 1 else 'ies'}, "
              f"{max(1, min(count, len(plan)))} worker(s)", file=sys.stderr)

    if not skip_build:
        run_build_step(cfg.get("build"), base_dir, verbose=verbose)

    server = start_static_server(cfg["_dist_dir"], cfg["server"]["host"], cfg["server"]["port"])
    if verbose:
        print(f"[uilint] serving {cfg['_dist_dir']} at {server.base_url}", file=sys.stderr)

    def on_event(entry: PlanEntry):
        if verbose:
            print(f"[uilint]   {entry.label}: {entry.state.value}", file=sys.stderr)

    try:
        state["base_url"] = server.base_url
        async with launch_browser() as browser:
            state["browser"] = browser
            results = await run_plan_with_concurrency(plan, count, on_event=on_event)
    finally:
        server.close()

    return [report for result in results if result for report in result]


def run_layout_from_config(
    config: "dict | str | Path | None" = None,
    scenario: str = "all",
    viewport_tokens: "list[str] | None" = None,
    viewport_override: "Viewport | None" = None,
    workers: "int | None" = None,
    skip_build: bool = False,
    output_format: "str | None" = None,
    verbose: bool = False,
) -> "list[LayoutReport]":
    """
    Load the config, run the layout pipeline, print each report to stdout.

    Args:
        config:        path to config file, or already-loaded dict, or None (auto-discover)
        output_format: "json" (indented) or "compact"; default from config
    """
    if not isinstance(config, dict):
        cfg = load_config(config)
    else:
        cfg = config

    reports = asyncio.run(run_layout(
        cfg,
        scenario=scenario,
        viewport_tokens=viewport_tokens,
        viewport_override=viewport_override,
        workers=workers,
        skip_build=skip_build,
        verbose=verbose,
    ))

    compact = (output_format or cfg.get("_format", "json")) == "compact"
    for report in reports:
        print(format_report(report.to_dict(), compact=compact))
    return reports

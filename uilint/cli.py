"""
uilint CLI

Primary usage — driven by uilint.yaml config file:

    uilint layout                          # every scenario × every viewport
    uilint layout --scenario home          # one scenario
    uilint layout --viewports mobile,wide  # viewport groups / presets / name=WxH
    uilint layout --viewport 1024x768      # single ad hoc viewport
    uilint layout --format compact         # one JSON line per report
    uilint layout --config ci/uilint.yaml  # explicit config

Reports go to stdout (one JSON document per snapshot); the human summary
goes to stderr.  Exit status: 0 all clean, 2 violations, 1 error.

Other subcommands (no browser needed):

    uilint evaluate --spec specs/home.py --snapshots snap.json
    uilint evaluate --spec specs/home.py:HOME --snapshots -   # stdin
    uilint init [DIR]                                         # scaffold a new project
"""

import argparse
import sys
from pathlib import Path


def cmd_layout(args):
    """
    Run every (scenario, viewport) pair declared in uilint.yaml.

    Builds, serves dist_dir, drives each pair in its own browser page and
    prints one report per snapshot to stdout.
    """
    from uilint.runner import run_layout_from_config
    from uilint.viewports import parse_viewport_override, split_tokens

    try:
        override = parse_viewport_override(args.viewport) if args.viewport else None
        reports = run_layout_from_config(
            config=args.config,
            scenario=args.scenario or "all",
            viewport_tokens=split_tokens(args.viewports) if args.viewports else None,
            viewport_override=override,
            workers=args.workers,
            skip_build=args.skip_build,
            output_format=args.format,
            verbose=args.verbose,
        )
    except FileNotFoundError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    except (ValueError, RuntimeError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if not args.quiet:
        _print_summary(reports, file=sys.stderr)

    return 0 if all(r.ok for r in reports) else 2


def cmd_evaluate(args):
    """
    Evaluate a spec against a saved snapshots document.  No browser, no server.
    Reads the document from --snapshots FILE or stdin.
    """
    from uilint.layout.engine import load_spec, run_evaluation

    try:
        spec = load_spec(args.spec)
        report = run_evaluation(
            spec,
            args.snapshots or "-",
            output_path=args.out,
            compact=args.format == "compact",
        )
    except FileNotFoundError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if not args.quiet:
        _print_summary([report], file=sys.stderr)
    return 0 if report.ok else 2


def cmd_init(args):
    """Scaffold a new uilint project."""
    from uilint.scaffold import init_project
    target = Path(args.dir or ".")
    init_project(target)
    return 0


def _print_summary(reports, file=sys.stderr) -> None:
    """One line per report, then the failing constraints grouped under it."""
    if not reports:
        print("\n  no snapshots were taken\n", file=file)
        return

    width = max(len(_report_label(r)) for r in reports)
    for r in reports:
        sym  = "✓" if r.ok else "✗"
        size = f"{r.view_size['width']:g}x{r.view_size['height']:g}"
        print(f"  {sym} {_report_label(r):<{width}}  {size:>10}  {r.viewport_class.value}", file=file)
        for v in r.violations:
            print(f"      • {v.constraint}: {v.message}", file=file)

    failing = sum(1 for r in reports if not r.ok)
    total   = sum(len(r.violations) for r in reports)
    if failing:
        print(f"\n  {failing}/{len(reports)} snapshots with violations ({total} total)\n", file=file)
    else:
        print(f"\n  ALL {len(reports)} SNAPSHOTS CLEAN\n", file=file)


def _report_label(report) -> str:
    return report.view_tag or f"{report.scenario_name}/{report.snapshot_name}"


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="uilint",
        description=(
            "Layout linter — check geometric relations between page elements\n"
            "across scenarios and viewports.\n\n"
            "Quickstart:\n"
            "  uilint init        scaffold a new project\n"
            "  uilint layout      run every scenario (reads uilint.yaml)"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # ── layout ────────────────────────────────────────────────────────────────
    p_layout = sub.add_parser(
        "layout",
        help="Run scenarios across viewports in a headless browser (reads uilint.yaml)",
        description=(
            "Build → serve → for each (scenario, viewport): open a page, run the\n"
            "scenario, evaluate each snapshot.  Add this to CI after your build."
        ),
    )
    p_layout.add_argument(
        "--config", metavar="FILE",
        help="Config file (default: uilint.yaml in current directory)",
    )
    p_layout.add_argument(
        "--scenario", metavar="NAME",
        help='Run a single scenario by key (default: "all")',
    )
    p_layout.add_argument(
        "--viewport", metavar="WxH",
        help="Run at one ad hoc size, e.g. 1024x768 (wins over --viewports)",
    )
    p_layout.add_argument(
        "--viewports", metavar="LIST",
        help="Comma-separated groups, presets or name=WxH (overrides config)",
    )
    p_layout.add_argument(
        "--workers", type=int, metavar="N",
        help="Concurrent browser pages (default: config, then min(4, cpus))",
    )
    p_layout.add_argument(
        "--format", choices=["json", "compact"],
        help="Report format on stdout (default: config output.format, then json)",
    )
    p_layout.add_argument("--skip-build", action="store_true", help="Do not run the build command")
    p_layout.add_argument("--quiet",      action="store_true", help="Suppress the summary on stderr")
    p_layout.add_argument("--verbose",    action="store_true", help="Print stage info to stderr")
    p_layout.set_defaults(func=cmd_layout)

    # ── evaluate ──────────────────────────────────────────────────────────────
    p_eval = sub.add_parser(
        "evaluate",
        help="Evaluate a spec against a saved snapshots JSON document",
    )
    p_eval.add_argument(
        "--spec", required=True, metavar="FILE[:NAME]",
        help="Python file defining the layout spec; NAME picks one of several",
    )
    p_eval.add_argument(
        "--snapshots", metavar="FILE",
        help="Snapshots JSON file; omit or use '-' to read from stdin",
    )
    p_eval.add_argument("--format", choices=["json", "compact"], default="json")
    p_eval.add_argument("--out",    metavar="FILE", help="Save report JSON here (default: stdout)")
    p_eval.add_argument("--quiet",  action="store_true")
    p_eval.set_defaults(func=cmd_evaluate)

    # ── init ──────────────────────────────────────────────────────────────────
    p_init = sub.add_parser("init", help="Scaffold a new uilint project in DIR (default: cwd)")
    p_init.add_argument("dir", nargs="?", metavar="DIR")
    p_init.set_defaults(func=cmd_init)

    args = parser.parse_args(argv)
    sys.exit(args.func(args))


if __name__ == "__main__":
    main()

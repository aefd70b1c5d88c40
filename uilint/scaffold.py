"""
Scaffold a new uilint project with the minimal file set.
Called by `uilint init [DIR]`.
"""
from pathlib import Path

_SPEC_PY = '''\
"""
uilint/specs/home_layout.py — layout rules for the home page.

Declare elements with ctx.el() / ctx.group() and attach relations with
ctx.must().  Use ctx.must_ref() for rules that depend on the viewport.
"""
from uilint import define_layout_spec
from uilint.constraints import below, between, eq, for_all, gte, inside, width_in


def home_layout(ctx):
    header = ctx.el("header")
    main   = ctx.el("main")
    footer = ctx.el("footer")
    cards  = ctx.group(".card")

    ctx.must(
        inside(header, ctx.view, top=eq(0), left=eq(0)),
        below(main, header, between(0, 20)),
        below(footer, main, between(0, 100)),
    )
    ctx.must_ref(lambda rt: for_all(cards, lambda c: width_in(c, rt.responsive(
        mobile=gte(280),
        tablet=gte(240),
        desktop=gte(200),
    ))))


HOME_LAYOUT = define_layout_spec(home_layout, name="home")
'''

_SCENARIO_PY = '''\
"""
uilint/scenarios/home.py — drive the page and take layout snapshots.

Each rt.snapshot() call measures the page as it is at that moment and
produces one report.
"""
from pathlib import Path

from uilint import define_scenario, load_spec

HOME_LAYOUT = load_spec(Path(__file__).parent.parent / "specs" / "home_layout.py")


async def run(rt):
    await rt.goto("/")
    await rt.snapshot("initial", HOME_LAYOUT)


scenario = define_scenario("home", run)
'''

_CONFIG_YAML = '''\
version: 1

# Directory served to the browser (your build output)
dist_dir: dist

# Optional build command, run from this directory before serving
# build: "npm run build"

server:
  host: 127.0.0.1
  port: 4317

scenarios:
  home:
    module: uilint/scenarios/home.py
    # viewports: [mobile, desktop]   # default: every preset

# viewports:
#   kiosk: {width: 1080, height: 1920}

output:
  format: json
'''

_INDEX_HTML = '''\
<!doctype html>
<html>
  <head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>uilint starter</title>
    <style>
      body { margin: 0; font-family: sans-serif; }
      header { height: 60px; background: #223; color: #fff; }
      main { display: flex; flex-wrap: wrap; gap: 16px; padding: 16px; }
      .card { flex: 1 1 280px; height: 120px; background: #eef; }
      footer { height: 40px; background: #ccd; }
    </style>
  </head>
  <body>
    <header>Header</header>
    <main>
      <div class="card">One</div>
      <div class="card">Two</div>
      <div class="card">Three</div>
    </main>
    <footer>Footer</footer>
  </body>
</html>
'''

_GITIGNORE = '''\
.uilint/
__pycache__/
'''


def init_project(target: Path) -> "list[Path]":
    """Create the starter files under target.  Existing files are left alone."""
    target = Path(target)
    uilint_dir = target / "uilint"
    (uilint_dir / "specs").mkdir(parents=True, exist_ok=True)
    (uilint_dir / "scenarios").mkdir(parents=True, exist_ok=True)
    (target / "dist").mkdir(parents=True, exist_ok=True)

    files = {
        target     / "uilint.yaml":                _CONFIG_YAML,
        uilint_dir / "specs" / "home_layout.py":   _SPEC_PY,
        uilint_dir / "scenarios" / "home.py":      _SCENARIO_PY,
        target     / "dist" / "index.html":        _INDEX_HTML,
        target     / ".gitignore":                 _GITIGNORE,
    }

    created = []
    skipped = []
    for path, content in files.items():
        if path.exists():
            skipped.append(path.relative_to(target))
        else:
            path.write_text(content)
            created.append(path.relative_to(target))

    print(f"\n✓ uilint project initialised in {target}\n")
    for f in created:
        print(f"  created  {f}")
    for f in skipped:
        print(f"  skipped  {f}  (already exists)")

    print("""
Layout:

  uilint.yaml                  ← pipeline config
  uilint/specs/*.py            ← layout specs (what must hold)
  uilint/scenarios/*.py        ← scenarios (how to reach each page state)
  dist/                        ← served to the browser

Next steps:

  1. Point  dist_dir  at your build output and set  build:  if needed.

  2. Edit  uilint/specs/home_layout.py  — declare your elements and rules.

  3. Edit  uilint/scenarios/home.py  — navigate and take snapshots.

  4. Run:  uilint layout

  Install a browser once with:  playwright install chromium
""")
    return created

"""
Load the dashboard, check it, then open the phone menu and check that too.
"""
from pathlib import Path

from uilint import ViewportClass, define_scenario, load_spec

SPECS = Path(__file__).parent.parent / "specs"

DASHBOARD = load_spec(SPECS / "dashboard_layout.py")
MENU_OPEN = load_spec(SPECS / "menu_layout.py")


async def run(rt):
    await rt.goto("/")
    await rt.snapshot("initial", DASHBOARD)

    if rt.viewport_class is ViewportClass.MOBILE:
        await rt.page.click("#menu-toggle")
        await rt.snapshot("menu-open", MENU_OPEN)


scenario = define_scenario("dashboard", run)

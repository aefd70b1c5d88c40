"""
Mobile navigation once the menu button has been pressed.
"""
from uilint import define_layout_spec
from uilint.constraints import (
    aligned_vertically_left,
    below,
    eq,
    for_all,
    inside,
    single_line_text,
    visible,
)


def menu_open(ctx):
    header = ctx.el("#header")
    nav    = ctx.el("#nav")
    links  = ctx.group("#nav a")

    ctx.must(
        visible(nav),
        below(nav, header, eq(0)),
        inside(nav, ctx.view, left=eq(0), right=eq(0)),
        aligned_vertically_left(links, 1),
        for_all(links, single_line_text),
    )


MENU_OPEN = define_layout_spec(menu_open)

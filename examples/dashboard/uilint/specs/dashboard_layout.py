"""
Dashboard page: header bar, side navigation, grid of square tiles.

On phones the navigation is hidden behind the menu button and the grid
drops to two columns.
"""
from uilint import define_layout_spec
from uilint.constraints import (
    almost_squared,
    below,
    between,
    count_is,
    eq,
    for_all,
    gte,
    inside,
    right_of,
    single_line_text,
    table_layout,
    visible,
)


def dashboard(ctx):
    header = ctx.el("#header")
    title  = ctx.el("#title")
    nav    = ctx.el("#nav")
    tiles  = ctx.group(".tile")

    ctx.must(
        inside(header, ctx.view, top=eq(0), left=eq(0), right=eq(0)),
        single_line_text(title),
        count_is(tiles, eq(6)),
        for_all(tiles, lambda t: almost_squared(t, 0.15)),
    )

    def grid(columns):
        return table_layout(
            tiles, columns,
            horizontal_margin=between(8, 32),
            vertical_margin=between(8, 32),
        )

    ctx.must_ref(lambda rt: rt.responsive(
        mobile=[visible(nav, expect=False), grid(2)],
        tablet=[below(nav, header, eq(0)), grid(3)],
        desktop=[
            below(nav, header, eq(0)),
            grid(3),
            for_all(tiles, lambda t: right_of(t, nav, gte(16))),
        ],
    ))


DASHBOARD = define_layout_spec(dashboard)

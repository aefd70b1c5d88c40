"""
uilint.constraints — the relation library used inside layout specs.

Each module provides one family of relations.  Every relation returns a
layout constraint (a callable taking the RuntimeContext), so it can be
passed straight to ``ctx.must(...)`` or returned from a ``must_ref``
factory.

Available modules:
  from uilint.constraints.positions   import below, above, left_of, right_of, near, inside, on, centered
  from uilint.constraints.dimensions  import width_in, height_in, width_matches, height_matches, ratio
  from uilint.constraints.alignment   import aligned_horizontally, aligned_vertically, ...
  from uilint.constraints.text        import visible, present, text_equals, text_matches, ...
  from uilint.constraints.combinators import for_all, exists, none, count_is, amount_of_visible
  from uilint.constraints.extras      import almost_squared, table_layout, ...

Usage pattern:

    from uilint.constraints import below, for_all, width_in, between, gte

    def home(ctx):
        header = ctx.el("#header")
        menu   = ctx.el("#menu")
        cards  = ctx.group(".card")
        ctx.must(
            below(menu, header, between(0, 16)),
            for_all(cards, lambda c: width_in(c, gte(200))),
        )

Ranges (eq, gt, gte, lt, lte, between, approx, approx_relative, any_range)
are re-exported here for convenience.
"""

from uilint.layout.ranges import (
    Range, eq, gt, gte, lt, lte, between, approx, approx_relative, any_range,
)
from uilint.constraints.positions   import below, above, left_of, right_of, near, inside, on, centered
from uilint.constraints.dimensions  import width_in, height_in, width_matches, height_matches, ratio
from uilint.constraints.alignment   import (
    aligned_horizontally, aligned_vertically,
    aligned_horizontally_top, aligned_horizontally_bottom, aligned_horizontally_edges,
    aligned_vertically_left, aligned_vertically_right, aligned_vertically_edges,
)
from uilint.constraints.text        import (
    visible, present, text_equals, text_matches,
    text_does_not_overflow, text_lines_at_most, single_line_text,
)
from uilint.constraints.combinators import (
    for_all, exists, none, count_is, amount_of_visible, pairwise, windowed,
)
from uilint.constraints.extras      import (
    almost_squared, aligned_horiz_equal_gap, aligned_vert_equal_gap,
    table_layout, sides_horizontally_inside,
)

__all__ = [
    "Range", "eq", "gt", "gte", "lt", "lte", "between", "approx", "approx_relative", "any_range",
    "below", "above", "left_of", "right_of", "near", "inside", "on", "centered",
    "width_in", "height_in", "width_matches", "height_matches", "ratio",
    "aligned_horizontally", "aligned_vertically",
    "aligned_horizontally_top", "aligned_horizontally_bottom", "aligned_horizontally_edges",
    "aligned_vertically_left", "aligned_vertically_right", "aligned_vertically_edges",
    "visible", "present", "text_equals", "text_matches",
    "text_does_not_overflow", "text_lines_at_most", "single_line_text",
    "for_all", "exists", "none", "count_is", "amount_of_visible", "pairwise", "windowed",
    "almost_squared", "aligned_horiz_equal_gap", "aligned_vert_equal_gap",
    "table_layout", "sides_horizontally_inside",
]

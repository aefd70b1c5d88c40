"""
Tests for the uilint.constraints relation library.

Each test builds a handful of Elems directly (relations accept resolved
Elems as well as spec references) and checks the violations produced.
"""
import itertools
import random

import pytest

from uilint.layout.constraint import run_checks
from uilint.layout.elem import Elem, ElemSnapshot, FrameRect, TextMetrics
from uilint.layout.engine import RuntimeContext
from uilint.layout.spec import define_layout_spec
from uilint.constraints import (
    above, below, centered, inside, left_of, near, on, right_of,
    height_matches, ratio, width_in, width_matches,
    aligned_horizontally, aligned_horizontally_edges, aligned_vertically, aligned_vertically_left,
    present, single_line_text, text_does_not_overflow, text_equals, text_lines_at_most,
    text_matches, visible,
    amount_of_visible, count_is, exists, for_all, none, pairwise, windowed,
    aligned_horiz_equal_gap, aligned_vert_equal_gap, almost_squared,
    sides_horizontally_inside, table_layout,
    approx, between, eq, gte,
)
from uilint.constraints.extras import group_into_rows


EMPTY = define_layout_spec(lambda ctx: None, name="empty")
VIEW  = ElemSnapshot("view", box=FrameRect(0, 0, 1280, 800), view=FrameRect(0, 0, 1280, 800),
                     visible=True, present=True)


def E(name, left=0, top=0, width=0, height=0, *, canvas=None, visible=True, text="", metrics=None):
    box = FrameRect(left, top, width, height)
    return Elem(name, ElemSnapshot(
        selector=name, box=box, view=box, canvas=canvas or box,
        visible=visible, present=True, text=text, text_metrics=metrics,
    ))


def _check(source):
    return run_checks(RuntimeContext(EMPTY, {}, VIEW), source)


def _names(violations):
    return [v.constraint for v in violations]


HEADER = E("#header", 0, 0, 1280, 60)


# ── positions/gaps ────────────────────────────────────────────────────────────

class TestGapRelations:
    def test_below_within_range(self):
        menu = E("#menu", 0, 70, 1280, 40)
        assert _check(below(menu, HEADER, between(0, 16))) == []

    def test_below_out_of_range(self):
        menu = E("#menu", 0, 90, 1280, 40)
        violations = _check(below(menu, HEADER, between(0, 16)))
        assert len(violations) == 1
        v = violations[0]
        assert v.constraint == "below(#menu,#header)"
        assert v.message == "#menu is not below #header within expected range"
        assert v.details == {"diff": 30, "expected": "[0, 16]", "value": 30}

    def test_overlap_is_negative_gap(self):
        menu = E("#menu", 0, 50, 1280, 40)
        violations = _check(below(menu, HEADER, gte(0)))
        assert violations[0].details["diff"] == -10

    def test_above(self):
        menu = E("#menu", 0, 70, 1280, 40)
        assert _check(above(HEADER, menu, eq(10))) == []

    def test_left_of_and_right_of(self):
        a = E("#a", 0, 0, 100, 10)
        b = E("#b", 120, 0, 100, 10)
        assert _check(left_of(a, b, eq(20))) == []
        assert _check(right_of(b, a, eq(20))) == []
        assert _names(_check(left_of(b, a, gte(0)))) == ["left_of(#b,#a)"]

    def test_custom_name(self):
        menu = E("#menu", 0, 90, 1280, 40)
        assert _names(_check(below(menu, HEADER, between(0, 16), name="menu-gap"))) == ["menu-gap"]


# ── positions/near ────────────────────────────────────────────────────────────

class TestNear:
    def test_close_enough(self):
        a = E("#a", 110, 0, 50, 10)
        b = E("#b", 0, 0, 100, 10)
        assert _check(near(a, b, left=between(0, 20))) == []

    def test_too_far(self):
        a = E("#a", 150, 0, 50, 10)
        b = E("#b", 0, 0, 100, 10)
        violations = _check(near(a, b, left=between(0, 20)))
        assert _names(violations) == ["near(#a,#b).left"]
        assert "is not near" in violations[0].message

    def test_overlap_reported_separately(self):
        a = E("#a", 90, 0, 50, 10)
        b = E("#b", 0, 0, 100, 10)
        violations = _check(near(a, b, left=between(0, 20)))
        assert violations[0].message == "#a overlaps #b on left side"
        assert violations[0].details == {"diff": -10}

    def test_requires_a_side(self):
        with pytest.raises(ValueError):
            near(HEADER, HEADER)


# ── positions/inside ──────────────────────────────────────────────────────────

class TestInside:
    BOX = E("#box", 0, 0, 100, 100)

    def test_contained(self):
        assert _check(inside(E("#a", 10, 10, 50, 50), self.BOX)) == []

    def test_left_edge_outside(self):
        violations = _check(inside(E("#a", -5, 10, 50, 50), self.BOX))
        assert _names(violations) == ["inside(#a,#box).left"]
        assert violations[0].details["diff"] == -5

    @pytest.mark.parametrize("rect", [
        (10, 10, 50, 50), (-5, 10, 50, 50), (60, 60, 50, 50), (-1, -1, 200, 200),
    ])
    def test_default_equals_explicit_gte_zero(self, rect):
        a = E("#a", *rect)
        implicit = _check(inside(a, self.BOX))
        explicit = _check(inside(a, self.BOX, top=gte(0), right=gte(0), bottom=gte(0), left=gte(0)))
        assert [v.to_dict() for v in implicit] == [v.to_dict() for v in explicit]

    def test_only_listed_edges(self):
        a = E("#a", -2, 10, 500, 50)
        assert _check(inside(a, self.BOX, left=between(-4, 0))) == []


# ── positions/on + centered ───────────────────────────────────────────────────

class TestOnAndCentered:
    def test_on_horizontal(self):
        a = E("#a", 10, 0, 20, 10)
        b = E("#b", 0, 0, 100, 10)
        assert _check(on(a, b, horizontal=("left", "left", between(-16, -8)))) == []
        violations = _check(on(a, b, horizontal=("left", "left", eq(0))))
        assert _names(violations) == ["on(#a,#b).horizontal"]

    def test_on_validates_axes(self):
        with pytest.raises(ValueError):
            on(HEADER, HEADER)
        with pytest.raises(ValueError):
            on(HEADER, HEADER, horizontal=("top", "left", eq(0)))
        with pytest.raises(ValueError):
            on(HEADER, HEADER, vertical=("top", "bottom"))

    def test_centered(self):
        box = E("#box", 0, 0, 100, 100)
        assert _check(centered(E("#a", 40, 40, 20, 20), box, h=approx(0, 1), v=approx(0, 1))) == []
        violations = _check(centered(E("#a", 45, 40, 20, 20), box, h=approx(0, 1), v=approx(0, 1)))
        assert _names(violations) == ["centered(#a,#box).horizontal"]
        assert violations[0].details["diff"] == 5


# ── dimensions ────────────────────────────────────────────────────────────────

class TestDimensions:
    def test_width_in(self):
        assert _check(width_in(E("#a", 0, 0, 150, 10), between(100, 200))) == []
        violations = _check(width_in(E("#a", 0, 0, 250, 10), between(100, 200)))
        assert violations[0].message == "#a width=250 is out of range"
        assert violations[0].details["value"] == 250

    def test_width_matches_tolerance(self):
        ref = E("#ref", 0, 0, 104, 10)
        assert _check(width_matches(E("#a", 0, 0, 100, 10), ref, tolerance=0.05)) == []
        violations = _check(width_matches(E("#a", 0, 0, 90, 10), ref, tolerance=0.05))
        assert _names(violations) == ["width_matches(#a,#ref).tolerance"]

    def test_height_matches_ratio(self):
        ref = E("#ref", 0, 0, 10, 100)
        assert _check(height_matches(E("#a", 0, 0, 10, 50), ref, ratio=between(0.45, 0.55))) == []
        violations = _check(height_matches(E("#a", 0, 0, 10, 80), ref, ratio=between(0.45, 0.55)))
        assert violations[0].details["ratio"] == 0.8

    def test_ratio_zero_denominator(self):
        ref = E("#ref", 0, 0, 0, 10)
        violations = _check(width_matches(E("#a", 0, 0, 10, 10), ref, ratio=between(0, 1)))
        assert violations[0].message == "width ratio denominator is zero"
        assert _check(width_matches(E("#a", 0, 0, 0, 10), ref, ratio=between(0, 1))) == []

    def test_matches_needs_a_mode(self):
        with pytest.raises(ValueError):
            width_matches(HEADER, HEADER)
        with pytest.raises(ValueError):
            width_matches(HEADER, HEADER, tolerance=-0.1)

    def test_plain_ratio(self):
        assert _check(ratio(1, 2, 0.5, 0.01)) == []
        assert _check(ratio(1, 0, 0.5, 0.01))[0].message == "Ratio denominator is zero"
        assert _check(ratio(3, 4, 0.5, 0.01))[0].details["actual"] == 0.75


# ── alignment ─────────────────────────────────────────────────────────────────

class TestAlignment:
    def test_horizontal_center(self):
        group = [E("a", 0, 0, 10, 10), E("b", 20, 1, 10, 10), E("c", 40, 5, 10, 10)]
        violations = _check(aligned_horizontally(group, 2))
        assert _names(violations) == ["aligned_horizontally[2]"]
        assert violations[0].details == {"delta": 5, "tolerance": 2}

    def test_vertical_center(self):
        group = [E("a", 0, 0, 10, 10), E("b", 1, 20, 10, 10)]
        assert _check(aligned_vertically(group, 2)) == []

    def test_trivial_groups_pass(self):
        assert _check(aligned_horizontally([], 0)) == []
        assert _check(aligned_horizontally([E("a", 0, 0, 1, 1)], 0)) == []

    def test_left_edges(self):
        group = [E("a", 0, 0, 10, 10), E("b", 1, 20, 10, 10), E("c", 3, 40, 10, 10)]
        assert _names(_check(aligned_vertically_left(group, 2))) == ["aligned_vertically_left[2]"]

    def test_both_edges(self):
        group = [E("a", 0, 0, 10, 10), E("b", 20, 0, 10, 14)]
        violations = _check(aligned_horizontally_edges(group, 2))
        assert violations[0].details == {"top_delta": 0, "bottom_delta": 4, "tolerance": 2}


# ── text ──────────────────────────────────────────────────────────────────────

class TestText:
    def test_visible(self):
        assert _check(visible(E("#a"))) == []
        assert _check(visible(E("#a", visible=False)))[0].message == "#a is not visible"
        assert _check(visible(E("#a"), expect=False))[0].message == "#a should not be visible"

    def test_present(self):
        gone = Elem("#gone", ElemSnapshot("#gone"))
        assert _check(present(gone))[0].message == "#gone is not present"
        assert _check(present(gone, expect=False)) == []

    def test_text_equals(self):
        violations = _check(text_equals(E("#t", text="Hello"), "Hi"))
        assert violations[0].details == {"expected": "Hi", "actual": "Hello"}

    def test_text_matches(self):
        assert _check(text_matches(E("#t", text="3 items"), r"\d+ items")) == []
        assert _check(text_matches(E("#t", text="none"), r"\d+ items"))[0].details["pattern"] == r"\d+ items"

    def test_overflow_horizontal(self):
        el = E("#t", 0, 0, 100, 20, canvas=FrameRect(0, 0, 120, 20))
        violations = _check(text_does_not_overflow(el))
        assert _names(violations) == ["text_does_not_overflow(#t).horizontal"]
        assert violations[0].details == {"overflow": 20}

    def test_overflow_subpixel_slack(self):
        el = E("#t", 0, 0, 100, 20, canvas=FrameRect(0, 0, 101, 21))
        assert _check(text_does_not_overflow(el)) == []

    def test_text_bleed(self):
        metrics = TextMetrics(1, (), FrameRect(-5, 0, 50, 20))
        violations = _check(text_does_not_overflow(E("#t", 0, 0, 100, 20, metrics=metrics)))
        assert _names(violations) == ["text_does_not_overflow(#t).left"]

    def test_lines_at_most(self):
        el = E("#t", metrics=TextMetrics(3))
        violations = _check(text_lines_at_most(el, 2))
        assert violations[0].details == {"line_count": 3, "max_lines": 2}
        assert _check(text_lines_at_most(el, 3)) == []

    def test_lines_without_metrics(self):
        assert _names(_check(text_lines_at_most(E("#t"), 2))) == ["text_lines_at_most(#t,2).metrics"]

    @pytest.mark.parametrize("bad", [True, -1, 1.5, "2"])
    def test_lines_argument_validation(self, bad):
        with pytest.raises(ValueError):
            text_lines_at_most(E("#t"), bad)

    def test_single_line(self):
        assert _check(single_line_text(E("#t", 0, 0, 100, 20, metrics=TextMetrics(1)))) == []
        violations = _check(single_line_text(E("#t", 0, 0, 100, 20, metrics=TextMetrics(2))))
        assert _names(violations) == ["single_line_text(#t).max_lines"]


# ── combinators ───────────────────────────────────────────────────────────────

def _cards(*widths, visible=None):
    visible = visible or [True] * len(widths)
    return [E(f".card[{i}]", i * 300, 0, w, 100, visible=vis)
            for i, (w, vis) in enumerate(zip(widths, visible))]


class TestCombinators:
    def test_for_all_prefixes_index(self):
        violations = _check(for_all(_cards(250, 150, 300), lambda c: width_in(c, gte(200))))
        assert _names(violations) == ["for_all[1].width_in(.card[1]).width_in(.card[1])"]

    def test_for_all_empty(self):
        assert _check(for_all([], lambda c: width_in(c, gte(200)))) == []

    def test_exists_and_none_when_all_match(self):
        group = _cards(100, 100, 100)
        assert _check(exists(group, lambda c: visible(c))) == []
        violations = _check(none(group, lambda c: visible(c)))
        assert _names(violations) == ["none[0]"]
        assert violations[0].details == {"element": ".card[0]"}

    def test_exists_collects_details(self):
        group = _cards(100, 100, visible=[False, False])
        violations = _check(exists(group, lambda c: visible(c)))
        assert len(violations) == 1
        assert len(violations[0].details) == 2

    def test_none_finds_first_match(self):
        group = _cards(100, 100, 100, visible=[False, True, True])
        assert _names(_check(none(group, lambda c: visible(c)))) == ["none[1]"]

    def test_empty_group_asymmetry(self):
        failed = _check(exists([], lambda c: visible(c)))
        assert len(failed) == 1 and failed[0].details is None
        assert _check(none([], lambda c: visible(c))) == []

    def test_count_is(self):
        assert _check(count_is(_cards(1, 1, 1), eq(3))) == []
        assert _check(count_is(_cards(1, 1), eq(3)))[0].message == "Group size 2 is out of range"

    def test_amount_of_visible(self):
        assert _check(amount_of_visible(_cards(1, 1, 1, visible=[True, True, False]), eq(2))) == []
        violations = _check(amount_of_visible(_cards(1, 1, 1, visible=[True, False, False]), eq(2)))
        assert len(violations) == 1
        assert violations[0].details["value"] == 1
        assert violations[0].message == "Visible element count 1 is out of range"

    def test_pairwise_and_windowed(self):
        assert pairwise([1, 2, 3]) == [(1, 2), (2, 3)]
        assert pairwise([1]) == []
        assert windowed([1, 2, 3], 2) == [[1, 2], [2, 3]]
        assert windowed([1, 2], 3) == [] and windowed([1, 2], 0) == []


# ── extras ────────────────────────────────────────────────────────────────────

def _grid(rows, cols, *, size=100, gap=10):
    return [E(f".cell[{r * cols + c}]", c * (size + gap), r * (size // 2 + gap), size, size // 2)
            for r in range(rows) for c in range(cols)]


class TestExtras:
    def test_almost_squared(self):
        assert _check(almost_squared(E("#a", 0, 0, 100, 100))) == []
        assert _check(almost_squared(E("#a", 0, 0, 100, 0))) == []
        violations = _check(almost_squared(E("#a", 0, 0, 100, 50)))
        assert _names(violations) == ["almost_squared"]
        assert violations[0].details["actual"] == 2

    def test_equal_gap_compares_with_first_gap(self):
        items = [E("a", 0, 0, 10, 10), E("b", 20, 0, 10, 10), E("c", 40, 0, 10, 10), E("d", 65, 0, 10, 10)]
        random.Random(7).shuffle(items)
        violations = _check(aligned_horiz_equal_gap(items, 2))
        assert _names(violations) == ["equal_gap.gap(c,d)"]
        assert violations[0].details == {"gap": 15, "baseline": 10, "tolerance": 2}

    def test_equal_gap_vertical(self):
        items = [E("a", 0, 0, 10, 10), E("b", 0, 20, 10, 10), E("c", 0, 40, 10, 10)]
        assert _check(aligned_vert_equal_gap(items, 0)) == []
        assert _check(aligned_horiz_equal_gap(items[:2], 0)) == []

    def test_table_clean(self):
        cells = _grid(2, 3)
        assert _check(table_layout(cells, 3, horizontal_margin=between(8, 12),
                                   vertical_margin=between(8, 12))) == []

    def test_table_too_many_columns(self):
        names = _names(_check(table_layout(_grid(2, 3), 2)))
        assert names == ["table_layout.columns[row=0]", "table_layout.columns[row=1]"]

    def test_table_margins(self):
        cells = _grid(2, 3)
        cells[2] = E(".cell[2]", 240, 0, 100, 50)
        violations = _check(table_layout(cells, 3, horizontal_margin=between(8, 12),
                                         vertical_margin=between(0, 5)))
        assert _names(violations) == ["table_layout.h_margin[row=0,col=1]", "table_layout.v_margin[row=0]"]
        assert violations[0].details["margin"] == 30
        assert violations[1].details["row_below_index"] == 1

    def test_row_clustering_ignores_input_order(self):
        items = [E(f"i{n}", n * 50, n, 40, 40) for n in range(5)]
        for perm in itertools.permutations(items[:4]):
            rows = group_into_rows(list(perm) + [items[4]])
            assert len(rows) == 1
            assert [e.name for e in rows[0]] == ["i0", "i1", "i2", "i3", "i4"]

    def test_empty_table_passes(self):
        assert _check(table_layout([], 3)) == []

    def test_sides_inside(self):
        box = E("#row", 0, 0, 300, 50)
        items = [E("a", 10, 0, 80, 40), E("b", 110, 0, 80, 40), E("c", 210, 0, 80, 40)]
        assert _check(sides_horizontally_inside(items, box)) == []
        assert _check(sides_horizontally_inside(items, box, between(10, 10))) == []

    def test_sides_inside_problems(self):
        box = E("#row", 0, 0, 300, 50)
        items = [E("a", 10, 0, 80, 40), E("b", 85, 0, 80, 45), E("c", 220, 0, 90, 45)]
        names = _names(_check(sides_horizontally_inside(items, box)))
        assert names == [
            "sides_horizontally_inside.last.right",
            "sides_horizontally_inside.order[0]",
            "sides_horizontally_inside.height[0]",
        ]

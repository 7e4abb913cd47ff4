"""Tests for wrapping, backlog layout and frame painting."""

from __future__ import annotations

import math

import pytest

from tabchat.core.buffer import Buffer
from tabchat.core.renderer import (
    display_width,
    layout_backlog,
    paint,
    render,
    strip_unprintable,
    truncate,
    visible_input,
    wrap_message,
    wrap_text,
)
from tabchat.surface.emulated import EmulatedSurface

SHRUG = "\U0001f937"


class TestWidths:
    def test_ascii_is_one_cell(self):
        assert display_width("hello") == 5

    def test_wide_glyph_is_two_cells(self):
        assert display_width(SHRUG) == 2
        assert display_width("日本") == 4

    def test_truncate_never_splits_wide_glyph(self):
        assert truncate(SHRUG * 3, 5) == SHRUG * 2
        assert truncate("abc", 0) == ""
        assert truncate("abc", 10) == "abc"

    @pytest.mark.parametrize("ch", ["\x00", "\x07", "\x1b", "\x7f", "\x9b"])
    def test_strip_unprintable_drops_controls(self, ch):
        assert strip_unprintable(f"a{ch}b") == "ab"

    def test_strip_unprintable_keeps_text(self):
        assert strip_unprintable("héllo " + SHRUG) == "héllo " + SHRUG


class TestWrapText:
    @pytest.mark.parametrize("length,width", [(25, 10), (10, 10), (11, 10), (1, 1), (100, 7)])
    def test_unbroken_text_needs_ceil_lines(self, length, width):
        lines = wrap_text("x" * length, width)
        assert len(lines) == math.ceil(length / width)
        assert "".join(lines) == "x" * length

    def test_breaks_on_whitespace(self):
        assert wrap_text("hello world", 5) == ["hello", "world"]

    def test_fits_on_one_line(self):
        assert wrap_text("hello world", 20) == ["hello world"]

    def test_empty_message_is_one_empty_line(self):
        assert wrap_text("", 10) == [""]

    def test_lines_fit_width(self):
        text = "Lorem ipsum dolor sit amet, consectetur adipiscing elit. " * 5
        for line in wrap_text(text, 17):
            assert display_width(line) <= 17

    def test_wide_glyphs_respect_cells(self):
        lines = wrap_text(SHRUG * 10, 5)
        assert all(display_width(line) <= 5 for line in lines)
        assert "".join(lines) == SHRUG * 10

    def test_tabs_only_message(self):
        assert wrap_text("\t" * 30, 40) == [""]

    def test_embedded_newline_does_not_break_layout(self):
        lines = wrap_text("one\ntwo", 20)
        assert lines == ["one two"]

    def test_leading_whitespace_wider_than_width_is_dropped(self):
        assert wrap_text("      x", 3) == ["x"]

    def test_leading_whitespace_that_fits_is_kept(self):
        assert wrap_text("  x", 10) == ["  x"]


class TestWrapMessage:
    def test_continuation_prefix(self):
        lines = wrap_message("aaaa bbbb cccc", 4)
        assert lines == ["aaaa", "| bbbb", "| cccc"]

    def test_single_line_has_no_prefix(self):
        assert wrap_message("short", 10) == ["short"]

    def test_leading_whitespace_adds_no_blank_line(self):
        assert wrap_message("      x", 3) == ["x"]


class TestLayoutBacklog:
    def test_newest_at_bottom(self):
        assert layout_backlog(["a", "b", "c"], width=10, height=5) == ["a", "b", "c"]

    def test_keeps_most_recent_when_full(self):
        assert layout_backlog(["a", "b", "c"], width=10, height=2) == ["b", "c"]

    def test_oldest_visible_message_cut_from_top(self):
        lines = layout_backlog(["aaaa bbbb cccc"], width=4, height=2)
        assert lines == ["| bbbb", "| cccc"]

    def test_zero_height(self):
        assert layout_backlog(["a"], width=10, height=0) == []

    def test_never_exceeds_height(self):
        backlog = ["word " * 40 for _ in range(20)]
        assert len(layout_backlog(backlog, width=15, height=7)) == 7


class TestRender:
    def test_cursor_column_counts_prompt(self):
        buf = Buffer(prompt="[user] ")
        buf.insert("abc")
        buf.move_cursor(-1)
        frame = render(buf, rows=10, cols=40)
        assert frame.cursor_col == len("[user] ") + 2
        assert frame.input_line == "[user] abc"

    def test_cursor_column_uses_cells(self):
        buf = Buffer()
        buf.insert(SHRUG + "a")
        frame = render(buf, rows=5, cols=40)
        assert frame.cursor_col == 3

    def test_topic_truncated_to_width(self):
        buf = Buffer(topic=SHRUG * 300)
        frame = render(buf, rows=10, cols=21)
        assert display_width(frame.topic) <= 21

    def test_backlog_anchored_above_separator(self):
        buf = Buffer()
        buf.append_message("only")
        frame = render(buf, rows=10, cols=40)
        assert frame.backlog_lines == ["only"]
        assert frame.backlog_top == 7
        assert frame.separator_row == 8
        assert frame.input_row == 9

    @pytest.mark.parametrize("rows,cols", [(0, 10), (10, 0), (-1, -1)])
    def test_degenerate_size_renders_nothing(self, rows, cols):
        buf = Buffer(topic="t")
        buf.append_message("m")
        frame = render(buf, rows=rows, cols=cols)
        assert frame.backlog_lines == []
        assert frame.topic == ""


class TestPaint:
    def _paint(self, buf, rows, cols):
        surface = EmulatedSurface(rows=rows, cols=cols)
        paint(render(buf, rows, cols), surface)
        return surface

    def test_layout_rows(self):
        buf = Buffer(prompt="> ", topic="room")
        buf.append_message("first")
        buf.append_message("second")
        buf.insert("typing")
        surface = self._paint(buf, rows=6, cols=20)

        assert surface.line(0) == "room"
        assert surface.is_highlighted(0, 19)
        assert surface.line(1) == ""
        assert surface.line(2) == "first"
        assert surface.line(3) == "second"
        assert surface.is_highlighted(4, 0)
        assert not surface.is_highlighted(5, 0)
        assert surface.line(5) == "> typing"
        assert surface.cursor == (5, 8)

    def test_two_rows_has_separator_and_input(self):
        buf = Buffer(topic="room")
        buf.append_message("hidden")
        buf.insert("x")
        surface = self._paint(buf, rows=2, cols=10)
        assert surface.line(0) == ""
        assert surface.is_highlighted(0, 0)
        assert surface.line(1) == "x"

    def test_single_row_is_input_only(self):
        buf = Buffer(topic="room")
        buf.insert("abc")
        surface = self._paint(buf, rows=1, cols=10)
        assert surface.line(0) == "abc"

    def test_long_input_scrolls_to_keep_cursor_visible(self):
        buf = Buffer()
        buf.insert("abcdefghijklmnop")
        surface = self._paint(buf, rows=5, cols=10)
        assert surface.line(4) == "hijklmnop"
        assert surface.cursor == (4, 9)

    def test_long_input_with_cursor_at_start_is_not_scrolled(self):
        buf = Buffer()
        buf.insert("abcdefghijklmnop")
        buf.move_to_start()
        surface = self._paint(buf, rows=5, cols=10)
        assert surface.line(4) == "abcdefghij"
        assert surface.cursor == (4, 0)

    def test_nul_in_backlog_and_topic_is_not_drawn(self):
        buf = Buffer(topic="to\x00pic")
        buf.append_message("a\x00b")
        surface = self._paint(buf, rows=5, cols=10)
        assert surface.line(0) == "topic"
        assert surface.line(2) == "ab"


class TestVisibleInput:
    def test_fits_without_scrolling(self):
        assert visible_input("> hello", 7, 20) == ("> hello", 7)

    def test_scrolls_by_whole_characters(self):
        assert visible_input("x" * 30, 30, 10) == ("x" * 9, 9)

    def test_wide_glyphs_scroll_in_cells(self):
        text, col = visible_input(SHRUG * 8, 16, 10)
        assert col <= 9
        assert display_width(text) <= 10
        assert text == SHRUG * 4

    def test_zero_columns(self):
        assert visible_input("abc", 3, 0) == ("", 0)

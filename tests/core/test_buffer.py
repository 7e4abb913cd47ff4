"""Tests for Buffer editing and backlog bounds."""

from __future__ import annotations

from tabchat.core.buffer import Buffer


def _buffer_with(text: str) -> Buffer:
    buf = Buffer()
    buf.insert(text)
    return buf


class TestEditing:
    """Cursor always stays within 0..len(input)."""

    def test_insert_appends_at_end(self):
        buf = _buffer_with("hi")
        assert buf.input_text == "hi"
        assert buf.cursor == 2

    def test_insert_in_the_middle(self):
        buf = _buffer_with("hllo")
        buf.move_to_start()
        buf.move_cursor(1)
        buf.insert("e")
        assert buf.input_text == "hello"
        assert buf.cursor == 2

    def test_backspace_at_start_is_noop(self):
        buf = _buffer_with("abc")
        buf.move_to_start()
        assert buf.delete_before_cursor() is False
        assert buf.input_text == "abc"
        assert buf.cursor == 0

    def test_backspace_removes_left_of_cursor(self):
        buf = _buffer_with("abc")
        buf.move_cursor(-1)
        assert buf.delete_before_cursor() is True
        assert buf.input_text == "ac"
        assert buf.cursor == 1

    def test_delete_at_end_is_noop(self):
        buf = _buffer_with("abc")
        assert buf.delete_at_cursor() is False
        assert buf.input_text == "abc"

    def test_delete_under_cursor(self):
        buf = _buffer_with("abc")
        buf.move_to_start()
        assert buf.delete_at_cursor() is True
        assert buf.input_text == "bc"
        assert buf.cursor == 0

    def test_move_cursor_clamps(self):
        buf = _buffer_with("ab")
        assert buf.move_cursor(5) is False
        assert buf.cursor == 2
        assert buf.move_cursor(-10) is True
        assert buf.cursor == 0
        assert buf.move_cursor(-1) is False

    def test_drain_to_cursor(self):
        buf = _buffer_with("hello world")
        buf.move_cursor(-5)
        assert buf.drain_to_cursor() == "hello "
        assert buf.input_text == "world"
        assert buf.cursor == 0

    def test_take_input_clears(self):
        buf = _buffer_with("line")
        buf.move_cursor(-2)
        assert buf.take_input() == "line"
        assert buf.input == []
        assert buf.cursor == 0

    def test_insert_empty_string_does_nothing(self):
        buf = _buffer_with("x")
        buf.insert("")
        assert buf.input_text == "x"
        assert buf.cursor == 1


class TestBacklog:
    def test_messages_keep_order(self):
        buf = Buffer()
        for text in ("one", "two", "three"):
            buf.append_message(text)
        assert list(buf.backlog) == ["one", "two", "three"]

    def test_bound_drops_oldest(self):
        buf = Buffer(max_backlog=2)
        for text in ("one", "two", "three"):
            buf.append_message(text)
        assert list(buf.backlog) == ["two", "three"]

    def test_unbounded_backlog(self):
        buf = Buffer(max_backlog=None)
        for i in range(5000):
            buf.append_message(str(i))
        assert len(buf.backlog) == 5000

    def test_empty_message_is_kept(self):
        buf = Buffer()
        buf.append_message("")
        assert list(buf.backlog) == [""]

    def test_prompt_and_topic(self):
        buf = Buffer()
        buf.set_prompt("[user] ")
        buf.set_topic("welcome")
        assert buf.prompt == "[user] "
        assert buf.topic == "welcome"

"""Headless terminal surface backed by a pyte virtual screen.

Draw calls are encoded as the ANSI sequences a real terminal would receive
and fed through ``pyte.ByteStream``, so what the tests read back is what a
VT100 would show. Keys are scripted with ``feed_keys``/``type_text``.

DIMENSION ORDERING:
- Our API uses (rows, cols) like curses ``getmaxyx``
- pyte uses Screen(columns, lines) and resize(lines, columns)
"""

from __future__ import annotations

from collections import deque
from typing import Callable, Deque, Optional, Tuple

import pyte

from ..core.keys import Attr, Event, RESIZE, keys_for_text
from ..core.renderer import strip_unprintable, truncate

_SGR = {
    Attr.NORMAL: "\x1b[0m",
    Attr.HIGHLIGHT: "\x1b[0;7m",
}


class EmulatedSurface:
    def __init__(
        self,
        rows: int = 24,
        cols: int = 80,
        debug_logger: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.rows = rows
        self.cols = cols
        self._debug_logger = debug_logger or (lambda msg: None)
        # pyte.Screen(columns, lines) - note the order!
        self._screen = pyte.Screen(columns=cols, lines=rows)
        self._stream = pyte.ByteStream(self._screen)
        self._events: Deque[Event] = deque()
        self.acquired = False
        self.release_count = 0
        self.refresh_count = 0

    # --- Scripted input -----------------------------------------------

    def feed_keys(self, *events: Event) -> None:
        self._events.extend(events)

    def type_text(self, text: str) -> None:
        """Queue the key events for typing ``text`` (newlines press Enter)."""
        self._events.extend(keys_for_text(text))

    def pending_events(self) -> int:
        return len(self._events)

    def resize(self, rows: int, cols: int) -> None:
        """Resize the virtual screen and queue a resize notification."""
        self.rows = rows
        self.cols = cols
        # CRITICAL: pyte.Screen.resize(lines, columns) not (columns, lines)!
        self._screen.resize(lines=rows, columns=cols)
        self._debug_logger(f"[emulated] resize -> {rows}x{cols}")
        self._events.append(RESIZE)

    # --- TerminalSurface ----------------------------------------------

    def acquire(self) -> None:
        self.acquired = True

    def release(self) -> None:
        if self.acquired:
            self.release_count += 1
        self.acquired = False

    def dimensions(self) -> Tuple[int, int]:
        return self.rows, self.cols

    def poll_event(self, timeout_ms: int) -> Optional[Event]:
        if self._events:
            return self._events.popleft()
        return None

    def draw_text(self, row: int, col: int, text: str, attr: Attr = Attr.NORMAL) -> None:
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            return
        text = truncate(strip_unprintable(text), self.cols - col)
        if text:
            self._write(f"\x1b[{row + 1};{col + 1}H{_SGR[attr]}{text}\x1b[0m")

    def fill_row(self, row: int, attr: Attr = Attr.NORMAL, char: str = " ") -> None:
        if not 0 <= row < self.rows:
            return
        self._write(f"\x1b[{row + 1};1H{_SGR[attr]}{char * self.cols}\x1b[0m")

    def move_cursor(self, row: int, col: int) -> None:
        row = max(0, min(self.rows - 1, row))
        col = max(0, min(self.cols - 1, col))
        self._write(f"\x1b[{row + 1};{col + 1}H")

    def clear(self) -> None:
        self._write("\x1b[0m\x1b[2J\x1b[H")

    def refresh(self) -> None:
        self.refresh_count += 1

    def _write(self, data: str) -> None:
        self._stream.feed(data.encode("utf-8", errors="replace"))

    # --- Inspection ---------------------------------------------------

    def text(self) -> str:
        return "\n".join(self._screen.display)

    def line(self, row: int) -> str:
        """Row contents with trailing blanks removed."""
        return self._screen.display[row].rstrip()

    @property
    def cursor(self) -> Tuple[int, int]:
        """Terminal cursor as (row, col)."""
        return self._screen.cursor.y, self._screen.cursor.x

    def is_highlighted(self, row: int, col: int) -> bool:
        return bool(self._screen.buffer[row][col].reverse)

    def text_with_cursor(self, cursor_char: str = "▌") -> str:
        """Screen text with a visible caret inserted at the cursor cell."""
        lines = list(self._screen.display)
        row, col = self.cursor
        if 0 <= row < len(lines):
            line = lines[row]
            idx = _index_from_column(line, col)
            lines[row] = line[:idx] + cursor_char + line[idx:]
        return "\n".join(lines)


def _index_from_column(line: str, column: int) -> int:
    """String index that corresponds to a visual column.

    pyte's display pads the right half of a wide glyph with nothing, so
    columns and indices diverge once a wide character appears.
    """
    if column <= 0:
        return 0
    return len(truncate(line, column))

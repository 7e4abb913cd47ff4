"""Real-terminal surface on top of stdlib curses.

The surface owns the curses session between ``acquire`` and ``release``.
``get_wch`` with a timeout is the only blocking call; its result is
translated into KeyEvent/ResizeEvent so the core never sees curses codes.
"""

from __future__ import annotations

import curses
import os
from typing import Callable, Dict, Optional, Tuple, Union

from ..core.keys import Attr, Event, KeyEvent, RESIZE
from ..core.renderer import strip_unprintable, truncate

HIGHLIGHT_PAIR = 1

# Escape must arrive as a key on its own; ncurses waits 1s by default
# to see if it starts a sequence.
ESCAPE_DELAY_MS = "25"

_SPECIAL_KEYS: Dict[int, str] = {
    curses.KEY_ENTER: "enter",
    curses.KEY_BACKSPACE: "backspace",
    curses.KEY_DC: "delete",
    curses.KEY_IC: "insert",
    curses.KEY_LEFT: "left",
    curses.KEY_RIGHT: "right",
    curses.KEY_UP: "up",
    curses.KEY_DOWN: "down",
    curses.KEY_HOME: "home",
    curses.KEY_END: "end",
    curses.KEY_PPAGE: "pageup",
    curses.KEY_NPAGE: "pagedown",
    curses.KEY_BTAB: "shift+tab",
}

_CHAR_KEYS: Dict[str, str] = {
    "\n": "enter",
    "\r": "enter",
    "\x7f": "backspace",
    "\x08": "backspace",
    "\x1b": "escape",
    "\t": "tab",
}


def translate_key(raw: Union[str, int]) -> Event:
    """Map a ``get_wch`` result to an engine event."""
    if isinstance(raw, int):
        if raw == curses.KEY_RESIZE:
            return RESIZE
        name = _SPECIAL_KEYS.get(raw)
        if name is None and curses.KEY_F0 <= raw <= curses.KEY_F0 + 63:
            name = f"f{raw - curses.KEY_F0}"
        if name is None:
            name = _curses_key_name(raw)
        return KeyEvent(key=name)

    name = _CHAR_KEYS.get(raw)
    if name is not None:
        return KeyEvent(key=name, character=raw)
    code = ord(raw) if len(raw) == 1 else -1
    if 0x01 <= code <= 0x1A:
        return KeyEvent(key=f"ctrl+{chr(code + 0x60)}", character=raw)
    if 0 <= code < 0x20:
        return KeyEvent(key=f"ctrl+{code:#04x}", character=raw)
    return KeyEvent(key=raw, character=raw)


def _curses_key_name(code: int) -> str:
    try:
        return curses.keyname(code).decode("ascii", errors="ignore").lower()
    except (ValueError, curses.error):
        return f"key_{code}"


class CursesSurface:
    def __init__(self, debug_logger: Optional[Callable[[str], None]] = None) -> None:
        self._debug_logger = debug_logger or (lambda msg: None)
        self.stdscr: Optional["curses.window"] = None
        self._attrs: Dict[Attr, int] = {Attr.NORMAL: curses.A_NORMAL, Attr.HIGHLIGHT: curses.A_REVERSE}
        self._timeout_ms: Optional[int] = None

    def acquire(self) -> None:
        if self.stdscr is not None:
            return
        os.environ.setdefault("ESCDELAY", ESCAPE_DELAY_MS)
        stdscr = curses.initscr()
        try:
            curses.noecho()
            curses.cbreak()
            stdscr.keypad(True)
            self._init_colors()
        except curses.error:
            curses.endwin()
            raise
        self.stdscr = stdscr
        self._debug_logger("[curses] session acquired")

    def _init_colors(self) -> None:
        if not curses.has_colors():
            return
        try:
            curses.start_color()
            curses.use_default_colors()
            curses.init_pair(HIGHLIGHT_PAIR, curses.COLOR_WHITE, curses.COLOR_BLUE)
            self._attrs[Attr.HIGHLIGHT] = curses.color_pair(HIGHLIGHT_PAIR)
        except curses.error:
            self._attrs[Attr.HIGHLIGHT] = curses.A_REVERSE

    def release(self) -> None:
        stdscr = self.stdscr
        if stdscr is None:
            return
        self.stdscr = None
        try:
            stdscr.keypad(False)
            curses.nocbreak()
            curses.echo()
        except curses.error:
            pass
        finally:
            curses.endwin()
        self._debug_logger("[curses] session released")

    def dimensions(self) -> Tuple[int, int]:
        if self.stdscr is None:
            return 0, 0
        return self.stdscr.getmaxyx()

    def poll_event(self, timeout_ms: int) -> Optional[Event]:
        if self.stdscr is None:
            return None
        if timeout_ms != self._timeout_ms:
            self.stdscr.timeout(timeout_ms)
            self._timeout_ms = timeout_ms
        try:
            raw = self.stdscr.get_wch()
        except curses.error:
            # timeout without input
            return None
        if raw == curses.KEY_RESIZE:
            curses.update_lines_cols()
        return translate_key(raw)

    def draw_text(self, row: int, col: int, text: str, attr: Attr = Attr.NORMAL) -> None:
        if self.stdscr is None:
            return
        rows, cols = self.stdscr.getmaxyx()
        if not (0 <= row < rows and 0 <= col < cols):
            return
        text = truncate(strip_unprintable(text), cols - col)
        try:
            self.stdscr.addstr(row, col, text, self._attrs[attr])
        except curses.error:
            # writing the bottom-right cell moves the cursor off-screen
            pass

    def fill_row(self, row: int, attr: Attr = Attr.NORMAL, char: str = " ") -> None:
        if self.stdscr is None:
            return
        rows, cols = self.stdscr.getmaxyx()
        if not 0 <= row < rows:
            return
        try:
            self.stdscr.addstr(row, 0, char * cols, self._attrs[attr])
        except curses.error:
            pass

    def move_cursor(self, row: int, col: int) -> None:
        if self.stdscr is None:
            return
        rows, cols = self.stdscr.getmaxyx()
        try:
            self.stdscr.move(max(0, min(rows - 1, row)), max(0, min(cols - 1, col)))
        except curses.error:
            pass

    def clear(self) -> None:
        if self.stdscr is not None:
            self.stdscr.erase()

    def refresh(self) -> None:
        if self.stdscr is not None:
            self.stdscr.refresh()

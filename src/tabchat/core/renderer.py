"""Full-frame rendering of the active buffer.

Screen layout for a viewport of R rows and C columns:

    row 0        topic, highlighted fill to the right edge
    rows 1..R-3  backlog, filled bottom-up, newest message last
    row R-2      highlighted separator
    row R-1      prompt + input, terminal cursor on the edit position

``render`` is pure: it turns a buffer and a size into a Frame. ``paint``
pushes a Frame to a surface. Column arithmetic uses wcwidth so wide glyphs
(CJK, emoji) take two cells; plain ASCII is one cell per character.
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, List, Sequence, Tuple

import wcwidth

from ..config import CONTINUATION_PREFIX, WRAP_MARGIN
from .buffer import Buffer
from .keys import Attr

if TYPE_CHECKING:
    from ..surface.base import TerminalSurface

TAB_SIZE = 8
CHROME_ROWS = 3  # topic, separator, input

_TOKEN_PATTERN = re.compile(r"\S+|\s+")
_CONTROL_WHITESPACE = re.compile(r"[\n\r\x0b\x0c]")


def char_width(ch: str) -> int:
    w = wcwidth.wcwidth(ch)
    return w if w > 0 else 0


def display_width(text: str) -> int:
    return sum(char_width(ch) for ch in text)


def strip_unprintable(text: str) -> str:
    """Drop C0/C1 controls (NUL included) and anything without a cell width."""
    return "".join(
        ch for ch in text
        if unicodedata.category(ch) != "Cc" and wcwidth.wcwidth(ch) >= 0
    )


def truncate(text: str, columns: int) -> str:
    """Longest prefix of ``text`` that fits in ``columns`` cells."""
    if columns <= 0:
        return ""
    used = 0
    for i, ch in enumerate(text):
        w = char_width(ch)
        if used + w > columns:
            return text[:i]
        used += w
    return text


def _split_long_word(word: str, width: int) -> List[str]:
    pieces: List[str] = []
    current = ""
    used = 0
    for ch in word:
        w = char_width(ch)
        if current and used + w > width:
            pieces.append(current)
            current, used = "", 0
        current += ch
        used += w
    if current:
        pieces.append(current)
    return pieces


def wrap_text(text: str, width: int) -> List[str]:
    """Greedy word wrap measured in display cells.

    Tabs are expanded and line-breaking whitespace turns into spaces, so a
    message always wraps as one paragraph. Whitespace is dropped at the start
    of continuation lines. Words wider than ``width`` are broken. An empty
    message yields a single empty line.
    """
    width = max(1, width)
    text = _CONTROL_WHITESPACE.sub(" ", text.expandtabs(TAB_SIZE))

    lines: List[str] = []
    current = ""
    used = 0
    for token in _TOKEN_PATTERN.findall(text):
        w = display_width(token)
        if token.isspace():
            if not current and lines:
                continue
            if used + w > width:
                if current.strip():
                    lines.append(current.rstrip())
                current, used = "", 0
                continue
            current += token
            used += w
            continue

        if used + w <= width:
            current += token
            used += w
            continue

        if current.strip():
            lines.append(current.rstrip())
        current, used = "", 0
        if w <= width:
            current, used = token, w
            continue
        pieces = _split_long_word(token, width)
        lines.extend(pieces[:-1])
        current = pieces[-1]
        used = display_width(current)

    if current.strip() or not lines:
        lines.append(current.rstrip())
    return lines


def wrap_message(
    text: str,
    width: int,
    prefix: str = CONTINUATION_PREFIX,
) -> List[str]:
    """Wrap a message and mark every continuation line with ``prefix``."""
    wrapped = wrap_text(text, width)
    return [wrapped[0]] + [prefix + line for line in wrapped[1:]]


def layout_backlog(
    backlog: Iterable[str],
    width: int,
    height: int,
    prefix: str = CONTINUATION_PREFIX,
) -> List[str]:
    """Lines of the backlog region, top to bottom, newest at the bottom.

    Messages are consumed newest first until the region is full. Only the
    oldest message considered can be cut, and only from its top.
    """
    if height <= 0:
        return []
    messages: Sequence[str] = list(backlog)
    staging: List[str] = []
    for message in reversed(messages):
        if len(staging) >= height:
            break
        staging.extend(reversed(wrap_message(message, width, prefix)))
    del staging[height:]
    staging.reverse()
    return staging


@dataclass
class Frame:
    """Everything that ends up on screen for one full redraw."""

    rows: int
    cols: int
    topic: str = ""
    backlog_lines: List[str] = field(default_factory=list)
    input_line: str = ""
    cursor_col: int = 0

    @property
    def backlog_top(self) -> int:
        """Row of the first backlog line so the last one sits above the separator."""
        height = max(0, self.rows - CHROME_ROWS)
        return 1 + height - len(self.backlog_lines)

    @property
    def separator_row(self) -> int:
        return self.rows - 2

    @property
    def input_row(self) -> int:
        return self.rows - 1


def render(
    buf: Buffer,
    rows: int,
    cols: int,
    wrap_margin: int = WRAP_MARGIN,
    prefix: str = CONTINUATION_PREFIX,
) -> Frame:
    frame = Frame(rows=rows, cols=cols)
    if rows <= 0 or cols <= 0:
        return frame
    frame.topic = truncate(buf.topic, cols)
    frame.backlog_lines = layout_backlog(
        buf.backlog,
        width=max(1, cols - wrap_margin),
        height=max(0, rows - CHROME_ROWS),
        prefix=prefix,
    )
    frame.input_line = buf.prompt + buf.input_text
    frame.cursor_col = display_width(buf.prompt) + display_width("".join(buf.input[:buf.cursor]))
    return frame


def paint(frame: Frame, surface: "TerminalSurface") -> None:
    """Write a full frame to the surface and refresh it."""
    surface.clear()
    if frame.rows <= 0 or frame.cols <= 0:
        surface.refresh()
        return

    if frame.rows >= CHROME_ROWS:
        surface.fill_row(0, Attr.HIGHLIGHT, " ")
        surface.draw_text(0, 0, frame.topic, Attr.HIGHLIGHT)
        for offset, line in enumerate(frame.backlog_lines):
            surface.draw_text(frame.backlog_top + offset, 0, line, Attr.NORMAL)

    if frame.rows >= 2:
        surface.fill_row(frame.separator_row, Attr.HIGHLIGHT, " ")

    paint_input(frame, surface)


def visible_input(line: str, cursor_col: int, cols: int) -> Tuple[str, int]:
    """Slice of the input row to show and the screen column of the cursor.

    When the cursor would fall past the last column the row scrolls left,
    dropping whole characters from the start until the cursor sits on
    screen.
    """
    if cols <= 0:
        return "", 0
    start = 0
    dropped = 0
    while cursor_col - dropped > cols - 1 and start < len(line):
        dropped += char_width(line[start])
        start += 1
    return truncate(line[start:], cols), max(0, min(cursor_col - dropped, cols - 1))


def paint_input(frame: Frame, surface: "TerminalSurface") -> None:
    """Redraw only the input row and place the cursor."""
    if frame.rows <= 0 or frame.cols <= 0:
        return
    row = frame.input_row
    text, col = visible_input(frame.input_line, frame.cursor_col, frame.cols)
    surface.fill_row(row, Attr.NORMAL, " ")
    surface.draw_text(row, 0, text, Attr.NORMAL)
    surface.move_cursor(row, col)
    surface.refresh()

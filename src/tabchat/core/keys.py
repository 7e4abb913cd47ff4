"""Input events and screen attributes shared by the core and the surfaces.

Key naming follows the lowercase names used by terminal widgets:
- printable keys: the character itself ("a", "7", " ")
- editing keys: "enter", "backspace", "delete", "escape", "tab"
- movement: "left", "right", "up", "down", "home", "end", "pageup", "pagedown"
- control chords: "ctrl+a" .. "ctrl+z"
- anything else: whatever name the surface reports ("f5", "key_btab", ...)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Union


class Attr(Enum):
    """Cell attributes the renderer asks for."""

    NORMAL = "normal"
    HIGHLIGHT = "highlight"


@dataclass(frozen=True)
class KeyEvent:
    key: str
    character: Optional[str] = None

    @property
    def is_printable(self) -> bool:
        ch = self.character
        return ch is not None and len(ch) == 1 and ch.isprintable()

    def debug_token(self) -> str:
        """Human-readable representation inserted by catch-key mode."""
        if self.character is None:
            return f"<{self.key}>"
        return f"<{self.key} {self.character!r}>"


@dataclass(frozen=True)
class ResizeEvent:
    """Terminal size changed; the engine re-queries dimensions."""


Event = Union[KeyEvent, ResizeEvent]


def char_key(ch: str) -> KeyEvent:
    return KeyEvent(key=ch, character=ch)


def ctrl_key(letter: str) -> KeyEvent:
    """Build the event for Ctrl+<letter>, e.g. ctrl_key("a") -> ^A."""
    letter = letter.lower()
    return KeyEvent(key=f"ctrl+{letter}", character=chr(ord(letter.upper()) & 0x1F))


ENTER = KeyEvent("enter", "\n")
BACKSPACE = KeyEvent("backspace")
DELETE = KeyEvent("delete")
ESCAPE = KeyEvent("escape", "\x1b")
LEFT = KeyEvent("left")
RIGHT = KeyEvent("right")
UP = KeyEvent("up")
DOWN = KeyEvent("down")
HOME = KeyEvent("home")
END = KeyEvent("end")
RESIZE = ResizeEvent()


def keys_for_text(text: str) -> List[KeyEvent]:
    """Expand a string into the key events typing it would produce."""
    events: List[KeyEvent] = []
    for ch in text:
        if ch in ("\n", "\r"):
            events.append(ENTER)
        else:
            events.append(char_key(ch))
    return events

"""Per-tab state: message backlog plus one editable input line."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List, Optional

from ..config import DEFAULT_MAX_BACKLOG


@dataclass
class Buffer:
    """One tab.

    Invariant: ``0 <= cursor <= len(input)`` after every operation. All
    editing methods clamp at the edges instead of raising.
    """

    name: str = ""
    prompt: str = ""
    topic: str = ""
    max_backlog: Optional[int] = DEFAULT_MAX_BACKLOG
    input: List[str] = field(default_factory=list)
    cursor: int = 0
    backlog: Deque[str] = field(init=False)

    def __post_init__(self) -> None:
        self.backlog = deque(maxlen=self.max_backlog)

    @property
    def input_text(self) -> str:
        return "".join(self.input)

    # --- Backlog ------------------------------------------------------

    def append_message(self, text: str) -> None:
        """Append a message; the oldest is dropped once the bound is hit."""
        self.backlog.append(text)

    # --- Editing ------------------------------------------------------

    def insert(self, text: str) -> None:
        if not text:
            return
        self.input[self.cursor:self.cursor] = list(text)
        self.cursor += len(text)

    def delete_before_cursor(self) -> bool:
        if self.cursor == 0:
            return False
        self.cursor -= 1
        del self.input[self.cursor]
        return True

    def delete_at_cursor(self) -> bool:
        if self.cursor >= len(self.input):
            return False
        del self.input[self.cursor]
        return True

    def move_cursor(self, delta: int) -> bool:
        """Move by ``delta`` columns, clamped. Returns True if it moved."""
        old = self.cursor
        self.cursor = max(0, min(len(self.input), self.cursor + delta))
        return self.cursor != old

    def move_to_start(self) -> None:
        self.cursor = 0

    def move_to_end(self) -> None:
        self.cursor = len(self.input)

    def drain_to_cursor(self) -> str:
        """Remove everything before the cursor (Ctrl+U) and return it."""
        removed = "".join(self.input[:self.cursor])
        del self.input[:self.cursor]
        self.cursor = 0
        return removed

    def take_input(self) -> str:
        line = "".join(self.input)
        self.input.clear()
        self.cursor = 0
        return line

    # --- Display ------------------------------------------------------

    def set_prompt(self, prompt: str) -> None:
        self.prompt = prompt

    def set_topic(self, topic: str) -> None:
        self.topic = topic

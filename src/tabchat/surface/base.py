"""The terminal capability the engine draws on and reads keys from."""

from __future__ import annotations

from typing import Optional, Protocol, Tuple, runtime_checkable

from ..core.keys import Attr, Event


@runtime_checkable
class TerminalSurface(Protocol):
    """Protocol for a drawable, pollable terminal.

    Rows and columns are zero-based; ``dimensions`` returns ``(rows, cols)``.
    ``acquire``/``release`` bracket the session and must be safe to call
    more than once.
    """

    def acquire(self) -> None:
        ...

    def release(self) -> None:
        ...

    def dimensions(self) -> Tuple[int, int]:
        ...

    def poll_event(self, timeout_ms: int) -> Optional[Event]:
        """Return the next event, or None once ``timeout_ms`` has passed."""
        ...

    def draw_text(self, row: int, col: int, text: str, attr: Attr = Attr.NORMAL) -> None:
        ...

    def fill_row(self, row: int, attr: Attr = Attr.NORMAL, char: str = " ") -> None:
        ...

    def move_cursor(self, row: int, col: int) -> None:
        ...

    def clear(self) -> None:
        ...

    def refresh(self) -> None:
        ...

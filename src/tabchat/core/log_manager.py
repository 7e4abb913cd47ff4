from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from pathlib import Path
from typing import Deque, Dict, Union

CATEGORIES = ("events", "errors", "debug", "keys", "troubleshooting")


@dataclass
class LogManager:
    """Simple line-buffered log manager by category.

    The engine owns the screen, so nothing is printed; hosts read the buffers
    back (diagnostics snapshot) or dump them to a file after the session.

    Categories: events, errors, debug, keys, troubleshooting
    """

    max_lines: int = 2000
    buffers: Dict[str, Deque[str]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for name in CATEGORIES:
            self.buffers[name] = deque(maxlen=self.max_lines)

    def add(self, category: str, message: str) -> None:
        buf = self.buffers.setdefault(category, deque(maxlen=self.max_lines))
        for line in message.splitlines() or [message]:
            buf.append(line)

    def text(self, category: str) -> str:
        buf = self.buffers.get(category)
        if not buf:
            return ""
        return "\n".join(buf)

    def debug_logger(self, message: str) -> None:
        """Callback form for components that take ``debug_logger``."""
        self.add("debug", message)

    def dump(self, path: Union[str, Path]) -> Path:
        """Write every non-empty category to ``path`` and return it."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        sections = []
        for name, buf in self.buffers.items():
            if buf:
                sections.append(f"---- {name} ----\n" + "\n".join(buf))
        target.write_text("\n".join(sections) + "\n", encoding="utf-8")
        return target

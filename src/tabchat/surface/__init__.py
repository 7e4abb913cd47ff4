"""Terminal surfaces the engine can run on.

- **TerminalSurface**: the protocol the engine depends on
- **CursesSurface**: real terminal via stdlib curses
- **EmulatedSurface**: headless pyte screen for tests and diagnostics
"""

from .base import TerminalSurface
from .curses_surface import CursesSurface, translate_key
from .emulated import EmulatedSurface

__all__ = ["TerminalSurface", "CursesSurface", "EmulatedSurface", "translate_key"]

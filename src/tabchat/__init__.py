"""tabchat - multi-buffer line editor and renderer for terminal chat programs."""

from .config import EngineConfig
from .core import Buffer, Engine, KeyEvent, LogManager, ResizeEvent
from .surface import CursesSurface, EmulatedSurface, TerminalSurface

__version__ = "0.1.0"

__all__ = [
    "Buffer",
    "CursesSurface",
    "EmulatedSurface",
    "Engine",
    "EngineConfig",
    "KeyEvent",
    "LogManager",
    "ResizeEvent",
    "TerminalSurface",
]

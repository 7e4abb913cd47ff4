"""Line editing, multi-buffer state and rendering.

Quick Start
-----------
```python
from tabchat.core import Engine
from tabchat.surface import CursesSurface

with Engine(CursesSurface()) as engine:
    engine.set_prompt("> ")
    while True:
        line = engine.poll()
        if line == "/quit":
            break
        if line is not None:
            engine.write_message(line)
```
"""

from .buffer import Buffer
from .diagnostics import DiagnosticsManager
from .engine import Engine
from .input_machine import InputStateMachine, Outcome
from .keys import Attr, Event, KeyEvent, ResizeEvent
from .log_manager import LogManager
from .modes import CatchKey, Mode, NavigateArmed, NavigateCollecting, Normal
from .renderer import Frame, layout_backlog, paint, render, wrap_message, wrap_text

__all__ = [
    "Attr",
    "Buffer",
    "CatchKey",
    "DiagnosticsManager",
    "Engine",
    "Event",
    "Frame",
    "InputStateMachine",
    "KeyEvent",
    "LogManager",
    "Mode",
    "NavigateArmed",
    "NavigateCollecting",
    "Normal",
    "Outcome",
    "ResizeEvent",
    "layout_backlog",
    "paint",
    "render",
    "wrap_message",
    "wrap_text",
]

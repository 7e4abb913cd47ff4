"""Composition root: buffers, input mode and screen in one polling object.

Responsibilities:
- Own the ordered buffers and the active index
- Feed surface events through the input state machine
- Repaint after every change that needs it
- Bracket the terminal session (``with engine:``)

Threading: the engine is not thread-safe. Only the thread calling ``poll``
may call the mutators; producers on other threads hand messages over a
queue and let the polling thread write them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, List, Optional, Tuple

from ..config import EngineConfig
from .buffer import Buffer
from .input_machine import InputStateMachine
from .keys import Event, KeyEvent
from .log_manager import LogManager
from .modes import Mode, mode_name
from .renderer import Frame, paint, paint_input, render

if TYPE_CHECKING:
    from ..surface.base import TerminalSurface

KeyLogger = Callable[[KeyEvent], None]


class Engine:
    def __init__(
        self,
        surface: "TerminalSurface",
        config: Optional[EngineConfig] = None,
        debug_logger: Optional[Callable[[str], None]] = None,
        log_manager: Optional[LogManager] = None,
    ) -> None:
        """Initialize the engine.

        Args:
            surface: Terminal capability to draw on and poll
            config: Engine settings; defaults to EngineConfig()
            debug_logger: Optional callback for debug messages
            log_manager: Optional LogManager receiving events and errors
        """
        self.surface = surface
        self.config = config or EngineConfig()
        self._debug_logger = debug_logger or (lambda msg: None)
        self._log_manager = log_manager
        self._key_logger: Optional[KeyLogger] = None
        self._acquired = False

        self.buffers: List[Buffer] = []
        self.active = 0
        self.viewport: Tuple[int, int] = (0, 0)
        self.machine = InputStateMachine(debug_logger=self._debug_logger)

        for _ in range(self.config.initial_buffers):
            self.add_buffer()

    # --- Session ------------------------------------------------------

    def __enter__(self) -> "Engine":
        self.surface.acquire()
        self._acquired = True
        self._log_event("surface acquired")
        try:
            self._refresh_viewport()
            self.force_redraw()
        except BaseException:
            self._release()
            raise
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is not None:
            self._log("errors", f"session ended by {exc_type.__name__}: {exc}")
        self._release()
        return False

    def _release(self) -> None:
        self._acquired = False
        self.surface.release()
        self._log_event("surface released")

    # --- State --------------------------------------------------------

    @property
    def active_buffer(self) -> Buffer:
        return self.buffers[self.active]

    @property
    def mode(self) -> Mode:
        return self.machine.mode

    def frame(self) -> Frame:
        """Frame of what the active buffer looks like at the current size."""
        rows, cols = self.viewport
        return render(
            self.active_buffer,
            rows,
            cols,
            wrap_margin=self.config.wrap_margin,
            prefix=self.config.continuation_prefix,
        )

    def set_key_logger(self, callback: Optional[KeyLogger]) -> None:
        """Set callback invoked with every key event before it is handled."""
        self._key_logger = callback

    # --- Polling ------------------------------------------------------

    def poll(self) -> Optional[str]:
        """Handle at most one event; return a completed input line if any."""
        event = self.surface.poll_event(self.config.poll_timeout_ms)
        if event is None:
            return None
        return self.handle_event(event)

    def handle_event(self, event: Event) -> Optional[str]:
        if isinstance(event, KeyEvent):
            self._notify_key_logger(event)

        outcome = self.machine.feed(event, self.active_buffer)

        if outcome.resize:
            self._refresh_viewport()
        if outcome.switch_to is not None:
            self.switch_buffer(outcome.switch_to)
        elif outcome.redraw:
            self.force_redraw()
        elif outcome.input_changed:
            self._repaint_input()

        if outcome.line is not None:
            self._log_event(f"line completed in buffer {self.active} ({len(outcome.line)} chars)")
        return outcome.line

    def _notify_key_logger(self, event: KeyEvent) -> None:
        self._debug_logger(f"[key] {event.debug_token()} mode={mode_name(self.mode)}")
        if not self._key_logger:
            return
        try:
            self._key_logger(event)
        except Exception as e:
            self._log("errors", f"key logger failed: {e}")

    # --- Host operations ----------------------------------------------

    def write_message(self, text: str) -> None:
        """Append a message to the active buffer and redraw."""
        self.active_buffer.append_message(text)
        self.force_redraw()

    writeln = write_message

    def write_to(self, index: int, text: str) -> bool:
        """Append a message to buffer ``index``; redraws only if it is active."""
        if not 0 <= index < len(self.buffers):
            return False
        self.buffers[index].append_message(text)
        if index == self.active:
            self.force_redraw()
        return True

    def set_prompt(self, prompt: str) -> None:
        self.active_buffer.set_prompt(prompt)
        self.force_redraw()

    def set_topic(self, topic: str) -> None:
        self.active_buffer.set_topic(topic)
        self.force_redraw()

    def switch_buffer(self, index: int) -> bool:
        """Make buffer ``index`` active. Unknown indices are ignored."""
        if not 0 <= index < len(self.buffers):
            self._debug_logger(f"[engine] switch to {index} ignored: {len(self.buffers)} buffers")
            return False
        self.active = index
        self._log_event(f"switched to buffer {index} ({self.buffers[index].name})")
        self.force_redraw()
        return True

    def add_buffer(self, name: Optional[str] = None) -> int:
        """Append a new buffer and return its index."""
        index = len(self.buffers)
        buf = Buffer(name=name or f"#{index + 1}", max_backlog=self.config.max_backlog)
        self.buffers.append(buf)
        self._log_event(f"added buffer {index} ({buf.name})")
        return index

    def remove_buffer(self, index: int) -> bool:
        """Remove buffer ``index``. The last remaining buffer is never removed.

        The active buffer stays active if it survives; removing the active
        buffer selects the one that takes its place (or the new last one).
        """
        if len(self.buffers) <= 1 or not 0 <= index < len(self.buffers):
            return False
        removed = self.buffers.pop(index)
        if index < self.active:
            self.active -= 1
        elif index == self.active:
            self.active = min(self.active, len(self.buffers) - 1)
        self._log_event(f"removed buffer {index} ({removed.name})")
        self.force_redraw()
        return True

    def force_redraw(self) -> None:
        if not self._acquired:
            return
        paint(self.frame(), self.surface)

    # --- Internals ----------------------------------------------------

    def _repaint_input(self) -> None:
        if not self._acquired:
            return
        paint_input(self.frame(), self.surface)

    def _refresh_viewport(self) -> None:
        old = self.viewport
        rows, cols = self.surface.dimensions()
        self.viewport = (rows, cols)
        if old != self.viewport:
            self._log_event(f"viewport {old[0]}x{old[1]} -> {self.viewport[0]}x{self.viewport[1]}")

    def _log_event(self, message: str) -> None:
        self._log("events", message)

    def _log(self, category: str, message: str) -> None:
        self._debug_logger(f"[engine] {message}")
        if self._log_manager:
            self._log_manager.add(category, message)

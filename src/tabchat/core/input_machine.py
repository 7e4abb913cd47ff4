"""Key handling: one event in, one Outcome out.

The machine owns the current Mode; the buffer it edits is passed in on every
call so that switching tabs never needs to touch it. Buffer switches are
requested through the Outcome, the engine decides whether the target exists.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional

from .buffer import Buffer
from .keys import Event, KeyEvent, ResizeEvent
from .modes import (
    CATCH_KEY,
    NAVIGATE_ARMED,
    NORMAL,
    CatchKey,
    Mode,
    NavigateArmed,
    NavigateCollecting,
    extended_target,
    single_digit_target,
)


@dataclass
class Outcome:
    """What the engine should do after a key was handled."""

    line: Optional[str] = None
    redraw: bool = False
    input_changed: bool = False
    switch_to: Optional[int] = None
    resize: bool = False


class InputStateMachine:
    def __init__(self, debug_logger: Optional[Callable[[str], None]] = None) -> None:
        self.mode: Mode = NORMAL
        self._debug_logger = debug_logger or (lambda msg: None)
        self._normal_keys: Dict[str, Callable[[Buffer], Outcome]] = {
            "enter": self._enter,
            "backspace": self._backspace,
            "delete": self._delete,
            "left": lambda buf: Outcome(input_changed=buf.move_cursor(-1)),
            "right": lambda buf: Outcome(input_changed=buf.move_cursor(1)),
            "ctrl+a": self._to_start,
            "home": self._to_start,
            "ctrl+e": self._to_end,
            "end": self._to_end,
            "ctrl+u": self._kill_to_start,
            "ctrl+l": lambda buf: Outcome(redraw=True),
            "ctrl+k": self._arm_catch_key,
            "escape": self._arm_navigation,
        }

    def reset(self) -> None:
        self.mode = NORMAL

    def feed(self, event: Event, buf: Buffer) -> Outcome:
        if isinstance(event, ResizeEvent):
            return Outcome(resize=True, redraw=True)

        mode = self.mode
        if isinstance(mode, CatchKey):
            return self._catch(event, buf)
        if isinstance(mode, NavigateArmed):
            return self._navigate_armed(event)
        if isinstance(mode, NavigateCollecting):
            return self._navigate_collecting(event, mode)
        return self._normal(event, buf)

    # --- Normal mode --------------------------------------------------

    def _normal(self, event: KeyEvent, buf: Buffer) -> Outcome:
        handler = self._normal_keys.get(event.key)
        if handler is not None:
            return handler(buf)
        if event.is_printable:
            buf.insert(event.character)
            return Outcome(input_changed=True)
        self._debug_logger(f"[input] ignored key {event.debug_token()}")
        return Outcome()

    def _enter(self, buf: Buffer) -> Outcome:
        if not buf.input:
            return Outcome()
        return Outcome(line=buf.take_input(), input_changed=True)

    def _backspace(self, buf: Buffer) -> Outcome:
        return Outcome(input_changed=buf.delete_before_cursor())

    def _delete(self, buf: Buffer) -> Outcome:
        return Outcome(input_changed=buf.delete_at_cursor())

    def _to_start(self, buf: Buffer) -> Outcome:
        buf.move_to_start()
        return Outcome(redraw=True)

    def _to_end(self, buf: Buffer) -> Outcome:
        buf.move_to_end()
        return Outcome(redraw=True)

    def _kill_to_start(self, buf: Buffer) -> Outcome:
        buf.drain_to_cursor()
        return Outcome(redraw=True)

    def _arm_catch_key(self, buf: Buffer) -> Outcome:
        self.mode = CATCH_KEY
        return Outcome()

    def _arm_navigation(self, buf: Buffer) -> Outcome:
        self.mode = NAVIGATE_ARMED
        return Outcome()

    # --- Catch-key ----------------------------------------------------

    def _catch(self, event: KeyEvent, buf: Buffer) -> Outcome:
        self.mode = NORMAL
        token = event.debug_token()
        buf.insert(token)
        self._debug_logger(f"[input] caught key {token}")
        return Outcome(input_changed=True, redraw=True)

    # --- Navigation ---------------------------------------------------

    def _navigate_armed(self, event: KeyEvent) -> Outcome:
        ch = event.character
        if event.key == "j":
            self.mode = NavigateCollecting()
            return Outcome()
        self.mode = NORMAL
        if _is_digit(ch):
            return Outcome(switch_to=single_digit_target(ch))
        return Outcome()

    def _navigate_collecting(self, event: KeyEvent, mode: NavigateCollecting) -> Outcome:
        ch = event.character
        if not _is_digit(ch):
            self.mode = NORMAL
            return Outcome()
        digits = mode.digits + ch
        target = extended_target(digits)
        if target is None:
            self.mode = NavigateCollecting(digits)
            return Outcome()
        self.mode = NORMAL
        return Outcome(switch_to=target)


def _is_digit(ch: Optional[str]) -> bool:
    return ch is not None and len(ch) == 1 and "0" <= ch <= "9"

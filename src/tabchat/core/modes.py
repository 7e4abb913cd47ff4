"""Input modes of the engine as explicit variants.

Exactly one mode is current at a time. The navigation protocol is
Escape followed by a digit (buffers 1-10, 0 meaning 10) or by ``j`` and two
digits (buffers 1-100, 00 meaning 100).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class Normal:
    pass


@dataclass(frozen=True)
class CatchKey:
    """The next key event is echoed into the input as a debug token."""


@dataclass(frozen=True)
class NavigateArmed:
    """Escape was pressed; waiting for a digit or ``j``."""


@dataclass(frozen=True)
class NavigateCollecting:
    """Collecting the two digits of an extended ``j`` address."""

    digits: str = ""


Mode = Union[Normal, CatchKey, NavigateArmed, NavigateCollecting]

NORMAL = Normal()
CATCH_KEY = CatchKey()
NAVIGATE_ARMED = NavigateArmed()

EXTENDED_DIGITS = 2


def single_digit_target(digit: str) -> int:
    """Zero-based buffer index for ``Esc <digit>``."""
    n = int(digit)
    return (10 if n == 0 else n) - 1


def extended_target(digits: str) -> Optional[int]:
    """Zero-based buffer index for ``Esc j <d><d>``, None until complete.

    ``00`` is read as 100, the last buffer of the two-digit range, the same
    way a single ``0`` stands for 10. That reading is a choice: the key
    protocol only says zero names the tenth of its range.
    """
    if len(digits) < EXTENDED_DIGITS:
        return None
    n = int(digits)
    return (10 ** EXTENDED_DIGITS if n == 0 else n) - 1


def mode_name(mode: Mode) -> str:
    if isinstance(mode, NavigateCollecting):
        return f"navigate-collecting({mode.digits!r})"
    return {
        Normal: "normal",
        CatchKey: "catch-key",
        NavigateArmed: "navigate-armed",
    }[type(mode)]

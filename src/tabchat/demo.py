"""Example chat host driving the engine.

A ticker thread plays the remote side and drops messages into a queue;
the polling thread drains that queue between polls, so the engine is only
ever touched from one thread.
"""

from __future__ import annotations

import queue
import threading
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Sequence

from .core.diagnostics import DiagnosticsManager
from .core.engine import Engine

IPSUM = (
    "Lorem ipsum dolor sit amet, consectetur adipiscing elit. Phasellus vel sapien vitae "
    "quam facilisis convallis volutpat et elit. Cras quis justo finibus, rutrum justo "
    "elementum, volutpat quam. Vestibulum commodo urna lobortis, bibendum arcu eu, maximus "
    "urna. Aenean augue tellus, molestie ut augue a, feugiat faucibus ligula. Fusce mattis "
    "luctus lacus, eu euismod neque placerat sed. Morbi vel eleifend velit, vel commodo "
    "purus. Mauris quis tincidunt nunc, eu finibus nisi. Nunc consequat, velit sed aliquet "
    "luctus, ex purus tristique turpis, eget venenatis turpis felis a purus. Nam finibus "
    "lectus in quam rutrum, at feugiat magna venenatis. Donec imperdiet gravida lectus sed "
    "cursus. Proin volutpat ligula vel quam efficitur fringilla. Donec hendrerit urna ut "
    "ultricies dapibus."
)
SHRUG = "\U0001f937"

CHAT_MESSAGES = ("ohai",)
EDGECASE_MESSAGES = (IPSUM, SHRUG * 300, "\t" * 30)

WELCOME = ("", " === welcome to example chat", "")


@dataclass
class Ticker:
    """Background producer that cycles through ``messages`` forever."""

    messages: Sequence[str]
    deliver: Callable[[str], None]
    interval: float = 3.0
    _stop_event: threading.Event = field(default_factory=threading.Event)
    _thread: Optional[threading.Thread] = None

    def start(self) -> None:
        if self._thread is not None or not self.messages:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def _run(self) -> None:
        while not self._stop_event.is_set():
            for message in self.messages:
                self.deliver(message)
                if self._stop_event.wait(self.interval):
                    return

    def stop(self) -> None:
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=0.5)
        self._thread = None


class ChatDemo:
    """Line handling of the example chat program.

    Commands: /quit, /topic TEXT, /prompt TEXT, /new [NAME], /close,
    /buffer N (one-based), /snapshot. Anything else is echoed back.
    """

    def __init__(
        self,
        engine: Engine,
        diagnostics: Optional[DiagnosticsManager] = None,
        snapshot_dir: str = "tabchat-snapshots",
    ) -> None:
        self.engine = engine
        self.diagnostics = diagnostics
        self.snapshot_dir = snapshot_dir
        self.inbox: "queue.Queue[str]" = queue.Queue()
        self.running = True
        self._commands: Dict[str, Callable[[str], None]] = {
            "/quit": self._quit,
            "/topic": self._topic,
            "/prompt": self._prompt,
            "/new": self._new,
            "/close": self._close,
            "/buffer": self._buffer,
            "/snapshot": self._snapshot,
        }

    def deliver(self, text: str) -> None:
        """Thread-safe entry point for incoming messages."""
        self.inbox.put(text)

    def drain_inbox(self) -> int:
        """Write queued messages; must run on the polling thread."""
        count = 0
        while True:
            try:
                text = self.inbox.get_nowait()
            except queue.Empty:
                return count
            self.engine.write_message(f"> {text!r}")
            count += 1

    def greet(self, lines: Sequence[str] = WELCOME) -> None:
        for line in lines:
            self.engine.write_message(line)

    def run(self) -> None:
        while self.running:
            self.drain_inbox()
            line = self.engine.poll()
            if line is not None:
                self.handle_line(line)

    def handle_line(self, line: str) -> None:
        if line.startswith("/"):
            name, _, arg = line.partition(" ")
            command = self._commands.get(name)
            if command is not None:
                command(arg)
                return
        self.engine.write_message(f"< {line!r}")

    # --- Commands -----------------------------------------------------

    def _quit(self, arg: str) -> None:
        self.running = False

    def _topic(self, arg: str) -> None:
        self.engine.set_topic(arg)

    def _prompt(self, arg: str) -> None:
        self.engine.set_prompt(arg)

    def _new(self, arg: str) -> None:
        engine = self.engine
        prompt = engine.active_buffer.prompt
        index = engine.add_buffer(arg.strip() or None)
        engine.switch_buffer(index)
        engine.set_prompt(prompt)
        engine.write_message(f" === buffer {index + 1}: {engine.active_buffer.name}")

    def _close(self, arg: str) -> None:
        if not self.engine.remove_buffer(self.engine.active):
            self.engine.write_message(" !!! cannot close the last buffer")

    def _buffer(self, arg: str) -> None:
        try:
            index = int(arg.strip()) - 1
        except ValueError:
            self.engine.write_message(f" !!! not a buffer number: {arg!r}")
            return
        if not self.engine.switch_buffer(index):
            self.engine.write_message(f" !!! no buffer {index + 1}")

    def _snapshot(self, arg: str) -> None:
        if self.diagnostics is None:
            self.engine.write_message(" !!! diagnostics disabled")
            return
        path = self.diagnostics.export_to_file(arg.strip() or self.snapshot_dir)
        if path:
            self.engine.write_message(f" === snapshot saved to {path}")
        else:
            self.engine.write_message(" !!! snapshot export failed")

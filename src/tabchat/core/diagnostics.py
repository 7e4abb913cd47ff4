"""Diagnostics and troubleshooting snapshot generation.

Collects engine state, recent logs, recent keys and version information
into a plain-text snapshot that can be exported while the screen is owned
by the engine.
"""

from __future__ import annotations

from datetime import datetime, timezone
from importlib import metadata
from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Optional

from .keys import KeyEvent
from .modes import mode_name

if TYPE_CHECKING:
    from .engine import Engine
    from .log_manager import LogManager

MAX_KEY_EVENTS = 100


def gather_version_info() -> Dict[str, str]:
    """Collect version metadata for the snapshot header."""
    versions = {}
    for pkg in ("tabchat", "pyte", "wcwidth", "typer"):
        try:
            versions[pkg] = metadata.version(pkg)
        except metadata.PackageNotFoundError:
            versions[pkg] = "unknown"
    return versions


class DiagnosticsManager:
    """Manages diagnostic snapshot generation and export.

    Responsibilities:
    - Record key events (hooked in with ``Engine.set_key_logger``)
    - Generate troubleshooting snapshots
    - Export snapshots to files
    """

    def __init__(
        self,
        engine: Engine,
        log_manager: LogManager,
        version_info: Optional[Dict[str, str]] = None,
    ):
        """Initialize diagnostics manager.

        Args:
            engine: Engine whose state is reported
            log_manager: LogManager instance for log access
            version_info: Dictionary of version information; gathered from
                installed package metadata when omitted
        """
        self.engine = engine
        self.log_manager = log_manager
        self.version_info = version_info if version_info is not None else gather_version_info()
        self.key_events: List[str] = []

    def attach(self) -> None:
        """Start recording every key the engine handles."""
        self.engine.set_key_logger(self.record_key_event)

    def record_key_event(self, event: KeyEvent) -> None:
        entry = event.debug_token()
        self.key_events.append(entry)
        self.log_manager.add("keys", entry)
        if len(self.key_events) > MAX_KEY_EVENTS:
            self.key_events = self.key_events[-MAX_KEY_EVENTS:]

    def generate_snapshot(self) -> str:
        engine = self.engine
        lines: List[str] = []

        lines.append(f"timestamp: {datetime.now(timezone.utc).isoformat()}")
        lines.append("versions:")
        for pkg, version in self.version_info.items():
            lines.append(f"  {pkg}: {version}")

        rows, cols = engine.viewport
        lines.append(f"viewport: {rows}x{cols}")
        lines.append(f"mode: {mode_name(engine.mode)}")
        lines.append(f"active_buffer: {engine.active}")

        lines.append("buffers:")
        for index, buf in enumerate(engine.buffers):
            marker = "*" if index == engine.active else " "
            lines.append(
                f"  {marker} [{index}] {buf.name}: backlog={len(buf.backlog)} "
                f"input_len={len(buf.input)} cursor={buf.cursor} "
                f"prompt={buf.prompt!r} topic={buf.topic[:40]!r}"
            )

        for category in ("events", "errors", "debug"):
            lines.append(f"---- recent {category} ----")
            lines.append(self._recent_log_text(category))

        if self.key_events:
            lines.append("---- recent key events ----")
            lines.extend(self.key_events[-20:])

        return "\n".join(lines)

    def update_troubleshooting_log(self) -> str:
        """Generate snapshot and replace the troubleshooting log with it."""
        snapshot = self.generate_snapshot()
        buf = self.log_manager.buffers.get("troubleshooting")
        if buf is not None:
            buf.clear()
        self.log_manager.add("troubleshooting", snapshot)
        return snapshot

    def export_to_file(self, target_dir: str = "tabchat-snapshots") -> Optional[str]:
        """Export a snapshot to ``target_dir``.

        Returns:
            Path to saved file, or None if export failed
        """
        snapshot = self.update_troubleshooting_log()
        try:
            dir_path = Path(target_dir)
            dir_path.mkdir(parents=True, exist_ok=True)
            timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
            target_file = dir_path / f"snapshot_{timestamp}.txt"
            target_file.write_text(snapshot, encoding="utf-8")
            return str(target_file)
        except OSError as e:
            self.log_manager.add("errors", f"snapshot export failed: {e}")
            return None

    def _recent_log_text(self, category: str, limit: int = 50) -> str:
        buf = self.log_manager.buffers.get(category)
        if not buf:
            return f"(no {category})"
        return "\n".join(list(buf)[-limit:])

"""CLI for the tabchat example programs."""

from __future__ import annotations

import signal
import sys
from pathlib import Path
from typing import Optional, Sequence

import typer

from .config import EngineConfig
from .core.diagnostics import DiagnosticsManager
from .core.engine import Engine
from .core.log_manager import LogManager
from .demo import CHAT_MESSAGES, EDGECASE_MESSAGES, SHRUG, ChatDemo, Ticker
from .surface.curses_surface import CursesSurface

app = typer.Typer(
    help="Example chat programs for the tabchat terminal engine",
    add_completion=False,
)

INTERVAL_OPTION = typer.Option(3.0, "--interval", "-i", help="Seconds between incoming messages")
BUFFERS_OPTION = typer.Option(None, "--buffers", "-b", help="Number of buffers to start with")
TIMEOUT_OPTION = typer.Option(None, "--poll-timeout", help="Key poll timeout in milliseconds")
DEBUG_LOG_OPTION = typer.Option(None, "--debug-log", help="Write engine logs to this file on exit")
SNAPSHOT_DIR_OPTION = typer.Option("tabchat-snapshots", "--snapshot-dir", help="Where /snapshot writes")


def _exit_on_sigterm(signum, frame) -> None:
    # Unwind through the engine's context manager so the terminal is restored.
    sys.exit(128 + signum)


def run_demo(
    messages: Sequence[str],
    interval: float,
    config: EngineConfig,
    debug_log: Optional[Path] = None,
    snapshot_dir: str = "tabchat-snapshots",
    topic: str = "",
    prompt: str = "",
) -> int:
    log_manager = LogManager()
    engine = Engine(
        CursesSurface(debug_logger=log_manager.debug_logger),
        config=config,
        debug_logger=log_manager.debug_logger,
        log_manager=log_manager,
    )
    diagnostics = DiagnosticsManager(engine, log_manager)
    diagnostics.attach()
    demo = ChatDemo(engine, diagnostics=diagnostics, snapshot_dir=snapshot_dir)
    ticker = Ticker(messages=messages, deliver=demo.deliver, interval=interval)

    previous = signal.signal(signal.SIGTERM, _exit_on_sigterm)
    try:
        with engine:
            if topic:
                engine.set_topic(topic)
            if prompt:
                engine.set_prompt(prompt)
            demo.greet()
            ticker.start()
            demo.run()
    except KeyboardInterrupt:
        log_manager.add("events", "interrupted")
    finally:
        ticker.stop()
        signal.signal(signal.SIGTERM, previous)
        if debug_log is not None:
            log_manager.dump(debug_log)
    return 0


def _config(buffers: Optional[int], poll_timeout: Optional[int]) -> EngineConfig:
    try:
        return EngineConfig.from_env().with_overrides(
            initial_buffers=buffers,
            poll_timeout_ms=poll_timeout,
        )
    except ValueError as e:
        raise typer.BadParameter(str(e))


@app.command()
def chat(
    interval: float = INTERVAL_OPTION,
    buffers: Optional[int] = BUFFERS_OPTION,
    poll_timeout: Optional[int] = TIMEOUT_OPTION,
    debug_log: Optional[Path] = DEBUG_LOG_OPTION,
    snapshot_dir: str = SNAPSHOT_DIR_OPTION,
):
    """
    Minimal chat: the remote side says "ohai" every few seconds.

    Type a line and press Enter to send it. Esc+digit switches buffers,
    Ctrl+K shows the next key's debug name, /quit leaves.
    """
    config = _config(buffers, poll_timeout)
    raise typer.Exit(run_demo(CHAT_MESSAGES, interval, config, debug_log, snapshot_dir))


@app.command()
def edgecases(
    interval: float = INTERVAL_OPTION,
    buffers: Optional[int] = BUFFERS_OPTION,
    poll_timeout: Optional[int] = TIMEOUT_OPTION,
    debug_log: Optional[Path] = DEBUG_LOG_OPTION,
    snapshot_dir: str = SNAPSHOT_DIR_OPTION,
):
    """
    Stress the renderer: long text, wide glyphs, tabs and an oversized topic.
    """
    config = _config(buffers, poll_timeout)
    raise typer.Exit(
        run_demo(
            EDGECASE_MESSAGES,
            interval,
            config,
            debug_log,
            snapshot_dir,
            topic=SHRUG * 300,
            prompt="[user] ",
        )
    )


if __name__ == "__main__":
    app()

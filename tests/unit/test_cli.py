"""CLI tests with the curses surface swapped for the emulated one."""

from __future__ import annotations

from unittest.mock import patch

from typer.testing import CliRunner

from tabchat.cli import app
from tabchat.core.engine import Engine
from tabchat.surface.emulated import EmulatedSurface

runner = CliRunner()


def _scripted_surface(text):
    surface = EmulatedSurface(rows=12, cols=60)
    surface.type_text(text)
    return surface


def test_help_lists_commands():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "chat" in result.output
    assert "edgecases" in result.output


def test_chat_quits_and_dumps_log(tmp_path):
    surface = _scripted_surface("hello\n/quit\n")
    log_path = tmp_path / "debug.log"
    with patch("tabchat.cli.CursesSurface", return_value=surface):
        result = runner.invoke(
            app,
            ["chat", "--interval", "60", "--poll-timeout", "0", "--debug-log", str(log_path)],
        )
    assert result.exit_code == 0, result.output
    assert surface.release_count == 1
    content = log_path.read_text(encoding="utf-8")
    assert "surface released" in content


def test_edgecases_sets_prompt():
    surface = _scripted_surface("/quit\n")
    with patch("tabchat.cli.CursesSurface", return_value=surface):
        result = runner.invoke(app, ["edgecases", "--interval", "60", "--poll-timeout", "0"])
    assert result.exit_code == 0, result.output
    assert surface.line(11) == "[user]"


def test_invalid_buffer_count():
    result = runner.invoke(app, ["chat", "--buffers", "0"])
    assert result.exit_code == 2


def test_buffers_option():
    surface = _scripted_surface("/quit\n")
    with patch("tabchat.cli.CursesSurface", return_value=surface), patch(
        "tabchat.cli.Engine", wraps=Engine
    ) as engine_cls:
        result = runner.invoke(app, ["chat", "-b", "3", "--interval", "60", "--poll-timeout", "0"])
    assert result.exit_code == 0, result.output
    config = engine_cls.call_args.kwargs["config"]
    assert config.initial_buffers == 3

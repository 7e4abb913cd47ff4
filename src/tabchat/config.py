"""Engine configuration.

Defaults match an interactive chat session; ``from_env`` lets a host pick up
overrides without plumbing options through every layer.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

DEFAULT_MAX_BACKLOG = 2000
WRAP_MARGIN = 3
CONTINUATION_PREFIX = "| "

ENV_PREFIX = "TABCHAT_"


@dataclass(frozen=True)
class EngineConfig:
    poll_timeout_ms: int = 100
    max_backlog: Optional[int] = DEFAULT_MAX_BACKLOG
    wrap_margin: int = WRAP_MARGIN
    continuation_prefix: str = CONTINUATION_PREFIX
    initial_buffers: int = 1

    def __post_init__(self) -> None:
        if self.poll_timeout_ms < 0:
            raise ValueError(f"poll_timeout_ms must be >= 0, got {self.poll_timeout_ms}")
        if self.max_backlog is not None and self.max_backlog <= 0:
            raise ValueError(f"max_backlog must be positive or None, got {self.max_backlog}")
        if self.initial_buffers < 1:
            raise ValueError(f"initial_buffers must be >= 1, got {self.initial_buffers}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineConfig":
        """Build a config from ``TABCHAT_*`` variables.

        Recognised: TABCHAT_POLL_TIMEOUT_MS, TABCHAT_MAX_BACKLOG (``0`` or
        ``none`` disables the bound), TABCHAT_BUFFERS.
        """
        env = os.environ if environ is None else environ
        config = cls()

        timeout = env.get(f"{ENV_PREFIX}POLL_TIMEOUT_MS")
        if timeout:
            config = replace(config, poll_timeout_ms=int(timeout))

        backlog = env.get(f"{ENV_PREFIX}MAX_BACKLOG")
        if backlog:
            if backlog.strip().lower() in ("0", "none"):
                config = replace(config, max_backlog=None)
            else:
                config = replace(config, max_backlog=int(backlog))

        buffers = env.get(f"{ENV_PREFIX}BUFFERS")
        if buffers:
            config = replace(config, initial_buffers=int(buffers))

        return config

    def with_overrides(self, **overrides) -> "EngineConfig":
        """Copy with every non-None override applied (CLI options)."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self

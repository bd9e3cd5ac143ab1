"""Observability sinks: advisory progress messages for operators.

Sinks never influence control flow.  ``LoggingSink`` feeds the standard
logging tree; ``ConsoleSink`` writes straight to a Rich console.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from rich.console import Console
from rich.markup import escape

LOCAL_HOST = "LocalHost"


@runtime_checkable
class ProgressSink(Protocol):
    """Protocol for progress message targets."""

    def message(self, text: str) -> None:
        """Accept a human-readable progress message."""
        ...


class LoggingSink:
    """Emits progress messages as INFO records on a logger."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("kubebin.progress")

    def message(self, text: str) -> None:
        self._logger.info("[%s] %s", LOCAL_HOST, text)


class ConsoleSink:
    """Prints progress messages to a Rich console, prefixed with the host.

    Parameters
    ----------
    console:
        Target console.  Defaults to a new stderr console.
    host:
        Host label shown before each message.
    """

    def __init__(self, console: Console | None = None, host: str = LOCAL_HOST) -> None:
        self.console = console or Console(stderr=True)
        self.host = host

    def message(self, text: str) -> None:
        self.console.print(f"[bold cyan]\\[{escape(self.host)}][/bold cyan] {escape(text)}")

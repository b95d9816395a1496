# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Operator-facing message sinks."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol

from rich.console import Console
from rich.markup import escape

logger = logging.getLogger(__name__)


class Ui(Protocol):
    """One-way diagnostic output used by pipeline steps."""

    def say(self, msg: str) -> None: ...

    def error(self, msg: str) -> None: ...


class ConsoleUi:
    """Ui that prints to the terminal with rich and mirrors into logging."""

    def __init__(self, console: Console | None = None, err_console: Console | None = None):
        self._console = console or Console()
        self._err_console = err_console or Console(stderr=True)

    def say(self, msg: str) -> None:
        logger.debug("say: %s", msg)
        self._console.print(f"[bold cyan]==>[/bold cyan] {escape(msg)}")

    def error(self, msg: str) -> None:
        logger.debug("error: %s", msg)
        self._err_console.print(f"[bold red]==> {escape(msg)}[/bold red]")


@dataclass
class RecordingUi:
    """Ui that keeps every message in memory."""

    messages: list[str] = field(default_factory=lambda: list[str]())
    errors: list[str] = field(default_factory=lambda: list[str]())

    def say(self, msg: str) -> None:
        self.messages.append(msg)

    def error(self, msg: str) -> None:
        self.errors.append(msg)

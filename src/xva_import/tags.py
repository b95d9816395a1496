# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Helper for tagging VMs."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable

from .xapi_client import Connection

TagFn = Callable[[Connection, str, list[str]], Awaitable[None]]


async def add_vm_tags(connection: Connection, vm: str, tags: Iterable[str]) -> None:
    """Add each of *tags* to *vm*, stopping at the first failure.

    ``VM.add_tags`` is a set operation on the host, so re-adding an
    existing tag is harmless.
    """
    for tag in tags:
        await connection.client.vm_add_tags(connection.get_session(), vm, tag)

# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Context dataclass passed through the import pipeline steps."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from ..config import ImportConfig
from ..tags import TagFn, add_vm_tags
from ..ui import Ui
from ..upload import UploadFn, http_upload
from ..xapi_client import Connection

Compensation = Callable[["ImportContext"], Awaitable[None]]


@dataclass
class ImportContext:
    """Context passed through the instance import pipeline.

    The inputs are supplied by the driver.  Steps fill in the outputs
    as they go; ``instance_uuid`` is the value later stages read, and it
    stays set even when a later step fails.
    """

    connection: Connection
    config: ImportConfig
    ui: Ui
    upload: UploadFn = http_upload
    add_tags: TagFn = add_vm_tags
    cancel: asyncio.Event = field(default_factory=asyncio.Event)

    # Built up by pipeline steps
    sr: str | None = None
    instance_ref: str | None = None
    instance_uuid: str | None = None
    is_template: bool = False
    compensations: list[Compensation] = field(default_factory=lambda: list[Compensation]())

    @property
    def session(self) -> str:
        return self.connection.get_session()

    @property
    def storage(self) -> str:
        """The resolved SR reference; only valid after the storage step."""
        if self.sr is None:
            raise RuntimeError("No SR has been resolved yet")
        return self.sr

    @property
    def vm(self) -> str:
        """The imported VM reference; only valid after the upload step."""
        if self.instance_ref is None:
            raise RuntimeError("No instance has been imported yet")
        return self.instance_ref

    def say(self, msg: str) -> None:
        self.ui.say(msg)

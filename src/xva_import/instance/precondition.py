# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Import step: decide whether there is anything to import."""

from __future__ import annotations

import logging

from ..errors import StepSkipped
from .contexts import ImportContext
from . import import_pipeline

logger = logging.getLogger(__name__)


@import_pipeline.step(order=0)
async def check_source_path(ctx: ImportContext) -> None:
    """Skip the whole import when no ``source_path`` is configured."""
    ctx.say("Step: Import Instance")

    if not ctx.config.source_path:
        logger.info("No source_path configured, nothing to import")
        ctx.say("Skipping instance import - no source_path configured")
        raise StepSkipped()

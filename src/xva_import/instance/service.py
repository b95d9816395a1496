# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Driver-facing entry point for the instance import step."""

from __future__ import annotations

import logging

from ..errors import ImportStepError, Outcome
from .contexts import ImportContext
from . import import_pipeline

logger = logging.getLogger(__name__)


async def run_import_instance(ctx: ImportContext) -> Outcome:
    """Run the import pipeline and translate its result for the driver.

    A skipped import and a completed one both return
    :attr:`Outcome.CONTINUE`.  Any :class:`ImportStepError` is reported
    once through ``ctx.ui`` and returns :attr:`Outcome.HALT`.
    Cancellation is not handled here: :class:`asyncio.CancelledError`
    propagates to the driver.
    """
    try:
        completed = await import_pipeline.run(ctx)
    except ImportStepError as e:
        logger.debug("Import halted in %s: %s", e.phase, e)
        ctx.ui.error(str(e))
        if ctx.config.destroy_on_failure:
            await _compensate(ctx)
        return Outcome.HALT

    if completed:
        logger.info("Imported VM %s", ctx.instance_uuid)
    return Outcome.CONTINUE


async def _compensate(ctx: ImportContext) -> None:
    """Run registered compensations, most recent first."""
    for action in reversed(ctx.compensations):
        await action(ctx)
    ctx.compensations.clear()

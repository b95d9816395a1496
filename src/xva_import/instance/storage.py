# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Import step: resolve the target storage repository."""

from __future__ import annotations

from ..errors import ResolutionFailure, XapiError
from .contexts import ImportContext
from . import import_pipeline


@import_pipeline.step(order=100)
async def resolve_storage(ctx: ImportContext) -> None:
    try:
        ctx.sr = await ctx.config.get_sr(ctx.connection)
    except XapiError as e:
        raise ResolutionFailure(f"Unable to get SR: {e}", "resolve_storage") from e

    ctx.say(f"SR reference: {ctx.sr}")

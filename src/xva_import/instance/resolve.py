# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Import steps: resolve the VM UUID and turn a template into a VM."""

from __future__ import annotations

from ..errors import ResolutionFailure, StateMutationFailure, XapiError
from .contexts import ImportContext
from . import import_pipeline


@import_pipeline.step(order=300)
async def resolve_uuid(ctx: ImportContext) -> None:
    """Exchange the opaque reference for the VM's UUID.

    ``ctx.instance_uuid`` is published before the template check so it
    is visible to the driver even if anything after this fails.
    """
    client = ctx.connection.client
    try:
        ctx.instance_uuid = await client.vm_get_uuid(ctx.session, ctx.vm)
    except XapiError as e:
        raise ResolutionFailure(f"Unable to get VM UUID: {e}", "resolve_uuid") from e

    # XVA imports frequently land as templates
    try:
        ctx.is_template = await client.vm_get_is_a_template(ctx.session, ctx.vm)
    except XapiError as e:
        raise ResolutionFailure(
            f"Unable to find instance information: {e}", "resolve_uuid",
        ) from e


@import_pipeline.step(order=400)
async def convert_template(ctx: ImportContext) -> None:
    """Clear the template flag so the VM can boot."""
    if not ctx.is_template:
        return

    try:
        await ctx.connection.client.vm_set_is_a_template(ctx.session, ctx.vm, False)
    except XapiError as e:
        raise StateMutationFailure(
            f"Error converting instance to a VM: {e}", "convert_template",
        ) from e
    ctx.is_template = False

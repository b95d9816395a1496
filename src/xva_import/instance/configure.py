# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Import steps: apply name, VCPU counts, description and tags."""

from __future__ import annotations

from ..errors import StateMutationFailure, XapiError
from .contexts import ImportContext
from . import import_pipeline


@import_pipeline.step(order=500)
async def configure_instance(ctx: ImportContext) -> None:
    """Set the VM's name label, VCPUs, and description.

    Each setting is its own call.  A failure stops here and leaves the
    settings already applied in place.
    """
    client = ctx.connection.client
    config = ctx.config

    try:
        await client.vm_set_name_label(ctx.session, ctx.vm, config.vm_name)
    except XapiError as e:
        raise StateMutationFailure(
            f"Unable to rename VM to '{config.vm_name}': {e}", "configure_instance",
        ) from e

    try:
        await client.vm_set_vcpus_max(ctx.session, ctx.vm, config.vcpus_max)
    except XapiError as e:
        raise StateMutationFailure(
            f"Error setting VM VCPUs Max={config.vcpus_max}: {e}", "configure_instance",
        ) from e

    try:
        await client.vm_set_vcpus_at_startup(ctx.session, ctx.vm, config.vcpus_at_startup)
    except XapiError as e:
        raise StateMutationFailure(
            f"Error setting VM VCPUs At Startup={config.vcpus_at_startup}: {e}",
            "configure_instance",
        ) from e

    try:
        await client.vm_set_name_description(ctx.session, ctx.vm, config.vm_description)
    except XapiError as e:
        raise StateMutationFailure(
            f"Error setting VM description '{config.vm_description}': {e}",
            "configure_instance",
        ) from e


@import_pipeline.step(order=600)
async def apply_tags(ctx: ImportContext) -> None:
    tags = list(ctx.config.vm_tags)
    try:
        await ctx.add_tags(ctx.connection, ctx.vm, tags)
    except XapiError as e:
        raise StateMutationFailure(
            f"Failed to add tags {', '.join(tags)}: {e}", "apply_tags",
        ) from e

    ctx.say(f"Imported instance '{ctx.instance_uuid}'")

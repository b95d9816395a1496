# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Compensating action: remove a partially configured import.

Registered by the upload step once a VM exists, but only run when the
config sets ``destroy_on_failure``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..errors import XapiError

if TYPE_CHECKING:
    from .contexts import ImportContext

logger = logging.getLogger(__name__)


async def destroy_instance(ctx: ImportContext) -> None:
    """Destroy the imported VM and the disks attached to it.

    Every failure is reported and cleanup carries on with the next
    object, so one stuck disk doesn't leave the VM behind too.
    """
    if ctx.instance_ref is None:
        return
    client = ctx.connection.client
    vm = ctx.instance_ref

    try:
        await client.vm_hard_shutdown(ctx.session, vm)
    except XapiError as e:
        # Freshly imported VMs are halted; VM_BAD_POWER_STATE is expected
        logger.debug("hard_shutdown of %s: %s", vm, e)

    vdis: list[str] = []
    try:
        for vbd in await client.vm_get_vbds(ctx.session, vm):
            vdi = await client.vbd_get_vdi(ctx.session, vbd)
            if vdi and vdi != "OpaqueRef:NULL":
                vdis.append(vdi)
    except XapiError as e:
        ctx.ui.error(f"Unable to list disks of VM {vm}: {e}")

    ctx.say("Destroying VM")
    try:
        await client.vm_destroy(ctx.session, vm)
    except XapiError as e:
        ctx.ui.error(f"Unable to destroy VM {vm}: {e}")

    for vdi in vdis:
        ctx.say(f"Destroying VDI {vdi}")
        try:
            await client.vdi_destroy(ctx.session, vdi)
        except XapiError as e:
            ctx.ui.error(f"Unable to destroy VDI {vdi}: {e}")

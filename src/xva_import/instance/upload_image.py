# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Import step: stream the XVA to the host and read back the VM reference."""

from __future__ import annotations

import logging

from ..errors import ProtocolAnomaly, TransportFailure, UploadError
from ..reply import parse_import_reply
from ..upload import import_url
from .cleanup import destroy_instance
from .contexts import ImportContext
from . import import_pipeline

logger = logging.getLogger(__name__)


@import_pipeline.step(order=200)
async def upload_image(ctx: ImportContext) -> None:
    """Upload ``source_path`` to the resolved SR.

    The file handle is owned here and closed when this step exits, on
    every path including cancellation.  The transport only reads it.
    """
    path = ctx.config.source_path
    url = import_url(ctx.connection.host, ctx.session, ctx.storage)

    try:
        fh = open(path, "rb")
    except OSError as e:
        raise TransportFailure(f"Unable to open XVA '{path}': {e}", "upload_image") from e

    logger.info("Uploading %s to %s", path, ctx.connection.host)
    with fh:
        try:
            result = await ctx.upload(url, fh, ctx.cancel)
        except (UploadError, OSError) as e:
            raise TransportFailure(f"Unable to upload XVA: {e}", "upload_image") from e

    if not result:
        raise ProtocolAnomaly("XAPI did not reply with an instance reference", "upload_image")

    ref = parse_import_reply(result).ref
    if not ref:
        raise ProtocolAnomaly(
            f"XAPI reply contained no instance reference: {result!r}", "upload_image",
        )

    ctx.instance_ref = ref
    ctx.compensations.append(destroy_instance)
    ctx.say(f"Instance reference: {ref}")

# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""HTTP upload transport for the XAPI ``/import`` handler.

The image is streamed as the request body in fixed-size chunks; XVA
files are routinely several gigabytes so nothing is buffered whole.

Handle ownership: :func:`http_upload` only reads from ``fh``.  The
caller opened it and the caller closes it.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import BinaryIO
from urllib.parse import urlencode

import httpx

from .errors import UploadError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024

# Connect/write timeouts only; XAPI may take minutes to answer after the
# last byte while it unpacks the image.
_TIMEOUT = httpx.Timeout(30.0, read=None)

# Implementations signal failure with UploadError or OSError.
UploadFn = Callable[[str, BinaryIO, "asyncio.Event | None"], Awaitable[str]]


def import_url(host: str, session: str, sr: str) -> str:
    """Build the ``/import`` URL for *sr* authenticated by *session*."""
    query = urlencode({"session_id": session, "sr_id": sr})
    return f"https://{host}/import?{query}"


def _file_size(fh: BinaryIO) -> int | None:
    try:
        return os.fstat(fh.fileno()).st_size - fh.tell()
    except (OSError, AttributeError, ValueError):
        return None


async def _read_chunks(fh: BinaryIO, size: int | None) -> AsyncIterator[bytes]:
    sent = 0
    next_report = 10
    while True:
        chunk = await asyncio.to_thread(fh.read, CHUNK_SIZE)
        if not chunk:
            break
        sent += len(chunk)
        if size:
            percent = sent * 100 // size
            if percent >= next_report:
                logger.info("Upload progress: %d%%", percent)
                next_report = percent - percent % 10 + 10
        yield chunk


async def http_upload(
    url: str,
    fh: BinaryIO,
    cancel: asyncio.Event | None = None,
    *,
    verify_ssl: bool = True,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str:
    """PUT the contents of *fh* to *url* and return the response body.

    Args:
        url: Upload endpoint, see :func:`import_url`.
        fh: Binary file opened for reading.  Not closed here.
        cancel: When set, the in-flight transfer is aborted and
            :class:`asyncio.CancelledError` is raised.
        verify_ssl: Verify the host certificate.
        transport: Custom httpx transport (tests).

    Returns:
        The raw response text.

    Raises:
        UploadError: On network errors, read errors, or a non-2xx reply.
        asyncio.CancelledError: If *cancel* was set mid-transfer.
    """
    size = _file_size(fh)
    headers = {"Content-Type": "application/octet-stream"}
    if size is not None:
        headers["Content-Length"] = str(size)

    async with httpx.AsyncClient(verify=verify_ssl, timeout=_TIMEOUT, transport=transport) as client:
        request = asyncio.ensure_future(
            client.put(url, content=_read_chunks(fh, size), headers=headers)
        )
        waiter = asyncio.ensure_future(cancel.wait()) if cancel is not None else None
        try:
            pending = {request} if waiter is None else {request, waiter}
            await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)
            if not request.done():
                logger.warning("Upload to %s cancelled", url.split("?")[0])
                raise asyncio.CancelledError("upload cancelled")
            try:
                response = request.result()
                response.raise_for_status()
            except httpx.HTTPError as e:
                raise UploadError(str(e)) from e
            except OSError as e:
                raise UploadError(f"read error: {e}") from e
        finally:
            for task in (request, waiter):
                if task is not None and not task.done():
                    task.cancel()
            # Let the cancelled request unwind before the client closes.
            await asyncio.gather(request, return_exceptions=True)

    return response.text

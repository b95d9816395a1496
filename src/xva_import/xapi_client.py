# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""High-level XAPI client.

This module provides an async client for the XenServer / XCP-ng
management API.  XAPI speaks XML-RPC over HTTPS on the host root; every
reply is wrapped in a status envelope that :meth:`XapiClient.call`
unwraps.
"""

from __future__ import annotations

import logging
import xmlrpc.client
from dataclasses import dataclass
from typing import Any
from xml.parsers.expat import ExpatError

import httpx

from .errors import XapiError

logger = logging.getLogger(__name__)

# Reported to XAPI at login; shows up in the host's session list.
_ORIGINATOR = "xva-import"
_API_VERSION = "1.0"


class XapiClient:
    """Async client for XAPI XML-RPC over HTTPS."""

    def __init__(
        self,
        url: str,
        verify_ssl: bool = True,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._url = url
        self._verify_ssl = verify_ssl
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self._url,
                verify=self._verify_ssl,
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def call(self, method: str, *params: Any) -> Any:
        """Invoke an XAPI method and return its ``Value``.

        XAPI wraps all responses in:
        {
            "Status": "Success" | "Failure",
            "Value": <actual data>,            # on success
            "ErrorDescription": [code, ...],   # on failure
        }
        """
        body = xmlrpc.client.dumps(params, method, allow_none=True)
        client = await self._get_client()
        try:
            response = await client.post(
                "/", content=body.encode(), headers={"Content-Type": "text/xml"},
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise XapiError(f"{method}: {e}") from e

        try:
            (data,), _name = xmlrpc.client.loads(response.text)
        except (xmlrpc.client.Fault, xmlrpc.client.ResponseError, ExpatError, ValueError) as e:
            raise XapiError(f"{method}: malformed XML-RPC reply: {e}") from e

        if not isinstance(data, dict) or "Status" not in data:
            raise XapiError(f"{method}: reply is not an XAPI envelope")

        if data["Status"] != "Success":
            details = [str(d) for d in data.get("ErrorDescription", [])]
            raise XapiError(", ".join(details) or "Unknown error", details)

        logger.debug("%s -> %r", method, data.get("Value"))
        return data.get("Value")

    # -------------------------------------------------------------------------
    # Session
    # -------------------------------------------------------------------------

    async def session_login_with_password(self, username: str, password: str) -> str:
        return await self.call(
            "session.login_with_password", username, password, _API_VERSION, _ORIGINATOR,
        )

    async def session_logout(self, session: str) -> None:
        await self.call("session.logout", session)

    # -------------------------------------------------------------------------
    # Pools and storage repositories
    # -------------------------------------------------------------------------

    async def pool_get_all(self, session: str) -> list[str]:
        return await self.call("pool.get_all", session)

    async def pool_get_default_sr(self, session: str, pool: str) -> str:
        return await self.call("pool.get_default_SR", session, pool)

    async def sr_get_by_name_label(self, session: str, name: str) -> list[str]:
        return await self.call("SR.get_by_name_label", session, name)

    # -------------------------------------------------------------------------
    # VMs
    # -------------------------------------------------------------------------

    async def vm_get_uuid(self, session: str, vm: str) -> str:
        return await self.call("VM.get_uuid", session, vm)

    async def vm_get_is_a_template(self, session: str, vm: str) -> bool:
        return bool(await self.call("VM.get_is_a_template", session, vm))

    async def vm_set_is_a_template(self, session: str, vm: str, value: bool) -> None:
        await self.call("VM.set_is_a_template", session, vm, value)

    async def vm_set_name_label(self, session: str, vm: str, name: str) -> None:
        await self.call("VM.set_name_label", session, vm, name)

    async def vm_set_name_description(self, session: str, vm: str, description: str) -> None:
        await self.call("VM.set_name_description", session, vm, description)

    async def vm_set_vcpus_max(self, session: str, vm: str, count: int) -> None:
        # XAPI encodes int64 fields as strings.
        await self.call("VM.set_VCPUs_max", session, vm, str(count))

    async def vm_set_vcpus_at_startup(self, session: str, vm: str, count: int) -> None:
        await self.call("VM.set_VCPUs_at_startup", session, vm, str(count))

    async def vm_add_tags(self, session: str, vm: str, tag: str) -> None:
        await self.call("VM.add_tags", session, vm, tag)

    async def vm_get_vbds(self, session: str, vm: str) -> list[str]:
        return await self.call("VM.get_VBDs", session, vm)

    async def vm_hard_shutdown(self, session: str, vm: str) -> None:
        await self.call("VM.hard_shutdown", session, vm)

    async def vm_destroy(self, session: str, vm: str) -> None:
        await self.call("VM.destroy", session, vm)

    # -------------------------------------------------------------------------
    # Disks
    # -------------------------------------------------------------------------

    async def vbd_get_vdi(self, session: str, vbd: str) -> str:
        return await self.call("VBD.get_VDI", session, vbd)

    async def vdi_destroy(self, session: str, vdi: str) -> None:
        await self.call("VDI.destroy", session, vdi)

    async def is_available(self) -> bool:
        """Check if the host is reachable and answering XML-RPC.

        Returns:
            True if XAPI is available.
        """
        try:
            await self.call("pool.get_all", "")
            return True
        except XapiError as e:
            # An auth failure still proves XAPI is answering.
            return bool(e.details)


@dataclass
class Connection:
    """An authenticated XAPI session on one host."""

    host: str
    session: str
    client: XapiClient

    def get_session(self) -> str:
        return self.session

    @classmethod
    async def login(
        cls,
        host: str,
        username: str,
        password: str,
        verify_ssl: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> Connection:
        """Open a session on *host* with username/password auth.

        Raises:
            XapiError: If the host is not answering XAPI calls or the
                credentials are rejected.
        """
        client = XapiClient(f"https://{host}", verify_ssl=verify_ssl, transport=transport)
        if not await client.is_available():
            await client.close()
            raise XapiError(f"XAPI is not available on {host}")
        try:
            session = await client.session_login_with_password(username, password)
        except XapiError:
            await client.close()
            raise
        logger.info("Logged in to %s as %s", host, username)
        return cls(host=host, session=session, client=client)

    async def logout(self) -> None:
        """End the session and close the HTTP client."""
        try:
            await self.client.session_logout(self.session)
        except XapiError as e:
            logger.warning("Logout from %s failed: %s", self.host, e)
        finally:
            await self.client.close()

# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Shared fixtures: an in-memory XAPI and recording collaborators."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, BinaryIO

import pytest

from xva_import.config import ImportConfig
from xva_import.errors import XapiError
from xva_import.instance import ImportContext
from xva_import.ui import RecordingUi
from xva_import.xapi_client import Connection


class FakeXapiClient:
    """Stands in for :class:`XapiClient`, recording each call by name.

    ``results`` overrides return values and ``failures`` maps a call
    name to the :class:`XapiError` it should raise.
    """

    def __init__(self, calls: list[str]):
        self.calls = calls
        self.args: dict[str, list[tuple[Any, ...]]] = {}
        self.failures: dict[str, XapiError] = {}
        self.results: dict[str, Any] = {
            "pool_get_all": ["OpaqueRef:pool"],
            "pool_get_default_sr": "SR:default",
            "sr_get_by_name_label": ["SR:1"],
            "vm_get_uuid": "uuid-42",
            "vm_get_is_a_template": True,
            "vm_get_vbds": ["OpaqueRef:vbd"],
            "vbd_get_vdi": "OpaqueRef:vdi",
        }

    async def _call(self, name: str, *args: Any) -> Any:
        self.calls.append(name)
        self.args.setdefault(name, []).append(args)
        if name in self.failures:
            raise self.failures[name]
        return self.results.get(name)

    async def pool_get_all(self, session: str) -> Any:
        return await self._call("pool_get_all", session)

    async def pool_get_default_sr(self, session: str, pool: str) -> Any:
        return await self._call("pool_get_default_sr", session, pool)

    async def sr_get_by_name_label(self, session: str, name: str) -> Any:
        return await self._call("sr_get_by_name_label", session, name)

    async def vm_get_uuid(self, session: str, vm: str) -> Any:
        return await self._call("vm_get_uuid", session, vm)

    async def vm_get_is_a_template(self, session: str, vm: str) -> Any:
        return await self._call("vm_get_is_a_template", session, vm)

    async def vm_set_is_a_template(self, session: str, vm: str, value: bool) -> Any:
        return await self._call("vm_set_is_a_template", session, vm, value)

    async def vm_set_name_label(self, session: str, vm: str, name: str) -> Any:
        return await self._call("vm_set_name_label", session, vm, name)

    async def vm_set_vcpus_max(self, session: str, vm: str, count: int) -> Any:
        return await self._call("vm_set_vcpus_max", session, vm, count)

    async def vm_set_vcpus_at_startup(self, session: str, vm: str, count: int) -> Any:
        return await self._call("vm_set_vcpus_at_startup", session, vm, count)

    async def vm_set_name_description(self, session: str, vm: str, description: str) -> Any:
        return await self._call("vm_set_name_description", session, vm, description)

    async def vm_add_tags(self, session: str, vm: str, tag: str) -> Any:
        return await self._call("vm_add_tags", session, vm, tag)

    async def vm_get_vbds(self, session: str, vm: str) -> Any:
        return await self._call("vm_get_vbds", session, vm)

    async def vbd_get_vdi(self, session: str, vbd: str) -> Any:
        return await self._call("vbd_get_vdi", session, vbd)

    async def vm_hard_shutdown(self, session: str, vm: str) -> Any:
        return await self._call("vm_hard_shutdown", session, vm)

    async def vm_destroy(self, session: str, vm: str) -> Any:
        return await self._call("vm_destroy", session, vm)

    async def vdi_destroy(self, session: str, vdi: str) -> Any:
        return await self._call("vdi_destroy", session, vdi)


class FakeUpload:
    """Upload transport that returns a canned reply without any I/O."""

    def __init__(self, calls: list[str], reply: str = "i-9", error: Exception | None = None):
        self.calls = calls
        self.reply = reply
        self.error = error
        self.urls: list[str] = []
        self.handles: list[BinaryIO] = []

    async def __call__(self, url: str, fh: BinaryIO, cancel: asyncio.Event | None) -> str:
        self.calls.append("upload")
        self.urls.append(url)
        self.handles.append(fh)
        assert not fh.closed
        if self.error is not None:
            raise self.error
        return self.reply


class FakeTags:
    def __init__(self, calls: list[str], error: Exception | None = None):
        self.calls = calls
        self.error = error
        self.applied: list[tuple[str, list[str]]] = []

    async def __call__(self, connection: Connection, vm: str, tags: list[str]) -> None:
        self.calls.append("add_tags")
        if self.error is not None:
            raise self.error
        self.applied.append((vm, tags))


@pytest.fixture
def calls() -> list[str]:
    return []


@pytest.fixture
def xapi(calls: list[str]) -> FakeXapiClient:
    return FakeXapiClient(calls)


@pytest.fixture
def fake_upload(calls: list[str]) -> FakeUpload:
    return FakeUpload(calls)


@pytest.fixture
def fake_tags(calls: list[str]) -> FakeTags:
    return FakeTags(calls)


@pytest.fixture
def xva_file(tmp_path: Path) -> Path:
    path = tmp_path / "image.xva"
    path.write_bytes(b"XVA" * 100)
    return path


@pytest.fixture
def connection(xapi: FakeXapiClient) -> Connection:
    return Connection(host="xen.example", session="OpaqueRef:session", client=xapi)  # type: ignore[arg-type]


@pytest.fixture
def import_config(xva_file: Path) -> ImportConfig:
    return ImportConfig(
        source_path=str(xva_file),
        sr_name="Local storage",
        vm_name="golden",
        vm_description="built by CI",
        vcpus_max=4,
        vcpus_at_startup=2,
        vm_tags=["ci", "golden"],
    )


@pytest.fixture
def make_ctx(connection: Connection, fake_upload: FakeUpload, fake_tags: FakeTags):
    def _make(config: ImportConfig) -> ImportContext:
        return ImportContext(
            connection=connection,
            config=config,
            ui=RecordingUi(),
            upload=fake_upload,
            add_tags=fake_tags,
        )
    return _make


@pytest.fixture
def ctx(make_ctx, import_config: ImportConfig) -> ImportContext:
    return make_ctx(import_config)

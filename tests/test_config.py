# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Tests for import configuration and SR resolution."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from xva_import.config import ConnectionSettings, ImportConfig, load_config
from xva_import.errors import ConfigError, XapiError


def test_defaults():
    config = ImportConfig()

    assert config.source_path == ""
    assert config.vcpus_max == 1
    assert config.vcpus_at_startup == 1
    assert config.vm_name.startswith("xva-import-")
    assert config.destroy_on_failure is False


def test_vcpus_at_startup_cannot_exceed_max():
    with pytest.raises(ValidationError, match="must not exceed vcpus_max"):
        ImportConfig(vcpus_max=2, vcpus_at_startup=4)


def test_vcpus_must_be_positive():
    with pytest.raises(ValidationError):
        ImportConfig(vcpus_max=0)


def test_tags_are_deduplicated_in_order():
    config = ImportConfig(vm_tags=["b", "a", "b", "", "c", "a"])

    assert config.vm_tags == ["b", "a", "c"]


def test_unknown_keys_rejected():
    with pytest.raises(ValidationError):
        ImportConfig(vm_nmae="typo")  # type: ignore[call-arg]


def test_load_config_resolves_relative_source(tmp_path: Path):
    path = tmp_path / "import.yaml"
    path.write_text(
        "source_path: images/base.xva\n"
        "vm_name: base\n"
        "vcpus_max: 2\n"
        "vm_tags: [ci]\n"
    )

    config = load_config(path)

    assert config.source_path == str(tmp_path / "images" / "base.xva")
    assert config.vm_name == "base"
    assert config.vcpus_max == 2
    assert config.vm_tags == ["ci"]


def test_load_config_rejects_non_mapping(tmp_path: Path):
    path = tmp_path / "import.yaml"
    path.write_text("- just\n- a list\n")

    with pytest.raises(ConfigError, match="must contain a mapping"):
        load_config(path)


def test_load_config_wraps_validation_errors(tmp_path: Path):
    path = tmp_path / "import.yaml"
    path.write_text("vcpus_max: 1\nvcpus_at_startup: 3\n")

    with pytest.raises(ConfigError, match="Invalid config"):
        load_config(path)


def test_load_config_missing_file(tmp_path: Path):
    with pytest.raises(ConfigError, match="Unable to read config"):
        load_config(tmp_path / "missing.yaml")


def test_connection_settings_from_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("XVA_IMPORT_HOST", "xen.example")
    monkeypatch.setenv("XVA_IMPORT_VERIFY_SSL", "false")

    settings = ConnectionSettings()

    assert settings.host == "xen.example"
    assert settings.username == "root"
    assert settings.verify_ssl is False


async def test_get_sr_by_name(connection, xapi):
    sr = await ImportConfig(sr_name="Local storage").get_sr(connection)

    assert sr == "SR:1"
    assert xapi.args["sr_get_by_name_label"] == [("OpaqueRef:session", "Local storage")]


async def test_get_sr_ambiguous_name(connection, xapi):
    xapi.results["sr_get_by_name_label"] = ["SR:1", "SR:2"]

    with pytest.raises(XapiError, match="Found more than one SR with the name 'Local storage'"):
        await ImportConfig(sr_name="Local storage").get_sr(connection)


async def test_get_sr_missing_name(connection, xapi):
    xapi.results["sr_get_by_name_label"] = []

    with pytest.raises(XapiError, match="Couldn't find a SR"):
        await ImportConfig(sr_name="nope").get_sr(connection)


async def test_get_sr_defaults_to_pool_default(connection, calls):
    sr = await ImportConfig().get_sr(connection)

    assert sr == "SR:default"
    assert calls == ["pool_get_all", "pool_get_default_sr"]


async def test_get_sr_pool_without_default(connection, xapi):
    xapi.results["pool_get_default_sr"] = "OpaqueRef:NULL"

    with pytest.raises(XapiError, match="no default SR"):
        await ImportConfig().get_sr(connection)

# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Import configuration and XAPI connection settings.

:class:`ImportConfig` describes one import: which XVA to upload, where
to put it, and how to configure the resulting VM.  It is read from a
YAML file by :func:`load_config`.

:class:`ConnectionSettings` holds the host credentials and is filled
from ``XVA_IMPORT_*`` environment variables, with CLI flags taking
precedence.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigError, XapiError

if TYPE_CHECKING:
    from .xapi_client import Connection


def _default_vm_name() -> str:
    return f"xva-import-{int(time.time())}"


class ImportConfig(BaseModel):
    """Settings for a single XVA import."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    source_path: str = Field(default="", description="Path to the XVA image; empty skips the import")
    sr_name: str = Field(default="", description="SR name label; empty uses the pool default SR")
    vm_name: str = Field(default_factory=_default_vm_name, description="Name label for the VM")
    vm_description: str = Field(default="", description="Description for the VM")
    vcpus_max: int = Field(default=1, ge=1, description="Maximum number of VCPUs")
    vcpus_at_startup: int = Field(default=1, ge=1, description="VCPUs the VM boots with")
    vm_tags: list[str] = Field(default_factory=list, description="Tags applied after import")
    destroy_on_failure: bool = Field(
        default=False,
        description="Destroy the imported VM and its disks if a later phase fails",
    )

    @field_validator("vm_tags")
    @classmethod
    def dedupe_tags(cls, v: list[str]) -> list[str]:
        """Drop empty and repeated tags, keeping first-seen order."""
        return list(dict.fromkeys(t for t in v if t))

    @model_validator(mode="after")
    def check_vcpus(self) -> ImportConfig:
        if self.vcpus_at_startup > self.vcpus_max:
            raise ValueError(
                f"vcpus_at_startup ({self.vcpus_at_startup}) "
                f"must not exceed vcpus_max ({self.vcpus_max})"
            )
        return self

    async def get_sr(self, connection: Connection) -> str:
        """Resolve the target SR reference on *connection*.

        Raises:
            XapiError: If the SR cannot be found or is ambiguous.
        """
        client = connection.client
        session = connection.get_session()

        if not self.sr_name:
            pools = await client.pool_get_all(session)
            if not pools:
                raise XapiError("No pool found on host")
            sr = await client.pool_get_default_sr(session, pools[0])
            if not sr or sr == "OpaqueRef:NULL":
                raise XapiError("The pool has no default SR; set sr_name")
            return sr

        srs = await client.sr_get_by_name_label(session, self.sr_name)
        if not srs:
            raise XapiError(f"Couldn't find a SR with the specified name-label '{self.sr_name}'")
        if len(srs) > 1:
            raise XapiError(
                f"Found more than one SR with the name '{self.sr_name}'. The name must be unique"
            )
        return srs[0]


class ConnectionSettings(BaseSettings):
    """XAPI host and credentials."""

    model_config = SettingsConfigDict(env_prefix="XVA_IMPORT_")

    host: str = ""
    username: str = "root"
    password: str = ""
    verify_ssl: bool = True


def load_config(path: str | Path) -> ImportConfig:
    """Load an :class:`ImportConfig` from a YAML file.

    Relative ``source_path`` values are resolved against the directory
    holding the config file.

    Raises:
        ConfigError: If the file is unreadable, not a mapping, or fails
            validation.
    """
    path = Path(path)
    try:
        raw: Any = yaml.safe_load(path.read_text()) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Unable to read config '{path}': {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"Config '{path}' must contain a mapping")

    source = raw.get("source_path")
    if isinstance(source, str) and source and not Path(source).is_absolute():
        raw["source_path"] = str(path.parent / source)

    try:
        return ImportConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid config '{path}': {e}") from e

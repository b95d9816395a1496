# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Parsing of the ``/import`` reply into a VM reference.

Depending on the XAPI version the import handler answers either with a
bare ``OpaqueRef:...`` string or with the reference wrapped in XML-RPC
markup such as ``<value>OpaqueRef:...</value>``.  Both are accepted.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_TAG = re.compile(r"<.*?>")


@dataclass(frozen=True)
class BareIdentifier:
    """Reply that is the reference itself."""

    raw: str

    @property
    def ref(self) -> str:
        return self.raw


@dataclass(frozen=True)
class WrappedIdentifier:
    """Reply with the reference wrapped in markup."""

    raw: str

    @property
    def ref(self) -> str:
        return _TAG.sub("", self.raw).strip()


ImportReply = BareIdentifier | WrappedIdentifier


def parse_import_reply(raw: str) -> ImportReply:
    """Classify *raw* as bare or wrapped.

    >>> parse_import_reply("<value>OpaqueRef:abc123</value>").ref
    'OpaqueRef:abc123'
    >>> parse_import_reply("OpaqueRef:abc123").ref
    'OpaqueRef:abc123'
    """
    if _TAG.search(raw):
        return WrappedIdentifier(raw)
    return BareIdentifier(raw)

# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Exceptions and outcomes shared by the import step and its collaborators."""

from __future__ import annotations

import enum


class Outcome(enum.Enum):
    """What the pipeline driver should do after the step returns."""

    CONTINUE = "continue"
    HALT = "halt"


class XapiError(Exception):
    """Error from the XAPI management API."""

    def __init__(self, message: str, details: list[str] | None = None):
        super().__init__(message)
        self.details = details or []


class UploadError(Exception):
    """The HTTP upload transport failed."""


class ConfigError(Exception):
    """The import configuration could not be loaded or validated."""


class StepSkipped(Exception):
    """Raised by a step that has nothing to do.

    Not a failure: the pipeline stops early and the driver continues
    with its next stage.
    """


class ImportStepError(Exception):
    """A fatal condition that halts the pipeline.

    ``phase`` names the step that failed so the driver can report
    where the import stopped.
    """

    def __init__(self, message: str, phase: str):
        super().__init__(message)
        self.phase = phase


class ResolutionFailure(ImportStepError):
    """The storage repository or VM UUID could not be determined."""


class TransportFailure(ImportStepError):
    """The image could not be read or sent to the host."""


class ProtocolAnomaly(ImportStepError):
    """The upload succeeded but XAPI returned no usable reference."""


class StateMutationFailure(ImportStepError):
    """A configuration call on the imported VM failed."""

# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Instance import pipeline: upload an XVA, resolve the VM, configure it.

Importing this package registers all steps with the pipeline.
"""

from ..pipeline import Pipeline
from .contexts import ImportContext

import_pipeline = Pipeline[ImportContext]("import_instance")

# Import step modules so their decorators register with the pipeline.
from . import precondition as _  # noqa: F401, E402
from . import storage as _  # noqa: F401, E402
from . import upload_image as _  # noqa: F401, E402
from . import resolve as _  # noqa: F401, E402
from . import configure as _  # noqa: F401, E402

from .service import run_import_instance  # noqa: E402

__all__ = ["ImportContext", "import_pipeline", "run_import_instance"]

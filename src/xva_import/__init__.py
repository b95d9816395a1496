# SPDX-FileCopyrightText: 2026 Lasath Fernando <devel@lasath.org>
#
# SPDX-License-Identifier: GPL-3.0-or-later

"""Import XVA images into XenServer / XCP-ng and configure the resulting VM."""

__version__ = "0.1.0"

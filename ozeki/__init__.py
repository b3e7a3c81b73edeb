# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2026 Ozeki contributors
"""
Ozeki

Reading-assessment scoring and reading-level reporting for the Ozeki
literacy programme.
"""

__version__ = "0.1.0"

"""AdaptarIA Backend.

Multi-institute school management API: courses, content, learning-style test
and satisfaction surveys.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"

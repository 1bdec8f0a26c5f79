"""Learning path and recommendation engine.

Infers topic-level weaknesses from quiz and exam history, scores courses
and content against them, and builds atomic personalized learning paths.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"

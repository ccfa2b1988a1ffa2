"""hubengage.

Ambient engagement core for the Learning Hub and partner site: the
social-proof notification scheduler, the feedback prompt scheduler and
the Moment Mode overlay, coordinated through one shared suppression flag.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"

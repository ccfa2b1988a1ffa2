# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Infrastructure components for hubengage.

- storage: session-scoped and persistent key-value stores (memory, Redis)
- backend: HTTP collaborators for the managed database backend
"""

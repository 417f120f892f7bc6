"""
Fatal errors of the documentation step.
"""

from __future__ import annotations


class InstallDoxygenError(Exception):
    """A required input or tool is missing; the build must stop."""

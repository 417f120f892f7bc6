"""
Package metadata — name, version and description of the package being built.
"""

from __future__ import annotations

from pydantic import BaseModel


class PackageMetadata(BaseModel):
    """Identity of a rez package, as declared in its package.yaml."""

    name: str
    version: str = ""
    description: str = ""

    @property
    def brief(self) -> str:
        """Description flattened onto one line (newlines become spaces)."""
        return self.description.replace("\n", " ")

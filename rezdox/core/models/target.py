"""
Build graph models — custom commands, targets, and install rules.

These mirror what a build system registers: a command that produces
a file, a named target with dependencies, and a directory to install.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from rezdox.core.models.action import Action


class CustomCommand(BaseModel):
    """A list of steps that produce one output file."""

    output: str
    steps: list[Action] = Field(default_factory=list)
    comment: str = ""


class Target(BaseModel):
    """A named, buildable unit.

    ``depends`` may reference other targets by name or custom
    command outputs by path. ``all`` targets are built by install().
    """

    name: str
    depends: list[str] = Field(default_factory=list)
    steps: list[Action] = Field(default_factory=list)
    working_dir: str | None = None
    comment: str = ""
    all: bool = False


class InstallRule(BaseModel):
    """Copy a built directory tree under the install prefix.

    The directory itself lands inside ``destination``, so
    ``build/docs/html`` with destination ``docs`` installs to
    ``<prefix>/docs/html``.
    """

    source: str
    destination: str
    component: str = ""

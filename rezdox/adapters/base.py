"""
Adapter base — the contract between the build graph and the tools it runs.

The build graph hands every step to an adapter through this interface
and gets a Receipt back. Only adapters touch doxygen, the query tool,
or the filesystem.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from rezdox.core.models.action import Action, Receipt


class ExecutionContext(BaseModel):
    """Everything an adapter needs to run one build step.

    Relative paths in action params are resolved against
    ``working_dir``: the step's own directory when set, else the
    build directory.
    """

    action: Action
    build_dir: str = "."
    step_dir: str | None = None
    dry_run: bool = False
    params: dict[str, Any] = Field(default_factory=dict)

    @property
    def working_dir(self) -> str:
        """Directory the step runs in."""
        if self.step_dir:
            return str(Path(self.build_dir) / self.step_dir)
        return self.build_dir


class Adapter(ABC):
    """Base class for the shell and filesystem adapters.

    Adapters NEVER raise: a failed step comes back as a Receipt with
    status 'failed', and the build graph stops there.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The name actions use in their ``adapter`` field."""

    @abstractmethod
    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        """Check the step's params before it runs (also on dry runs).

        Returns:
            (is_valid, error_message). error_message is empty if valid.
        """

    @abstractmethod
    def execute(self, context: ExecutionContext) -> Receipt:
        """Run the step and return its receipt."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"

"""
Adapter registry — dispatches build steps to adapters.

The build graph and the descriptor reader hand every Action to
``execute_action`` and get a Receipt back, whatever happened. Mock
mode answers every step with a canned success; dry runs validate
and stop short of executing.
"""

from __future__ import annotations

import logging
import time

from rezdox.adapters.base import Adapter, ExecutionContext
from rezdox.core.models.action import Action, Receipt

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """Adapters by name, plus the mock and dry-run switches."""

    def __init__(self, mock_mode: bool = False):
        self._adapters: dict[str, Adapter] = {}
        self._mock_mode = mock_mode

    @property
    def mock_mode(self) -> bool:
        return self._mock_mode

    def register(self, adapter: Adapter) -> None:
        if adapter.name in self._adapters:
            logger.warning("Overwriting existing adapter: %s", adapter.name)
        self._adapters[adapter.name] = adapter
        logger.debug("Registered adapter: %s", adapter.name)

    def get(self, name: str) -> Adapter | None:
        return self._adapters.get(name)

    def execute_action(
        self,
        action: Action,
        build_dir: str = ".",
        step_dir: str | None = None,
        dry_run: bool = False,
    ) -> Receipt:
        """Run one step through its adapter. Never raises.

        Args:
            action: The step to run.
            build_dir: Build (binary) directory.
            step_dir: Working directory of the owning target, if any.
            dry_run: Validate the step, then report it as skipped.
        """
        if self._mock_mode:
            return Receipt.success(
                adapter=action.adapter,
                action_id=action.id,
                output=f"[mock] {action.adapter}:{action.id} executed",
                metadata={"mock": True, "dry_run": dry_run},
            )

        adapter = self._adapters.get(action.adapter)
        if adapter is None:
            return Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"No adapter registered for '{action.adapter}'",
            )

        context = ExecutionContext(
            action=action,
            build_dir=build_dir,
            step_dir=step_dir,
            dry_run=dry_run,
            params=action.params,
        )

        # A dry run still reports steps that could never succeed.
        try:
            is_valid, error_msg = adapter.validate(context)
        except Exception as e:
            return Receipt.failure(
                adapter=action.adapter, action_id=action.id, error=f"Validation error: {e}"
            )
        if not is_valid:
            return Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"Validation failed: {error_msg}",
            )

        if dry_run:
            return Receipt.skip(
                adapter=action.adapter,
                action_id=action.id,
                reason=f"[dry-run] Would execute {action.adapter}:{action.id}",
                metadata={"dry_run": True},
            )

        start = time.monotonic()
        try:
            receipt = adapter.execute(context)
        except Exception as e:
            logger.error("Adapter %s raised during %s: %s", action.adapter, action.id, e)
            receipt = Receipt.failure(
                adapter=action.adapter, action_id=action.id, error=f"Unexpected error: {e}"
            )
        receipt.duration_ms = int((time.monotonic() - start) * 1000)
        return receipt


def default_registry(mock_mode: bool = False) -> AdapterRegistry:
    """Registry with the shell and filesystem adapters registered."""
    from rezdox.adapters.shell.command import ShellCommandAdapter
    from rezdox.adapters.shell.filesystem import FilesystemAdapter

    registry = AdapterRegistry(mock_mode=mock_mode)
    registry.register(ShellCommandAdapter())
    registry.register(FilesystemAdapter())
    return registry

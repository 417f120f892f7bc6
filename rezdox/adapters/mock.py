"""
Recording adapter for tests.

Registered under the name of a real adapter ('shell', 'filesystem')
it stands in for doxygen, the query tool, or file steps, and records
every step it was given.
"""

from __future__ import annotations

from rezdox.adapters.base import Adapter, ExecutionContext
from rezdox.core.models.action import Receipt


class MockAdapter(Adapter):
    """Succeeds with ``default_output`` unless told otherwise per action id."""

    def __init__(self, adapter_name: str = "mock", default_output: str = "[mock] executed"):
        self._name = adapter_name
        self._default_output = default_output
        self._responses: dict[str, Receipt] = {}
        self.call_log: list[ExecutionContext] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_count(self) -> int:
        return len(self.call_log)

    def calls(self, action_id: str) -> int:
        """How many times the step ``action_id`` ran."""
        return sum(1 for ctx in self.call_log if ctx.action.id == action_id)

    def set_response(self, action_id: str, receipt: Receipt) -> None:
        self._responses[action_id] = receipt

    def set_failure(self, action_id: str, error: str = "Mock failure") -> None:
        self._responses[action_id] = Receipt.failure(
            adapter=self._name, action_id=action_id, error=error
        )

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        self.call_log.append(context)
        if context.action.id in self._responses:
            return self._responses[context.action.id]
        return Receipt.success(
            adapter=self._name,
            action_id=context.action.id,
            output=self._default_output,
            metadata={"mock": True},
        )

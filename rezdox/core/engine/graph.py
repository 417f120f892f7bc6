"""
Build graph — registered commands, targets, and install rules.

The graph is what the documentation step registers into, and what
``rezdox`` then executes. Building a target walks its dependencies
depth-first, runs every step through the adapter registry, and
collects receipts.

Flow:
    register → build(label) → resolve deps → execute steps → report
             → install()    → build ALL targets → copy install rules
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from rezdox.adapters.registry import AdapterRegistry
from rezdox.core.models.action import Action, Receipt
from rezdox.core.models.target import CustomCommand, InstallRule, Target

logger = logging.getLogger(__name__)


class BuildGraphError(Exception):
    """Raised when registering or resolving the graph fails."""


@dataclass
class ExecutionReport:
    """Result of building one or more targets."""

    goal: str = ""
    receipts: list[Receipt] = field(default_factory=list)
    target_receipts: dict[str, list[Receipt]] = field(default_factory=dict)
    built: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.receipts)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.receipts if r.ok)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.receipts if r.failed)

    @property
    def skipped(self) -> int:
        return sum(1 for r in self.receipts if r.status == "skipped")

    @property
    def all_ok(self) -> bool:
        return self.failed == 0

    @property
    def status(self) -> str:
        if self.failed == 0:
            return "ok"
        if self.succeeded > 0:
            return "partial"
        return "failed"

    @property
    def first_error(self) -> str | None:
        for r in self.receipts:
            if r.failed:
                return r.error
        return None

    def add(self, owner: str, receipt: Receipt) -> None:
        self.receipts.append(receipt)
        self.target_receipts.setdefault(owner, []).append(receipt)

    def to_dict(self) -> dict:
        return {
            "goal": self.goal,
            "status": self.status,
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "skipped": self.skipped,
            "built": self.built,
            "receipts": [r.model_dump(mode="json") for r in self.receipts],
        }


class BuildGraph:
    """Registered build work for one build directory.

    Custom command outputs and install rule paths are kept as given;
    relative ones are resolved against ``build_dir`` at execution
    time, and install destinations against ``install_path``.
    """

    def __init__(self, build_dir: Path, install_path: Path):
        self.build_dir = build_dir
        self.install_path = install_path
        self._commands: dict[str, CustomCommand] = {}
        self._targets: dict[str, Target] = {}
        self._install_rules: list[InstallRule] = []

    # ── Registration ────────────────────────────────────────────

    def add_custom_command(self, command: CustomCommand) -> None:
        if command.output in self._commands:
            raise BuildGraphError(f"Output '{command.output}' already has a command")
        self._commands[command.output] = command
        logger.debug("Registered command for %s", command.output)

    def add_target(self, target: Target) -> None:
        if target.name in self._targets:
            raise BuildGraphError(f"Target '{target.name}' is already defined")
        self._targets[target.name] = target
        logger.debug("Registered target %s (depends: %s)", target.name, target.depends)

    def add_install(self, rule: InstallRule) -> None:
        self._install_rules.append(rule)
        logger.debug("Registered install %s → %s", rule.source, rule.destination)

    # ── Queries ─────────────────────────────────────────────────

    @property
    def targets(self) -> dict[str, Target]:
        return dict(self._targets)

    @property
    def commands(self) -> dict[str, CustomCommand]:
        return dict(self._commands)

    @property
    def install_rules(self) -> list[InstallRule]:
        return list(self._install_rules)

    def get_target(self, name: str) -> Target | None:
        return self._targets.get(name)

    def all_targets(self) -> list[Target]:
        """Targets built by default (and therefore by install())."""
        return [t for t in self._targets.values() if t.all]

    def resolve_order(self, name: str) -> list[str]:
        """Dependencies of ``name`` in build order, ending with ``name``.

        Entries are target names or command outputs. Each appears once.

        Raises:
            BuildGraphError: On an unknown name or a dependency cycle.
        """
        order: list[str] = []
        visiting: set[str] = set()

        def visit(node: str) -> None:
            if node in order:
                return
            if node in visiting:
                raise BuildGraphError(f"Dependency cycle through '{node}'")
            visiting.add(node)
            if node in self._targets:
                for dep in self._targets[node].depends:
                    visit(dep)
            elif node not in self._commands:
                raise BuildGraphError(f"No rule to make target '{node}'")
            visiting.discard(node)
            order.append(node)

        visit(name)
        return order

    # ── Execution ───────────────────────────────────────────────

    def build(
        self,
        name: str,
        registry: AdapterRegistry,
        dry_run: bool = False,
        report: ExecutionReport | None = None,
    ) -> ExecutionReport:
        """Build ``name`` and everything it depends on.

        Stops at the first failed step. Nodes already built into the
        given ``report`` are not run again.
        """
        if report is None:
            report = ExecutionReport(goal=name)

        for node in self.resolve_order(name):
            if node in report.built:
                continue

            if node in self._commands:
                command = self._commands[node]
                steps, step_dir, comment = command.steps, None, command.comment
            else:
                target = self._targets[node]
                steps, step_dir, comment = target.steps, target.working_dir, target.comment

            if comment:
                logger.info("%s", comment)

            if not self._run_steps(node, steps, step_dir, registry, dry_run, report):
                return report
            report.built.append(node)

        return report

    def install(
        self,
        registry: AdapterRegistry,
        dry_run: bool = False,
        report: ExecutionReport | None = None,
    ) -> ExecutionReport:
        """Build every ALL target, then copy every install rule.

        Pass a report seeded with ``built`` nodes to skip work an
        earlier build in the same run already did.
        """
        if report is None:
            report = ExecutionReport(goal="install")

        for target in self.all_targets():
            self.build(target.name, registry, dry_run=dry_run, report=report)
            if not report.all_ok:
                return report

        for index, rule in enumerate(self._install_rules):
            source = Path(rule.source)
            if not source.is_absolute():
                source = self.build_dir / source
            destination = self.install_path / rule.destination / source.name

            action = Action(
                id=f"install:{index}:{rule.destination}",
                name=f"Install {source.name}",
                adapter="filesystem",
                params={
                    "operation": "copytree",
                    "source": str(source),
                    "path": str(destination),
                },
                for_target="install",
            )
            logger.info("Installing %s → %s", source, destination)
            if not self._run_steps("install", [action], None, registry, dry_run, report):
                return report

        return report

    def _run_steps(
        self,
        owner: str,
        steps: list[Action],
        step_dir: str | None,
        registry: AdapterRegistry,
        dry_run: bool,
        report: ExecutionReport,
    ) -> bool:
        for action in steps:
            receipt = registry.execute_action(
                action=action,
                build_dir=str(self.build_dir),
                step_dir=step_dir,
                dry_run=dry_run,
            )
            report.add(owner, receipt)

            status_marker = "✓" if receipt.ok else "✗" if receipt.failed else "⊘"
            logger.info("%s %s:%s → %s", status_marker, owner, action.id, receipt.status)

            if receipt.failed:
                logger.error("%s failed: %s", action.id, receipt.error)
                return False
        return True

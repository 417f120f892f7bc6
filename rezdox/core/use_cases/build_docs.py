"""
Build docs use case — register the Doxygen step and run it.

Merges arguments from rezdox.yml and the command line, reads the
build environment, registers into a fresh BuildGraph, then builds
the label target and (optionally) installs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from rezdox.adapters.registry import AdapterRegistry, default_registry
from rezdox.core.config.loader import ConfigError, find_config_file, load_config
from rezdox.core.engine.graph import BuildGraph, BuildGraphError, ExecutionReport
from rezdox.core.errors import InstallDoxygenError
from rezdox.core.models.doxygen import DoxygenRequest, InstallDoxygenResult
from rezdox.core.models.environment import BuildEnvironment
from rezdox.core.services.descriptor import get_reader
from rezdox.core.services.install_doxygen import help_entry, install_doxygen

logger = logging.getLogger(__name__)


@dataclass
class BuildDocsResult:
    """Result of registering (and maybe building) the docs."""

    request: DoxygenRequest | None = None
    registered: InstallDoxygenResult | None = None
    graph: BuildGraph | None = None
    build_report: ExecutionReport | None = None
    install_report: ExecutionReport | None = None
    config_path: Path | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        if self.error:
            return False
        for report in (self.build_report, self.install_report):
            if report is not None and not report.all_ok:
                return False
        return True

    def to_dict(self) -> dict:
        result: dict = {"ok": self.ok}
        if self.error:
            result["error"] = self.error
            return result

        result["config_path"] = str(self.config_path) if self.config_path else None
        if self.registered:
            reg = self.registered
            result["label"] = reg.label
            result["package"] = reg.metadata.model_dump()
            result["doxyfile"] = str(reg.doxyfile)
            result["output_dir"] = str(reg.output_dir / reg.doxydir)
            result["install"] = reg.install
            result["install_dir"] = str(reg.install_dir) if reg.install_dir else None
            result["overrides"] = reg.overrides.lines()
            result["help"] = help_entry(self.request.destination, reg.doxydir) if self.request else None
        if self.graph:
            result["targets"] = sorted(self.graph.targets)
        if self.build_report:
            result["build"] = self.build_report.to_dict()
        if self.install_report:
            result["install_report"] = self.install_report.to_dict()
        return result


def _resolve_inputs(files: list[str], source_dir: Path) -> list[str]:
    """Anchor relative inputs at the package source directory.

    Doxygen resolves INPUT relative to where it runs, which is the
    output directory inside the build tree.
    """
    return [name if Path(name).is_absolute() else str(source_dir / name) for name in files]


def build_docs(
    request: DoxygenRequest,
    config_path: Path | None = None,
    env: BuildEnvironment | None = None,
    registry: AdapterRegistry | None = None,
    plan_only: bool = False,
    dry_run: bool = False,
    mock_mode: bool = False,
    install: bool = False,
) -> BuildDocsResult:
    """Register the Doxygen step and, unless ``plan_only``, build it.

    Args:
        request: Arguments from the command line; unset fields fall
            back to rezdox.yml.
        config_path: Explicit rezdox.yml. If None, searched upward.
        env: Build environment (default: from os.environ).
        registry: Adapter registry for the build steps and the query tool.
        plan_only: Register and report, but run nothing.
        dry_run: Validate every step without executing.
        mock_mode: Pretend every step succeeds. package.yaml is read
            directly instead of through the query tool.
        install: After building, run the install pass.
    """
    result = BuildDocsResult()

    # ── Merge config + command line ──────────────────────────────
    try:
        if config_path is None:
            config_path = find_config_file()
        if config_path is not None:
            request = load_config(config_path).merged(request)
            result.config_path = config_path
    except ConfigError as e:
        result.error = str(e)
        return result
    result.request = request

    if env is None:
        env = BuildEnvironment.from_environ()

    # ── Register ─────────────────────────────────────────────────
    if registry is None:
        registry = default_registry(mock_mode=mock_mode)

    descriptor = request.descriptor
    if (mock_mode or registry.mock_mode) and descriptor == "query-tool":
        # Nothing external runs in mock mode, the query tool included.
        logger.info("Mock mode: reading %s directly", env.package_file)
        descriptor = "yaml"

    graph = BuildGraph(env.build_dir, env.install_path)
    try:
        result.registered = install_doxygen(
            graph,
            env,
            label=request.label,
            files=_resolve_inputs(request.files, env.source_dir),
            destination=request.destination,
            doxyfile=request.doxyfile,
            doxydir=request.doxydir,
            force=request.force,
            doxypy=request.doxypy,
            reader=get_reader(descriptor, registry),
        )
    except (InstallDoxygenError, BuildGraphError) as e:
        result.error = str(e)
        return result
    result.graph = graph

    if plan_only:
        return result

    # ── Build + install ──────────────────────────────────────────
    result.build_report = graph.build(request.label, registry, dry_run=dry_run)
    if not result.build_report.all_ok:
        return result

    if install:
        if not result.registered.install:
            logger.warning(
                "Nothing to install for %s: not a central install (use --force)",
                request.label,
            )
        else:
            # The label target and its Doxyfile are already built.
            already = ExecutionReport(goal="install", built=list(result.build_report.built))
            result.install_report = graph.install(registry, dry_run=dry_run, report=already)

    return result

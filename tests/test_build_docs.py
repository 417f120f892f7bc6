"""
Tests for the build_docs use case — one run from request to install.
"""

from pathlib import Path

import pytest

from rezdox.adapters.mock import MockAdapter
from rezdox.adapters.registry import AdapterRegistry
from rezdox.core.models.doxygen import DoxygenRequest
from rezdox.core.models.environment import BuildEnvironment
from rezdox.core.use_cases.build_docs import build_docs


@pytest.fixture(autouse=True)
def in_package(package_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """No rezdox.yml is found from the package directory."""
    monkeypatch.chdir(package_dir)


def _request(**kwargs) -> DoxygenRequest:
    args = {"label": "doc", "files": ["python"], "destination": "docs"}
    args.update(kwargs)
    return DoxygenRequest(**args)


def _recording_registry() -> tuple[AdapterRegistry, MockAdapter, MockAdapter]:
    shell = MockAdapter(adapter_name="shell")
    filesystem = MockAdapter(adapter_name="filesystem")
    registry = AdapterRegistry()
    registry.register(shell)
    registry.register(filesystem)
    return registry, shell, filesystem


class TestBuildDocs:
    def test_install_does_not_rebuild(self, rez_env: BuildEnvironment):
        registry, shell, filesystem = _recording_registry()
        result = build_docs(
            _request(force=True, descriptor="yaml"),
            env=rez_env,
            registry=registry,
            install=True,
        )
        assert result.ok, result.error

        assert shell.calls("doc:doxygen") == 1
        assert filesystem.calls("doc:doxyfile:mkdir") == 1
        assert filesystem.calls("doc:doxyfile:copy") == 1
        assert filesystem.calls("doc:doxyfile:append") == 1
        assert filesystem.calls("install:0:docs") == 1

        install = result.install_report
        assert [r.action_id for r in install.receipts] == ["install:0:docs"]
        assert install.built[-1] == "_install_doc"

    def test_install_without_central_or_force(self, rez_env: BuildEnvironment):
        registry, shell, filesystem = _recording_registry()
        result = build_docs(_request(descriptor="yaml"), env=rez_env, registry=registry, install=True)
        assert result.ok
        assert result.install_report is None
        assert filesystem.calls("install:0:docs") == 0

    def test_mock_mode_skips_query_tool(self, rez_env: BuildEnvironment, rez_root: Path):
        tool = rez_root / "bin" / "_rez_query_yaml"
        tool.write_text("#!/bin/sh\necho 'query tool ran' >&2\nexit 1\n")

        result = build_docs(_request(), env=rez_env, mock_mode=True)
        assert result.ok, result.error
        assert result.registered.metadata.name == "mypkg"
        assert result.build_report.status == "ok"
        assert not rez_env.build_dir.exists()

    def test_query_tool_runs_through_given_registry(self, rez_env: BuildEnvironment):
        registry, shell, _ = _recording_registry()
        shell.set_failure("query:name", error="no tool here")
        result = build_docs(_request(), env=rez_env, registry=registry, plan_only=True)
        assert "no tool here" in result.error
        assert shell.calls("query:name") == 1

    def test_plan_only_runs_nothing(self, rez_env: BuildEnvironment):
        registry, shell, filesystem = _recording_registry()
        result = build_docs(_request(descriptor="yaml"), env=rez_env, registry=registry, plan_only=True)
        assert result.ok
        assert result.build_report is None
        assert shell.call_count == 0
        assert filesystem.call_count == 0
        assert sorted(result.graph.targets) == ["doc"]

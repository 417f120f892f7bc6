"""
Tests for the build graph — registration, ordering, build, and install.
"""

from pathlib import Path

import pytest

from rezdox.adapters.mock import MockAdapter
from rezdox.adapters.registry import AdapterRegistry, default_registry
from rezdox.core.engine.graph import BuildGraph, BuildGraphError, ExecutionReport
from rezdox.core.models.action import Action, Receipt
from rezdox.core.models.target import CustomCommand, InstallRule, Target


def _step(action_id: str, adapter: str = "mock", **params) -> Action:
    return Action(id=action_id, adapter=adapter, params=params)


def _graph(tmp_path: Path) -> BuildGraph:
    graph = BuildGraph(tmp_path / "build", tmp_path / "install")
    graph.add_custom_command(CustomCommand(output="docs/Doxyfile", steps=[_step("gen")]))
    graph.add_target(Target(name="doc", depends=["docs/Doxyfile"], steps=[_step("run")]))
    graph.add_target(Target(name="_install_doc", depends=["doc"], all=True))
    return graph


def _mock_registry() -> tuple[AdapterRegistry, MockAdapter]:
    mock = MockAdapter()
    registry = AdapterRegistry()
    registry.register(mock)
    return registry, mock


class TestRegistration:
    def test_duplicate_target(self, tmp_path: Path):
        graph = _graph(tmp_path)
        with pytest.raises(BuildGraphError, match="already defined"):
            graph.add_target(Target(name="doc"))

    def test_duplicate_output(self, tmp_path: Path):
        graph = _graph(tmp_path)
        with pytest.raises(BuildGraphError, match="already has a command"):
            graph.add_custom_command(CustomCommand(output="docs/Doxyfile"))

    def test_all_targets(self, tmp_path: Path):
        assert [t.name for t in _graph(tmp_path).all_targets()] == ["_install_doc"]


class TestResolveOrder:
    def test_dependencies_first(self, tmp_path: Path):
        order = _graph(tmp_path).resolve_order("_install_doc")
        assert order == ["docs/Doxyfile", "doc", "_install_doc"]

    def test_shared_dependency_once(self, tmp_path: Path):
        graph = _graph(tmp_path)
        graph.add_target(Target(name="both", depends=["doc", "docs/Doxyfile"]))
        assert graph.resolve_order("both").count("docs/Doxyfile") == 1

    def test_unknown(self, tmp_path: Path):
        with pytest.raises(BuildGraphError, match="No rule to make target 'nope'"):
            _graph(tmp_path).resolve_order("nope")

    def test_cycle(self, tmp_path: Path):
        graph = BuildGraph(tmp_path, tmp_path)
        graph.add_target(Target(name="a", depends=["b"]))
        graph.add_target(Target(name="b", depends=["a"]))
        with pytest.raises(BuildGraphError, match="cycle"):
            graph.resolve_order("a")


class TestBuild:
    def test_runs_steps_in_order(self, tmp_path: Path):
        registry, mock = _mock_registry()
        report = _graph(tmp_path).build("doc", registry)
        assert report.status == "ok"
        assert [c.action.id for c in mock.call_log] == ["gen", "run"]
        assert report.built == ["docs/Doxyfile", "doc"]

    def test_target_working_dir(self, tmp_path: Path):
        graph = BuildGraph(tmp_path / "build", tmp_path / "install")
        graph.add_target(Target(name="t", steps=[_step("s")], working_dir="docs"))
        registry, mock = _mock_registry()
        graph.build("t", registry)
        assert mock.call_log[0].working_dir == f"{tmp_path / 'build'}/docs"

    def test_stops_at_first_failure(self, tmp_path: Path):
        registry, mock = _mock_registry()
        mock.set_failure("gen", error="template missing")
        report = _graph(tmp_path).build("doc", registry)
        assert report.status == "failed"
        assert report.first_error == "template missing"
        assert mock.call_count == 1
        assert report.built == []

    def test_does_not_rebuild_within_report(self, tmp_path: Path):
        registry, mock = _mock_registry()
        graph = _graph(tmp_path)
        report = ExecutionReport(goal="x")
        graph.build("doc", registry, report=report)
        graph.build("_install_doc", registry, report=report)
        assert mock.call_count == 2

    def test_dry_run(self, tmp_path: Path):
        registry, mock = _mock_registry()
        report = _graph(tmp_path).build("doc", registry, dry_run=True)
        assert report.skipped == 2
        assert report.status == "ok"
        assert mock.call_count == 0


class TestInstall:
    def test_builds_all_targets_then_copies(self, tmp_path: Path):
        graph = BuildGraph(tmp_path / "build", tmp_path / "install")
        html = tmp_path / "build" / "docs" / "html"
        graph.add_target(
            Target(
                name="doc",
                steps=[_step("write", adapter="filesystem", operation="mkdir", path=str(html))],
            )
        )
        graph.add_target(Target(name="_install_doc", depends=["doc"], all=True))
        graph.add_install(InstallRule(source="docs/html", destination="docs"))

        html.mkdir(parents=True)
        (html / "index.html").write_text("<html/>")

        report = graph.install(default_registry())
        assert report.status == "ok"
        assert report.built == ["doc", "_install_doc"]
        assert (tmp_path / "install" / "docs" / "html" / "index.html").is_file()

    def test_missing_source_fails(self, tmp_path: Path):
        graph = BuildGraph(tmp_path / "build", tmp_path / "install")
        graph.add_install(InstallRule(source="docs/html", destination="docs"))
        report = graph.install(default_registry())
        assert report.status == "failed"
        assert "Not a directory" in report.first_error

    def test_seeded_report_skips_built_nodes(self, tmp_path: Path):
        registry, mock = _mock_registry()
        graph = _graph(tmp_path)
        first = graph.build("doc", registry)
        report = graph.install(
            registry, report=ExecutionReport(goal="install", built=list(first.built))
        )
        assert report.status == "ok"
        assert mock.calls("gen") == 1
        assert mock.calls("run") == 1
        assert report.built[-1] == "_install_doc"

    def test_failed_build_skips_install(self, tmp_path: Path):
        registry, mock = _mock_registry()
        mock.set_response("run", Receipt.failure(adapter="mock", action_id="run", error="x"))
        graph = _graph(tmp_path)
        graph.add_install(InstallRule(source="docs/html", destination="docs"))
        report = graph.install(registry)
        assert report.failed == 1
        assert "install" not in report.target_receipts


class TestExecutionReport:
    def test_partial(self):
        report = ExecutionReport()
        report.add("a", Receipt.success(adapter="m", action_id="1"))
        report.add("a", Receipt.failure(adapter="m", action_id="2", error="e"))
        assert report.status == "partial"
        d = report.to_dict()
        assert d["total"] == 2
        assert d["failed"] == 1

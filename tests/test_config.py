"""
Tests for configuration loading — rezdox.yml parsing and validation.
"""

import textwrap
from pathlib import Path

import pytest

from rezdox.core.config.loader import ConfigError, find_config_file, load_config
from rezdox.core.use_cases.config_check import check_config


@pytest.fixture
def valid_config(package_dir: Path) -> Path:
    content = textwrap.dedent("""\
        doxygen:
          label: doc
          files:
            - python/mypkg
          destination: docs
          doxypy: true
          descriptor: yaml
    """)
    path = package_dir / "rezdox.yml"
    path.write_text(content)
    return path


class TestLoadConfig:
    def test_load_valid_config(self, valid_config: Path):
        req = load_config(valid_config)
        assert req.label == "doc"
        assert req.files == ["python/mypkg"]
        assert req.destination == "docs"
        assert req.doxypy is True
        assert req.force is False
        assert req.descriptor == "yaml"

    def test_flat_format(self, tmp_path: Path):
        path = tmp_path / "rezdox.yml"
        path.write_text("label: doc\nfiles: include\ndestination: docs\n")
        req = load_config(path)
        assert req.label == "doc"
        assert req.files == ["include"]

    def test_empty_file(self, tmp_path: Path):
        path = tmp_path / "rezdox.yml"
        path.write_text("")
        assert load_config(path).label == ""

    def test_missing_file_raises(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "nonexistent.yml")

    def test_invalid_yaml_raises(self, tmp_path: Path):
        path = tmp_path / "rezdox.yml"
        path.write_text(":: invalid: yaml: [")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path)

    def test_non_mapping_raises(self, tmp_path: Path):
        path = tmp_path / "rezdox.yml"
        path.write_text("- just\n- a\n- list\n")
        with pytest.raises(ConfigError, match="Expected a YAML mapping"):
            load_config(path)

    def test_bad_descriptor_raises(self, tmp_path: Path):
        path = tmp_path / "rezdox.yml"
        path.write_text("doxygen:\n  label: doc\n  descriptor: ldap\n")
        with pytest.raises(ConfigError, match="Invalid doxygen configuration"):
            load_config(path)


class TestFindConfigFile:
    def test_find_in_current_dir(self, tmp_path: Path):
        (tmp_path / "rezdox.yml").write_text("label: doc\n")
        result = find_config_file(tmp_path)
        assert result is not None
        assert result.name == "rezdox.yml"

    def test_find_in_parent_dir(self, tmp_path: Path):
        (tmp_path / "rezdox.yml").write_text("label: doc\n")
        subdir = tmp_path / "python" / "mypkg"
        subdir.mkdir(parents=True)
        result = find_config_file(subdir)
        assert result is not None
        assert result.parent == tmp_path.resolve()

    def test_not_found_returns_none(self, tmp_path: Path):
        subdir = tmp_path / "deep" / "nested"
        subdir.mkdir(parents=True)
        assert find_config_file(subdir) is None


class TestCheckConfig:
    def test_valid(self, valid_config: Path):
        result = check_config(valid_config)
        assert result.valid
        assert result.warnings == []
        assert result.to_dict()["label"] == "doc"

    def test_missing_required_fields(self, tmp_path: Path):
        path = tmp_path / "rezdox.yml"
        path.write_text("doxygen:\n  doxydir: man\n")
        result = check_config(path)
        assert not result.valid
        assert "Missing 'label'." in result.errors
        assert "Missing 'destination'." in result.errors
        assert "No 'files' listed." in result.errors

    def test_missing_inputs_and_descriptor_warn(self, tmp_path: Path):
        path = tmp_path / "rezdox.yml"
        path.write_text("label: doc\nfiles: [nowhere]\ndestination: docs\n")
        result = check_config(path)
        assert result.valid
        assert any("nowhere" in w for w in result.warnings)
        assert any("package.yaml" in w for w in result.warnings)

    def test_missing_template_is_error(self, valid_config: Path):
        valid_config.write_text(
            valid_config.read_text() + "  doxyfile: docs/Doxyfile.in\n"
        )
        result = check_config(valid_config)
        assert not result.valid
        assert any("Doxyfile.in" in e for e in result.errors)

    def test_no_config_found(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        isolated = tmp_path / "isolated"
        isolated.mkdir()
        monkeypatch.chdir(isolated)
        result = check_config(None)
        assert not result.valid
        assert result.errors == ["No rezdox.yml found."]

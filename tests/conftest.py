"""
Shared test fixtures and configuration.

``rez_env`` lays out a fake rez install in a temp directory: a
Doxyfile template, a ``_rez_query_yaml`` stand-in, a ``doxygen``
stand-in that writes html/index.html, and a package source tree.
"""

import os
import textwrap
from pathlib import Path

import pytest

from rezdox.core.models.environment import BuildEnvironment

TEMPLATE = textwrap.dedent("""\
    # rez default Doxyfile
    PROJECT_NAME = "unnamed"
    GENERATE_HTML = YES
    GENERATE_LATEX = NO""")  # no trailing newline on purpose

QUERY_TOOL = textwrap.dedent("""\
    #!/bin/sh
    for arg in "$@"; do
      case "$arg" in
        --print-name) echo "mypkg" ;;
        --print-version) echo "1.2.0" ;;
        --print-desc) printf 'A package\\nwith two lines\\n\\n' ;;
      esac
    done
""")

FAKE_DOXYGEN = textwrap.dedent("""\
    #!/bin/sh
    mkdir -p html
    echo "<html>docs</html>" > html/index.html
    cp "$1" html/Doxyfile.used
""")


def _script(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    os.chmod(path, 0o755)
    return path


@pytest.fixture
def rez_root(tmp_path: Path) -> Path:
    """A fake rez install with template and query tool."""
    root = tmp_path / "rez"
    (root / "template").mkdir(parents=True)
    (root / "template" / "Doxyfile").write_text(TEMPLATE)
    _script(root / "bin" / "_rez_query_yaml", QUERY_TOOL)
    return root


@pytest.fixture
def fake_doxygen(tmp_path: Path) -> Path:
    return _script(tmp_path / "tools" / "doxygen", FAKE_DOXYGEN)


@pytest.fixture
def package_dir(tmp_path: Path) -> Path:
    """A package source tree with package.yaml and some Python."""
    pkg = tmp_path / "pkg"
    (pkg / "python" / "mypkg").mkdir(parents=True)
    (pkg / "python" / "mypkg" / "__init__.py").write_text('"""mypkg."""\n')
    (pkg / "package.yaml").write_text(textwrap.dedent("""\
        name: mypkg
        version: 1.2.0
        description: |
          A package
          with two lines
    """))
    return pkg


@pytest.fixture
def rez_env(tmp_path: Path, rez_root: Path, fake_doxygen: Path, package_dir: Path) -> BuildEnvironment:
    """A local (non-central) rez build environment."""
    return BuildEnvironment(
        rez_build_env=True,
        rez_path=rez_root,
        source_dir=package_dir,
        build_dir=package_dir / "build",
        install_path=tmp_path / "install",
        doxygen_executable=str(fake_doxygen),
    )


@pytest.fixture
def rez_environ(tmp_path: Path, rez_root: Path, fake_doxygen: Path, package_dir: Path) -> dict[str, str]:
    """Environment variables equivalent to ``rez_env``."""
    return {
        "REZ_BUILD_ENV": "1",
        "REZ_PATH": str(rez_root),
        "REZ_BUILD_SOURCE_PATH": str(package_dir),
        "REZ_BUILD_PATH": str(package_dir / "build"),
        "REZ_BUILD_INSTALL_PATH": str(tmp_path / "install"),
        "DOXYGEN_EXECUTABLE": str(fake_doxygen),
    }

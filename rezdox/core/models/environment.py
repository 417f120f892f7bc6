"""
Build environment model — what the surrounding rez build tells us.

rez-build exports its state through environment variables. This model
is the single typed view of them; everything else reads from here
instead of touching ``os.environ``.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel

_TRUTHY = {"1", "true", "yes", "on"}


def _truthy(value: str | None) -> bool:
    return (value or "").strip().lower() in _TRUTHY


class BuildEnvironment(BaseModel):
    """Paths and flags of the rez build this step runs inside."""

    rez_build_env: bool = False
    rez_path: Path | None = None
    doxypy_root: Path | None = None
    central: bool = False

    source_dir: Path = Path(".")
    build_dir: Path = Path("build")
    install_path: Path = Path("install")

    doxygen_executable: str | None = None

    @property
    def package_file(self) -> Path:
        """The package descriptor for the package being built."""
        return self.source_dir / "package.yaml"

    @property
    def default_doxyfile(self) -> Path | None:
        """rez's own Doxyfile template, if rez is installed."""
        if self.rez_path is None:
            return None
        return self.rez_path / "template" / "Doxyfile"

    @property
    def query_tool(self) -> Path | None:
        """Path to the package descriptor query helper."""
        if self.rez_path is None:
            return None
        return self.rez_path / "bin" / "_rez_query_yaml"

    @classmethod
    def from_environ(
        cls,
        environ: Mapping[str, str] | None = None,
        cwd: Path | None = None,
    ) -> BuildEnvironment:
        """Build the environment view from process environment variables.

        Every path is made absolute against the current directory.
        Build steps run in other directories, so a relative path would
        point somewhere else by then.

        Args:
            environ: Mapping to read from (default: ``os.environ``).
            cwd: Fallback source directory (default: current directory).
        """
        env = os.environ if environ is None else environ

        def path_var(name: str) -> Path | None:
            value = env.get(name)
            return Path(value).resolve() if value else None

        source_dir = path_var("REZ_BUILD_SOURCE_PATH") or (cwd or Path.cwd()).resolve()

        return cls(
            rez_build_env=_truthy(env.get("REZ_BUILD_ENV")),
            rez_path=path_var("REZ_PATH"),
            doxypy_root=path_var("REZ_DOXYPY_ROOT"),
            central=_truthy(env.get("REZ_BUILD_CENTRAL")) or _truthy(env.get("CENTRAL")),
            source_dir=source_dir,
            build_dir=path_var("REZ_BUILD_PATH") or source_dir / "build",
            install_path=path_var("REZ_BUILD_INSTALL_PATH") or source_dir / "install",
            doxygen_executable=env.get("DOXYGEN_EXECUTABLE") or None,
        )

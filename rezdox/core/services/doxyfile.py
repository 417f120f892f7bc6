"""
Doxyfile assembly — template copy plus appended overrides.

Doxygen lets a later assignment of a tag replace an earlier one, so
the overrides only need appending after the template:

    <template, verbatim>
    PROJECT_NAME = "mypkg"
    PROJECT_NUMBER = "1.2.0"
    PROJECT_BRIEF = "one line description"
    INPUT = python/mypkg
"""

from __future__ import annotations

from pathlib import Path

from rezdox.core.models.action import Action
from rezdox.core.models.doxygen import DoxyfileOverrides
from rezdox.core.models.environment import BuildEnvironment
from rezdox.core.models.package import PackageMetadata


def build_overrides(
    metadata: PackageMetadata,
    files: list[str],
    doxypy_script: Path | None = None,
) -> DoxyfileOverrides:
    """Overrides for the package, with the doxypy filter when given."""
    return DoxyfileOverrides(
        metadata=metadata,
        files=list(files),
        input_filter=str(doxypy_script) if doxypy_script else None,
    )


def doxyfile_steps(
    label: str,
    template: Path,
    doxyfile: Path,
    overrides: DoxyfileOverrides,
) -> list[Action]:
    """Steps that produce ``doxyfile``: mkdir, copy template, append overrides."""
    return [
        Action(
            id=f"{label}:doxyfile:mkdir",
            name="Create output directory",
            adapter="filesystem",
            params={"operation": "mkdir", "path": str(doxyfile.parent)},
            for_target=str(doxyfile),
        ),
        Action(
            id=f"{label}:doxyfile:copy",
            name="Copy Doxyfile template",
            adapter="filesystem",
            params={"operation": "copy", "source": str(template), "path": str(doxyfile)},
            for_target=str(doxyfile),
        ),
        Action(
            id=f"{label}:doxyfile:append",
            name="Append Doxyfile overrides",
            adapter="filesystem",
            params={"operation": "append", "path": str(doxyfile), "content": overrides.render()},
            for_target=str(doxyfile),
        ),
    ]


def resolve_template(env: BuildEnvironment, doxyfile: str | None) -> Path | None:
    """The Doxyfile template to copy: the given one, else rez's default.

    A relative template path is taken from the package source directory.
    """
    if doxyfile:
        path = Path(doxyfile)
        return path if path.is_absolute() else env.source_dir / path
    return env.default_doxyfile

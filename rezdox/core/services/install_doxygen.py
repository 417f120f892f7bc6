"""
install_doxygen — build and install Doxygen docs for a rez package.

Registers, into a BuildGraph:

    <destination>/Doxyfile     command: mkdir, copy template, append overrides
    <label>                    target:  run doxygen in <destination>
    _install_<label>           target:  ALL, depends on <label>     (central/force only)
    <destination>/<doxydir>    install: → <install_path>/<destination>/<doxydir>

Docs are only installed during a central install unless ``force`` is
set. For Python sources, enable ``doxypy``: the doxypy filter lets
Doxygen read Doxygen-style comments in docstrings, e.g.

    def my_func(foo):
        '''
        @param foo The foo.
        @return Something foo-like.
        '''

Consider adding a help entry to package.yaml (see help_entry()) so
``rez-help <pkg>`` opens the generated pages.
"""

from __future__ import annotations

import logging
from pathlib import Path

from rezdox.core.engine.graph import BuildGraph
from rezdox.core.errors import InstallDoxygenError
from rezdox.core.models.action import Action
from rezdox.core.models.doxygen import DEFAULT_DOXYDIR, InstallDoxygenResult
from rezdox.core.models.environment import BuildEnvironment
from rezdox.core.models.target import CustomCommand, InstallRule, Target
from rezdox.core.services.descriptor import DescriptorReader, QueryToolReader
from rezdox.core.services.doxyfile import build_overrides, doxyfile_steps, resolve_template
from rezdox.core.services.locate import find_doxygen, find_doxypy

logger = logging.getLogger(__name__)


def install_doxygen(
    graph: BuildGraph,
    env: BuildEnvironment,
    label: str,
    files: list[str],
    destination: str,
    doxyfile: str | None = None,
    doxydir: str | None = None,
    force: bool = False,
    doxypy: bool = False,
    reader: DescriptorReader | None = None,
) -> InstallDoxygenResult:
    """Register the Doxygen build (and maybe install) for one package.

    Args:
        graph: Build graph to register into.
        env: The surrounding rez build environment.
        label: Name of the build target, e.g. ``doc``.
        files: Doxygen INPUT files and directories.
        destination: Directory, relative to the build and install
            roots, that Doxygen runs in and whose output is installed.
        doxyfile: Doxyfile template. Defaults to rez's own template.
        doxydir: Directory Doxygen generates into, ``html`` by default.
            Only needed for non-HTML output.
        force: Install even when this is not a central install.
        doxypy: Filter Python sources through doxypy.
        reader: Package descriptor reader (default: the query tool).

    Raises:
        InstallDoxygenError: If a required argument or tool is missing.
    """
    if not env.rez_build_env:
        raise InstallDoxygenError(
            "install_doxygen requires a rez build environment (REZ_BUILD_ENV is not set)."
        )
    if not label:
        raise InstallDoxygenError("need to specify a label in call to install_doxygen")
    if not destination:
        raise InstallDoxygenError("need to specify DESTINATION in call to install_doxygen")
    if not files:
        raise InstallDoxygenError("no files listed in call to install_doxygen")

    doxygen = find_doxygen(env)

    template = resolve_template(env, doxyfile)
    if template is None:
        raise InstallDoxygenError(
            "No DOXYFILE given and REZ_PATH is not set; cannot find the default template."
        )
    if not template.is_file():
        raise InstallDoxygenError(f"Doxyfile template not found: {template}")

    doxydir = doxydir or DEFAULT_DOXYDIR

    doxypy_script: Path | None = None
    if doxypy:
        doxypy_script = find_doxypy(env)

    metadata = (reader or QueryToolReader()).read(env)
    overrides = build_overrides(metadata, files, doxypy_script)

    output_dir = env.build_dir / destination
    doxyfile_path = output_dir / "Doxyfile"

    graph.add_custom_command(
        CustomCommand(
            output=str(doxyfile_path),
            steps=doxyfile_steps(label, template, doxyfile_path, overrides),
            comment=f"Generating Doxyfile {destination}/Doxyfile...",
        )
    )

    graph.add_target(
        Target(
            name=label,
            depends=[str(doxyfile_path)],
            steps=[
                Action(
                    id=f"{label}:doxygen",
                    name="Run doxygen",
                    adapter="shell",
                    params={"command": [doxygen, "Doxyfile"]},
                    for_target=label,
                )
            ],
            working_dir=str(output_dir),
            comment=f"Generating doxygen content in {destination}/{doxydir}...",
        )
    )

    result = InstallDoxygenResult(
        label=label,
        doxyfile=doxyfile_path,
        template=template,
        output_dir=output_dir,
        doxydir=doxydir,
        doxygen=doxygen,
        metadata=metadata,
        overrides=overrides,
    )

    if env.central or force:
        install_target = f"_install_{label}"
        graph.add_target(Target(name=install_target, depends=[label], all=True))
        graph.add_install(
            InstallRule(
                source=str(output_dir / doxydir),
                destination=destination,
                component=label,
            )
        )
        result.install = True
        result.install_target = install_target
        # The rule installs the last component of doxydir under destination.
        result.install_dir = env.install_path / destination / Path(doxydir).name
        logger.info("Docs for %s will be installed to %s", label, result.install_dir)
    else:
        logger.info("Not a central install; docs for %s will not be installed", label)

    return result


def help_entry(destination: str, doxydir: str | None = None) -> str:
    """package.yaml ``help`` line opening the installed docs."""
    return f"firefox file://!ROOT!/{destination}/{doxydir or DEFAULT_DOXYDIR}/index.html"

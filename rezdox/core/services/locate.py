"""
Tool discovery — the Doxygen executable and the doxypy filter.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from rezdox.core.errors import InstallDoxygenError
from rezdox.core.models.environment import BuildEnvironment

logger = logging.getLogger(__name__)

DOXYPY_SCRIPT = "doxypy.py"


def find_doxygen(env: BuildEnvironment) -> str:
    """Return the path of the Doxygen executable.

    ``DOXYGEN_EXECUTABLE`` wins when it names an existing file or a
    command on PATH; otherwise ``doxygen`` is looked up on PATH.

    Raises:
        InstallDoxygenError: If no executable can be found.
    """
    if env.doxygen_executable:
        candidate = env.doxygen_executable
        if Path(candidate).is_file():
            return str(Path(candidate).resolve())
        found = shutil.which(candidate)
        if found:
            return found
        logger.warning("DOXYGEN_EXECUTABLE=%s not found, falling back to PATH", candidate)

    found = shutil.which("doxygen")
    if found is None:
        raise InstallDoxygenError("install_doxygen cannot find Doxygen.")

    logger.debug("Using doxygen at %s", found)
    return found


def find_doxypy(env: BuildEnvironment) -> Path:
    """Return the path of doxypy.py in the bound doxypy package root.

    doxypy cannot ship with rez (GPL), so users bind it as a rez
    package with doxypy.py at its root and list it in build_requires.

    Raises:
        InstallDoxygenError: If the package root or the script is missing.
    """
    if env.doxypy_root is not None:
        candidate = env.doxypy_root / DOXYPY_SCRIPT
        if candidate.is_file():
            logger.debug("Using doxypy at %s", candidate)
            return candidate

    raise InstallDoxygenError(
        "Cannot locate doxypy.py - you probably need to supply doxypy as a rez "
        "package (with doxypy.py in the package root) and add it to build_requires."
    )

"""
Domain models — Pydantic types for the documentation step.

All models are re-exported here for convenient access:

    from rezdox.core.models import Action, Receipt, BuildEnvironment, Target
"""

from rezdox.core.models.action import Action, Receipt
from rezdox.core.models.doxygen import (
    DEFAULT_DOXYDIR,
    DoxyfileOverrides,
    DoxygenRequest,
    InstallDoxygenResult,
)
from rezdox.core.models.environment import BuildEnvironment
from rezdox.core.models.package import PackageMetadata
from rezdox.core.models.target import CustomCommand, InstallRule, Target

__all__ = [
    # action.py
    "Action",
    # environment.py
    "BuildEnvironment",
    # target.py
    "CustomCommand",
    # doxygen.py
    "DEFAULT_DOXYDIR",
    "DoxyfileOverrides",
    "DoxygenRequest",
    "InstallDoxygenResult",
    "InstallRule",
    # package.py
    "PackageMetadata",
    "Receipt",
    "Target",
]

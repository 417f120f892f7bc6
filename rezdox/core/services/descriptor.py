"""
Package descriptor readers — name, version and description from package.yaml.

Two readers:
    QueryToolReader      — asks rez's ``_rez_query_yaml`` helper (the default)
    YamlDescriptorReader — parses package.yaml directly with PyYAML
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

import yaml

from rezdox.adapters.registry import AdapterRegistry, default_registry
from rezdox.core.errors import InstallDoxygenError
from rezdox.core.models.action import Action
from rezdox.core.models.environment import BuildEnvironment
from rezdox.core.models.package import PackageMetadata

logger = logging.getLogger(__name__)

_QUERY_FLAGS = {
    "name": "--print-name",
    "version": "--print-version",
    "description": "--print-desc",
}


class DescriptorReader(Protocol):
    def read(self, env: BuildEnvironment) -> PackageMetadata: ...


class QueryToolReader:
    """Query package metadata through ``<rez>/bin/_rez_query_yaml``.

    One tool invocation per field; trailing whitespace is stripped
    from each answer.
    """

    def __init__(self, registry: AdapterRegistry | None = None):
        self._registry = registry

    def read(self, env: BuildEnvironment) -> PackageMetadata:
        tool = env.query_tool
        if tool is None:
            raise InstallDoxygenError(
                "REZ_PATH is not set; cannot find the package descriptor query tool."
            )
        registry = self._registry or default_registry()

        values: dict[str, str] = {}
        for field_name, flag in _QUERY_FLAGS.items():
            action = Action(
                id=f"query:{field_name}",
                name=f"Query package {field_name}",
                adapter="shell",
                params={
                    "command": [str(tool), f"--filepath={env.package_file}", flag],
                    "cwd": str(env.source_dir),
                    "timeout": 60,
                },
            )
            receipt = registry.execute_action(action, build_dir=str(env.source_dir))
            if receipt.failed:
                raise InstallDoxygenError(
                    f"Querying package {field_name} from {env.package_file} failed: "
                    f"{receipt.error}"
                )
            values[field_name] = receipt.output.rstrip()

        if not values["name"]:
            raise InstallDoxygenError(f"No package name in {env.package_file}")

        logger.info("Package %s-%s", values["name"], values["version"])
        return PackageMetadata(**values)


class YamlDescriptorReader:
    """Read package metadata straight from package.yaml."""

    def read(self, env: BuildEnvironment) -> PackageMetadata:
        path: Path = env.package_file
        if not path.is_file():
            raise InstallDoxygenError(f"Package descriptor not found: {path}")

        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as e:
            raise InstallDoxygenError(f"Cannot read {path}: {e}") from e

        if not isinstance(data, dict) or not data.get("name"):
            raise InstallDoxygenError(f"No package name in {path}")

        return PackageMetadata(
            name=str(data["name"]),
            version=str(data.get("version", "") or ""),
            description=str(data.get("description", "") or "").rstrip(),
        )


def get_reader(kind: str, registry: AdapterRegistry | None = None) -> DescriptorReader:
    """Return the reader for ``query-tool`` or ``yaml``."""
    if kind == "yaml":
        return YamlDescriptorReader()
    if kind == "query-tool":
        return QueryToolReader(registry)
    raise InstallDoxygenError(f"Unknown descriptor reader '{kind}'")

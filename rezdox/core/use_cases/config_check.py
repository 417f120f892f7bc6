"""
Config check use case — validate rezdox.yml and report issues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from rezdox.core.config.loader import ConfigError, find_config_file, load_config
from rezdox.core.models.doxygen import DoxygenRequest


@dataclass
class ConfigCheckResult:
    """Result of configuration validation."""

    valid: bool = False
    request: DoxygenRequest | None = None
    config_path: Path | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "config_path": str(self.config_path) if self.config_path else None,
            "errors": self.errors,
            "warnings": self.warnings,
            "label": self.request.label if self.request else None,
            "file_count": len(self.request.files) if self.request else 0,
        }


def check_config(config_path: Path | None = None) -> ConfigCheckResult:
    """Validate rezdox.yml and report issues.

    Args:
        config_path: Optional explicit path to rezdox.yml.
    """
    result = ConfigCheckResult()

    if config_path is None:
        config_path = find_config_file()
    if config_path is None:
        result.errors.append("No rezdox.yml found.")
        return result
    result.config_path = config_path

    try:
        request = load_config(config_path)
        result.request = request
    except ConfigError as e:
        result.errors.append(str(e))
        return result

    if not request.label:
        result.errors.append("Missing 'label'.")
    if not request.destination:
        result.errors.append("Missing 'destination'.")
    if not request.files:
        result.errors.append("No 'files' listed.")

    # Missing inputs may still be generated before doxygen runs.
    package_root = config_path.parent
    for name in request.files:
        path = Path(name)
        if not path.is_absolute() and not (package_root / path).exists():
            result.warnings.append(f"Input does not exist in package: {name}")

    if request.doxyfile:
        template = Path(request.doxyfile)
        if not template.is_absolute():
            template = package_root / template
        if not template.is_file():
            result.errors.append(f"Doxyfile template not found: {request.doxyfile}")

    if not (package_root / "package.yaml").is_file():
        result.warnings.append("No package.yaml next to rezdox.yml.")

    result.valid = len(result.errors) == 0
    return result

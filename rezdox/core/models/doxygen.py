"""
Doxygen models — the step's arguments, its Doxyfile overrides, and its result.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from rezdox.core.models.package import PackageMetadata

DEFAULT_DOXYDIR = "html"


class DoxygenRequest(BaseModel):
    """Arguments of one install_doxygen call.

    Every field may be missing here; required ones are checked by
    install_doxygen() so that the error names the missing argument.
    """

    label: str = ""
    files: list[str] = Field(default_factory=list)
    destination: str = ""
    doxyfile: str | None = None
    doxydir: str | None = None
    force: bool = False
    doxypy: bool = False
    descriptor: Literal["query-tool", "yaml"] = "query-tool"

    def merged(self, other: DoxygenRequest) -> DoxygenRequest:
        """Return a copy where values set in ``other`` win over ours."""
        data = self.model_dump()
        for key in other.model_fields_set:
            value = getattr(other, key)
            if value in (None, "", []):
                continue
            data[key] = value
        return DoxygenRequest.model_validate(data)


def _quoted(value: str) -> str:
    """A Doxyfile string value; embedded quotes are backslash-escaped."""
    return '"' + value.replace('"', '\\"') + '"'


class DoxyfileOverrides(BaseModel):
    """Key/value lines appended after the Doxyfile template."""

    metadata: PackageMetadata
    files: list[str] = Field(default_factory=list)
    input_filter: str | None = None     # path to doxypy.py when enabled

    def lines(self) -> list[str]:
        out = [
            f"PROJECT_NAME = {_quoted(self.metadata.name)}",
            f"PROJECT_NUMBER = {_quoted(self.metadata.version)}",
            f"PROJECT_BRIEF = {_quoted(self.metadata.brief)}",
        ]
        if self.input_filter:
            out += [
                "FILTER_SOURCE_FILES = YES",
                f"INPUT_FILTER = {_quoted('python ' + self.input_filter)}",
                "OPTIMIZE_OUTPUT_JAVA = YES",
                "EXTRACT_ALL = YES",
            ]
        out.append("INPUT = " + " ".join(self.files))
        return out

    def render(self) -> str:
        return "".join(line + "\n" for line in self.lines())


class InstallDoxygenResult(BaseModel):
    """What install_doxygen() registered."""

    label: str
    doxyfile: Path
    template: Path
    output_dir: Path
    doxydir: str = DEFAULT_DOXYDIR
    install: bool = False
    install_target: str | None = None
    install_dir: Path | None = None
    doxygen: str = ""
    metadata: PackageMetadata
    overrides: DoxyfileOverrides

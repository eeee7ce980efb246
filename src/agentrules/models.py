"""Core data models for agentrules.

Configuration structures are pydantic models so that the string-or-list
shapes accepted in ``agents.config.json`` are coerced once, at the boundary.
The in-memory rule tree is built from plain dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .paths import rel_starts_with

INCLUDE_ALL = "*"
DEFAULT_MAX_HEADING_DEPTH = 4
MIN_HEADING_DEPTH = 2
MAX_HEADING_DEPTH = 6


def _ensure_list(value: Any) -> Any:
    if isinstance(value, str):
        return [value]
    return value


class RulesSource(BaseModel):
    """One directory of rule files plus the prefixes selecting from it."""

    path: str = Field(..., min_length=1, description="Directory holding rule files")
    includes: list[str] = Field(
        ...,
        description='Prefixes to include, or ["*"] for every Markdown file',
    )
    excludes: list[str] = Field(
        default_factory=list,
        description="Prefixes to exclude; always win over includes",
    )

    @field_validator("includes", "excludes", mode="before")
    @classmethod
    def coerce_single_string(cls, v: Any) -> Any:
        """Accept a single string where a list of prefixes is expected."""
        return _ensure_list(v)


class GenerationBlock(BaseModel):
    """One generation request: a titled document written to one or more files."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1, description="Document title (H1)")
    out_dir: str = Field(..., alias="outDir", min_length=1, description="Output directory")
    files: list[str] = Field(..., description="File names written with identical content")
    rules_dir: list[RulesSource] = Field(
        default_factory=list,
        alias="rulesDir",
        description="Rule sources applied in order; later sources override earlier ones",
    )
    max_heading_depth: int | None = Field(
        default=None,
        alias="maxHeadingDepth",
        description="Deepest heading level to emit, clamped to 2..6",
    )

    @model_validator(mode="before")
    @classmethod
    def upgrade_legacy_source(cls, data: Any) -> Any:
        """Rewrite the single-source form ``rulesDir: "<dir>"`` with block-level filters."""
        if not isinstance(data, dict):
            return data
        if not isinstance(data.get("rulesDir"), str):
            if "includes" in data or "excludes" in data:
                msg = "block-level includes/excludes require a single-string rulesDir"
                raise ValueError(msg)
            return data

        data = dict(data)
        source: dict[str, Any] = {"path": data.pop("rulesDir")}
        if "includes" in data:
            source["includes"] = data.pop("includes")
        if "excludes" in data:
            source["excludes"] = data.pop("excludes")
        data["rulesDir"] = [source]
        return data

    @field_validator("files")
    @classmethod
    def validate_files(cls, v: list[str]) -> list[str]:
        """Validate every output file name is non-empty."""
        if any(not name for name in v):
            msg = "files must be an array of non-empty file names"
            raise ValueError(msg)
        return v


@dataclass
class FrontMatter:
    """Metadata read from the leading ``---`` block of a rule file."""

    enabled: bool = True
    order: int | float | None = None


@dataclass
class RuleFile:
    """A single rule rendered as one ``=== Title ===`` block."""

    title: str
    file_name: str
    order: int | float = 0
    content: str = ""


@dataclass
class SectionNode:
    """A folder in the merged rule hierarchy. The root has an empty path."""

    name: str
    path: str
    depth: int
    index_content: str | None = None
    section_order: int | float | None = None
    rules: list[RuleFile] = field(default_factory=list)
    children: dict[str, SectionNode] = field(default_factory=dict)


@dataclass(frozen=True)
class NormalizedRulesSource:
    """A rules source resolved to an absolute path with canonical prefix lists."""

    path_abs: Path
    includes_all: bool
    includes: list[str]
    excludes: list[str]

    def matches(self, relative_path: str) -> bool:
        """Decide whether a file at ``relative_path`` belongs to this source."""
        if not self.includes_all:
            if not any(rel_starts_with(relative_path, p) for p in self.includes):
                return False
        return not any(rel_starts_with(relative_path, p) for p in self.excludes)


RulesTree = dict[str, SectionNode]

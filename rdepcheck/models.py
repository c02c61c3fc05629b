"""Data models for the dependency validator."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

# Sorted, deduplicated tuple of canonical package names.
DependencySet = tuple[str, ...]


def canonical(names: Iterable[str]) -> DependencySet:
    """Return *names* as a sorted, deduplicated DependencySet."""
    return tuple(sorted(set(names)))


class SourceKind(Enum):
    """File types scanned for package references, keyed by extension."""

    R = ".R"
    RMD = ".Rmd"
    QMD = ".qmd"
    RNW = ".Rnw"

    @classmethod
    def for_path(cls, path: Path) -> SourceKind | None:
        """Return the kind matching *path*'s suffix, or None if not scanned."""
        suffix = path.suffix.lower()
        for kind in cls:
            if kind.value.lower() == suffix:
                return kind
        return None


class DependencyField(Enum):
    """Manifest fields that carry dependency lists."""

    REQUIRED = "Imports"
    OPTIONAL = "Suggests"

    @property
    def header(self) -> str:
        return f"{self.value}:"


@dataclass(frozen=True)
class SourceFile:
    """A scanned source file and its content."""

    path: Path
    kind: SourceKind
    text: str


@dataclass(frozen=True)
class ManifestInfo:
    """Dependency fields parsed from the manifest."""

    package: str | None = None
    required: DependencySet = ()
    optional: DependencySet = ()
    found: bool = False


@dataclass
class ValidationResult:
    """Outcome of a single validator run."""

    used: DependencySet = ()
    declared: DependencySet = ()
    optional: DependencySet = ()
    locked: DependencySet = ()
    missing: DependencySet = ()
    unused: DependencySet = ()
    extra_locked: DependencySet = ()
    added: DependencySet = ()
    pruned: DependencySet = ()
    strict: bool = False
    manifest_found: bool = False
    lockfile_found: bool = False
    warnings: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.missing

    @property
    def used_count(self) -> int:
        return len(self.used)

    @property
    def declared_count(self) -> int:
        return len(self.declared)

    @property
    def locked_count(self) -> int:
        return len(self.locked)

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1

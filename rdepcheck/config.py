"""Validator configuration — directory lists, exclusions and file names."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace

from rdepcheck.models import SourceKind

# Base R packages ship with every installation and never need declaring.
BASE_PACKAGES: tuple[str, ...] = (
    "base",
    "utils",
    "stats",
    "graphics",
    "grDevices",
    "methods",
    "datasets",
    "tools",
    "grid",
    "parallel",
)

STANDARD_DIRS: tuple[str, ...] = ("R", "scripts", "analysis")
STRICT_DIRS: tuple[str, ...] = ("R", "scripts", "analysis", "tests", "vignettes", "inst")

# renv itself is required by the container tooling even when no code calls it.
PROTECTED_PACKAGES: tuple[str, ...] = ("renv",)

LOCKFILE_READERS: tuple[str, ...] = ("json", "jq", "none")


@dataclass(frozen=True)
class ValidatorConfig:
    """Settings passed explicitly into every pipeline stage."""

    standard_dirs: tuple[str, ...] = STANDARD_DIRS
    strict_dirs: tuple[str, ...] = STRICT_DIRS
    source_kinds: tuple[SourceKind, ...] = tuple(SourceKind)
    base_packages: tuple[str, ...] = BASE_PACKAGES
    protected: tuple[str, ...] = PROTECTED_PACKAGES
    manifest_name: str = "DESCRIPTION"
    lockfile_name: str = "renv.lock"
    lockfile_reader: str = "json"

    def dirs_for(self, strict: bool) -> tuple[str, ...]:
        """Return the scan roots for standard or strict mode."""
        return self.strict_dirs if strict else self.standard_dirs

    @classmethod
    def from_env(cls) -> ValidatorConfig:
        """Build a config, applying overrides from environment variables.

        Supported variables:
            RDEPCHECK_PROTECTED       — comma-separated protected packages
            RDEPCHECK_LOCKFILE_READER — json | jq | none
        """
        config = cls()
        protected = os.environ.get("RDEPCHECK_PROTECTED")
        if protected is not None:
            names = tuple(p.strip() for p in protected.split(",") if p.strip())
            config = replace(config, protected=names)
        reader = os.environ.get("RDEPCHECK_LOCKFILE_READER")
        if reader:
            reader = reader.strip().lower()
            if reader not in LOCKFILE_READERS:
                raise ValueError(
                    f"RDEPCHECK_LOCKFILE_READER must be one of {', '.join(LOCKFILE_READERS)}, "
                    f"got {reader!r}"
                )
            config = replace(config, lockfile_reader=reader)
        return config

"""Manifest parser — read dependency fields from a DESCRIPTION file."""

from __future__ import annotations

from pathlib import Path

import structlog

from rdepcheck.exceptions import ManifestError
from rdepcheck.manifest.fields import (
    entry_name,
    is_continuation,
    read_scalar,
    starts_new_field,
    strip_constraints,
)
from rdepcheck.models import DependencyField, DependencySet, ManifestInfo, canonical

log = structlog.get_logger("rdepcheck.manifest")


def parse_field(text: str, field: DependencyField) -> DependencySet:
    """Extract the package names listed in *field*.

    Continuation lines are joined with a space before version constraints
    are removed, so a constraint split across lines is dropped as a whole.
    Lines that neither continue the field nor start a new one are ignored.
    """
    header = field.header
    parts: list[str] = []
    collecting = False
    for line in text.splitlines():
        if not collecting:
            if line.startswith(header):
                collecting = True
                parts.append(line)
            continue
        if is_continuation(line):
            parts.append(line)
        elif starts_new_field(line):
            break

    if not parts:
        return ()

    body = " ".join(parts)[len(header) :]
    names = (entry_name(piece) for piece in strip_constraints(body).split(","))
    return canonical(name for name in names if name)


def parse_manifest_text(text: str) -> ManifestInfo:
    """Parse the package name and both dependency fields from *text*."""
    return ManifestInfo(
        package=read_scalar(text.splitlines(), "Package"),
        required=parse_field(text, DependencyField.REQUIRED),
        optional=parse_field(text, DependencyField.OPTIONAL),
        found=True,
    )


def parse_manifest(path: Path) -> ManifestInfo:
    """Parse the manifest at *path*.

    A missing file means nothing is declared and yields an empty
    :class:`ManifestInfo`; it is not an error.
    """
    if not path.is_file():
        log.warning("manifest.not_found", path=str(path))
        return ManifestInfo()
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ManifestError(f"Cannot read manifest {path}: {exc}") from exc

    info = parse_manifest_text(text)
    log.debug(
        "manifest.parsed",
        path=str(path),
        package=info.package,
        required=len(info.required),
        optional=len(info.optional),
    )
    return info

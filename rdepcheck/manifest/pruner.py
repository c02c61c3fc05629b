"""Manifest pruner — drop Imports entries that no code references."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import structlog

from rdepcheck.exceptions import ManifestError
from rdepcheck.manifest.fields import (
    entry_name,
    field_lines,
    find_block,
    newline_of,
    split_entries,
)
from rdepcheck.manifest.parser import parse_field
from rdepcheck.manifest.writer import atomic_write_text
from rdepcheck.models import DependencyField, DependencySet, canonical

log = structlog.get_logger("rdepcheck.manifest")


def find_unused(
    declared: Iterable[str],
    used: Iterable[str],
    protected: Iterable[str],
) -> DependencySet:
    """Return declared packages that are neither used nor protected."""
    return canonical(set(declared) - set(used) - set(protected))


def _remove_entries(text: str, unused: set[str]) -> tuple[str, DependencySet]:
    """Rebuild the Imports block without *unused*; return new text and removed names.

    Only the block's own lines can change.  Each surviving entry keeps its
    original bytes, including indentation and any constraint that spans
    several lines.  Stray lines inside the block are kept verbatim and
    moved after the rebuilt field.
    """
    field = DependencyField.REQUIRED
    lines = text.splitlines(keepends=True)
    block = find_block(lines, field)
    if block is None:
        return text, ()

    own, stray = field_lines(lines, block)
    body = own[len(field.header) :]
    stripped = body.rstrip()
    tail = body[len(stripped) :]

    kept: list[str] = []
    removed: list[str] = []
    for piece in split_entries(stripped):
        name = entry_name(piece)
        if name in unused:
            removed.append(name)
        else:
            kept.append(piece)

    if not removed:
        return text, ()

    rebuilt = field.header + ",".join(kept) + tail
    if stray:
        if not rebuilt.endswith(("\n", "\r")):
            rebuilt += newline_of(text)
        rebuilt += "".join(stray)
    new_text = "".join(lines[: block.start]) + rebuilt + "".join(lines[block.end :])
    return new_text, canonical(removed)


def prune(
    text: str,
    declared: Iterable[str],
    used: Iterable[str],
    protected: Iterable[str],
) -> str:
    """Return *text* without unused Imports entries.

    When nothing is unused the input is returned unchanged.
    """
    unused = find_unused(declared, used, protected)
    if not unused:
        return text
    new_text, _ = _remove_entries(text, set(unused))
    return new_text


def prune_file(
    path: Path,
    used: Iterable[str],
    protected: Iterable[str],
) -> DependencySet:
    """Prune the manifest at *path* in place and return the removed names.

    The file is only rewritten when something is removed, so an already
    clean manifest keeps its timestamp.
    """
    if not path.is_file():
        return ()
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ManifestError(f"Cannot read manifest {path}: {exc}") from exc

    declared = parse_field(text, DependencyField.REQUIRED)
    used = set(used)
    protected = set(protected)
    unused = find_unused(declared, used, protected)

    kept_by_protection = sorted((set(declared) - used) & protected)
    if kept_by_protection:
        log.debug("pruner.protected_kept", packages=kept_by_protection)

    if not unused:
        return ()

    new_text, removed = _remove_entries(text, set(unused))
    if not removed:
        return ()
    atomic_write_text(path, new_text)
    log.info("pruner.pruned", path=str(path), removed=list(removed))
    return removed

"""Safe manifest mutation — atomic writes and the ``--fix`` entry adder."""

from __future__ import annotations

import os
import tempfile
from collections.abc import Iterable
from pathlib import Path

import structlog

from rdepcheck.exceptions import ManifestError, ManifestWriteError
from rdepcheck.manifest.fields import (
    entry_name,
    field_lines,
    find_block,
    newline_of,
    split_entries,
)
from rdepcheck.manifest.parser import parse_field
from rdepcheck.models import DependencyField, DependencySet, canonical

log = structlog.get_logger("rdepcheck.manifest")

_INDENT = "    "


def atomic_write_text(path: Path, text: str) -> None:
    """Replace *path* with *text* via a temp file in the same directory.

    The original stays intact if anything fails before the rename; the
    temp file is removed in that case.
    """
    try:
        fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    except OSError as exc:
        raise ManifestWriteError(str(path), str(exc)) from exc
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        if path.exists():
            os.chmod(tmp_path, path.stat().st_mode & 0o777)
        os.replace(tmp_path, path)
    except OSError as exc:
        _discard(tmp_path)
        raise ManifestWriteError(str(path), str(exc)) from exc
    except BaseException:
        _discard(tmp_path)
        raise


def _discard(tmp_path: str) -> None:
    try:
        os.unlink(tmp_path)
    except FileNotFoundError:
        pass


def add_entries(text: str, field: DependencyField, names: Iterable[str]) -> str:
    """Append *names* to *field*, one per continuation line.

    Names already listed are skipped.  A missing field is appended at the
    end of the manifest.
    """
    nl = newline_of(text)
    lines = text.splitlines(keepends=True)
    block = find_block(lines, field)

    if block is None:
        new = list(canonical(names))
        if not new:
            return text
        if text and not text.endswith(("\n", "\r")):
            text += nl
        body = ",".join(f"{nl}{_INDENT}{name}" for name in new)
        return f"{text}{field.header}{body}{nl}"

    own, stray = field_lines(lines, block)
    body = own[len(field.header) :]
    stripped = body.rstrip()
    tail = body[len(stripped) :] or nl

    pieces = split_entries(stripped)
    present = {entry_name(piece) for piece in pieces}
    new = [name for name in canonical(names) if name not in present]
    if not new:
        return text

    # Blank pieces come from a trailing comma or an empty header line.
    pieces = [piece for piece in pieces if piece.strip()]
    pieces.extend(f"{nl}{_INDENT}{name}" for name in new)

    rebuilt = field.header + ",".join(pieces) + tail + "".join(stray)
    return "".join(lines[: block.start]) + rebuilt + "".join(lines[block.end :])


def fix_file(path: Path, names: Iterable[str]) -> DependencySet:
    """Add *names* to the manifest's Imports field; return what was added."""
    if not path.is_file():
        raise ManifestError(f"Manifest {path} not found; cannot add packages")
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ManifestError(f"Cannot read manifest {path}: {exc}") from exc

    declared = set(parse_field(text, DependencyField.REQUIRED))
    added = tuple(name for name in canonical(names) if name not in declared)
    if not added:
        return ()
    atomic_write_text(path, add_entries(text, DependencyField.REQUIRED, added))
    log.info("writer.entries_added", path=str(path), added=list(added))
    return added

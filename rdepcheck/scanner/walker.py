"""Source file discovery under the configured scan roots."""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator
from pathlib import Path

import structlog

from rdepcheck.models import SourceFile, SourceKind

log = structlog.get_logger("rdepcheck.scanner")

# Directories that hold installed libraries or tool state, never project code
_SKIP_DIRS = {
    ".git",
    ".Rproj.user",
    "renv",
    "packrat",
}


def discover_files(
    project_dir: Path,
    dirs: Iterable[str],
    kinds: Iterable[SourceKind],
) -> Iterator[tuple[Path, SourceKind]]:
    """Yield ``(path, kind)`` for every scannable file under *dirs*.

    Directories are resolved relative to *project_dir*; ones that do not
    exist are skipped silently.
    """
    wanted = set(kinds)
    seen: set[Path] = set()
    for name in dirs:
        root = project_dir / name
        if not root.is_dir():
            continue
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(d for d in dirnames if d not in _SKIP_DIRS)
            for filename in sorted(filenames):
                path = Path(dirpath) / filename
                kind = SourceKind.for_path(path)
                if kind is None or kind not in wanted or path in seen:
                    continue
                seen.add(path)
                yield path, kind


def iter_source_files(
    project_dir: Path,
    dirs: Iterable[str],
    kinds: Iterable[SourceKind],
) -> Iterator[SourceFile]:
    """Read each discovered file once; unreadable files are skipped."""
    for path, kind in discover_files(project_dir, dirs, kinds):
        try:
            text = path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            log.warning("scanner.file_unreadable", path=str(path), error=str(exc))
            continue
        yield SourceFile(path=path, kind=kind, text=text)

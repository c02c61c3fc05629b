"""Raw token extraction from source text."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

import structlog

from rdepcheck.models import SourceKind
from rdepcheck.scanner.patterns import PATTERNS, TokenPattern
from rdepcheck.scanner.walker import iter_source_files

log = structlog.get_logger("rdepcheck.scanner")


@dataclass(frozen=True)
class RawToken:
    """An unvalidated package reference found in a source file."""

    text: str
    pattern: TokenPattern
    path: Path | None = None
    line_number: int = 0


def extract_tokens(text: str, path: Path | None = None) -> Iterator[RawToken]:
    """Apply every pattern to each line of *text*, one token per match."""
    for line_number, line in enumerate(text.splitlines(), start=1):
        for pattern, regex in PATTERNS.items():
            for match in regex.finditer(line):
                yield RawToken(
                    text=match.group(1),
                    pattern=pattern,
                    path=path,
                    line_number=line_number,
                )


def scan_tokens(
    project_dir: Path,
    dirs: Iterable[str],
    kinds: Iterable[SourceKind],
) -> Iterator[RawToken]:
    """Lazily yield raw tokens from every source file under *dirs*.

    Order follows directory traversal; duplicates are kept for the
    sanitizer to collapse.
    """
    dirs = tuple(dirs)
    per_kind: Counter[SourceKind] = Counter()
    token_count = 0
    for source in iter_source_files(project_dir, dirs, kinds):
        per_kind[source.kind] += 1
        for token in extract_tokens(source.text, source.path):
            token_count += 1
            yield token

    if not per_kind:
        log.warning("scanner.no_files", dirs=list(dirs))
    log.info(
        "scanner.scan_complete",
        files=sum(per_kind.values()),
        by_kind={kind.name: n for kind, n in sorted(per_kind.items(), key=lambda kv: kv[0].name)},
        tokens=token_count,
    )


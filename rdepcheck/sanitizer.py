"""Token sanitizer — turn raw tokens into a canonical Used-Set."""

from __future__ import annotations

import re
from collections.abc import Iterable

from rdepcheck.models import DependencySet, canonical

PACKAGE_NAME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9.]+$")


def is_valid_name(name: str) -> bool:
    """Return True if *name* follows the R package naming grammar."""
    if not PACKAGE_NAME_RE.fullmatch(name):
        return False
    return not (name.startswith(".") or name.endswith("."))


def sanitize(
    tokens: Iterable[str],
    excluded: Iterable[str],
    extra_excluded: Iterable[str] = (),
) -> DependencySet:
    """Filter *tokens* down to a sorted, deduplicated set of package names.

    Tokens shorter than two characters, exact members of *excluded* or
    *extra_excluded*, and names failing the grammar are dropped without
    comment.
    """
    skip = set(excluded) | {name for name in extra_excluded if name}
    kept: list[str] = []
    for token in tokens:
        if not token or len(token) < 2:
            continue
        if token in skip:
            continue
        if not is_valid_name(token):
            continue
        kept.append(token)
    return canonical(kept)

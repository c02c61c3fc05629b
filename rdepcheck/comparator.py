"""Dependency comparator — set algebra between used and declared packages."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from rdepcheck.models import DependencySet, canonical


@dataclass(frozen=True)
class Comparison:
    """Packages used but not declared, plus lockfile extras."""

    missing: DependencySet = ()
    extra_locked: DependencySet = ()

    @property
    def ok(self) -> bool:
        return not self.missing


def compare(
    used: Iterable[str],
    declared: Iterable[str],
    locked: Iterable[str] = (),
    optional: Iterable[str] = (),
) -> Comparison:
    """Compare the Used-Set against the Declared-Required-Set.

    Matching is exact: no case folding and no fuzzy matching.  *locked* is
    informational only; packages locked but declared nowhere are reported
    as ``extra_locked`` and never fail validation.
    """
    declared_set = set(declared)
    missing = canonical(set(used) - declared_set)
    extra_locked = canonical(set(locked) - declared_set - set(optional))
    return Comparison(missing=missing, extra_locked=extra_locked)

"""Lockfile parser — read the package set recorded in renv.lock.

The lockfile is advisory only: every failure here degrades to an empty
Locked-Set with a warning and never aborts a validation run.
"""

from __future__ import annotations

import json
import shutil
import subprocess
from pathlib import Path
from typing import Protocol, runtime_checkable

import structlog

from rdepcheck.exceptions import LockfileError
from rdepcheck.models import DependencySet, canonical

log = structlog.get_logger("rdepcheck.lockfile")

JQ_INSTALL_HINT = "Install jq: brew install jq (macOS) or apt-get install jq (Linux)"


@runtime_checkable
class LockfileReader(Protocol):
    """Interface that every lockfile reader must satisfy."""

    name: str

    def read_packages(self, path: Path) -> DependencySet: ...


class JsonLockfileReader:
    """Read ``Packages`` keys with the standard json module."""

    name = "json"

    def read_packages(self, path: Path) -> DependencySet:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise LockfileError(f"Cannot parse {path}: {exc}") from exc

        if not isinstance(data, dict):
            raise LockfileError(f"{path} is not a JSON object")
        packages = data.get("Packages", {})
        if not isinstance(packages, dict):
            raise LockfileError(f"'Packages' in {path} is not an object")
        return canonical(name for name in packages if name)


class JqLockfileReader:
    """Read ``Packages`` keys by running ``jq``."""

    name = "jq"

    def __init__(self, executable: str = "jq") -> None:
        self._executable = executable

    def read_packages(self, path: Path) -> DependencySet:
        try:
            proc = subprocess.run(
                [self._executable, "-r", ".Packages | keys[]", str(path)],
                check=True,
                capture_output=True,
                text=True,
            )
        except (OSError, subprocess.CalledProcessError) as exc:
            stderr = getattr(exc, "stderr", None) or str(exc)
            raise LockfileError(f"jq failed on {path}: {stderr.strip()}") from exc
        return canonical(line.strip() for line in proc.stdout.splitlines() if line.strip())


class UnavailableLockfileReader:
    """Stand-in used when no JSON query capability is available."""

    name = "none"

    def __init__(self, hint: str | None = None) -> None:
        self._hint = hint

    def read_packages(self, path: Path) -> DependencySet:
        log.warning("lockfile.reader_unavailable", path=str(path), hint=self._hint)
        return ()


def select_reader(name: str = "json") -> LockfileReader:
    """Return the reader registered under *name*.

    Asking for ``jq`` when it is not on ``PATH`` yields the unavailable
    stand-in, which explains how to install it.
    """
    if name == "json":
        return JsonLockfileReader()
    if name == "jq":
        executable = shutil.which("jq")
        if executable is None:
            log.warning("lockfile.jq_missing", hint=JQ_INSTALL_HINT)
            return UnavailableLockfileReader(hint=JQ_INSTALL_HINT)
        return JqLockfileReader(executable)
    if name == "none":
        return UnavailableLockfileReader()
    raise ValueError(f"Unknown lockfile reader: {name!r}")


def parse_lockfile(path: Path, reader: LockfileReader | None = None) -> DependencySet:
    """Return the Locked-Set from *path*, or an empty set on any problem."""
    if not path.is_file():
        log.info("lockfile.not_found", path=str(path))
        return ()

    reader = reader or JsonLockfileReader()
    try:
        packages = reader.read_packages(path)
    except LockfileError as exc:
        log.warning("lockfile.unreadable", path=str(path), reader=reader.name, error=str(exc))
        return ()

    log.debug("lockfile.parsed", path=str(path), reader=reader.name, packages=len(packages))
    return packages

"""DependencyValidator — scan, parse, compare, fix and prune in one run."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from pathlib import Path

import structlog

from rdepcheck.comparator import compare
from rdepcheck.config import ValidatorConfig
from rdepcheck.exceptions import ManifestError, ManifestWriteError
from rdepcheck.lockfile import LockfileReader, parse_lockfile, select_reader
from rdepcheck.manifest.parser import parse_manifest
from rdepcheck.manifest.pruner import find_unused, prune_file
from rdepcheck.manifest.writer import fix_file
from rdepcheck.models import ValidationResult
from rdepcheck.sanitizer import sanitize
from rdepcheck.scanner import scan_tokens

log = structlog.get_logger("rdepcheck.pipeline")


class Phase(Enum):
    IDLE = "idle"
    SCANNING = "scanning"
    PARSING = "parsing"
    COMPARING = "comparing"
    FIXING = "fixing"
    PRUNING = "pruning"
    REPORTED = "reported"
    EXIT = "exit"


# Allowed successors; the run never moves backwards.
_TRANSITIONS: dict[Phase, tuple[Phase, ...]] = {
    Phase.IDLE: (Phase.SCANNING,),
    Phase.SCANNING: (Phase.PARSING,),
    Phase.PARSING: (Phase.COMPARING,),
    Phase.COMPARING: (Phase.FIXING, Phase.PRUNING, Phase.REPORTED),
    Phase.FIXING: (Phase.PRUNING, Phase.REPORTED),
    Phase.PRUNING: (Phase.REPORTED,),
    Phase.REPORTED: (Phase.EXIT,),
    Phase.EXIT: (),
}


class DependencyValidator:
    """Run the validation pipeline against one project directory."""

    def __init__(
        self,
        config: ValidatorConfig,
        project_dir: Path,
        *,
        strict: bool = False,
        prune: bool = True,
        fix: bool = False,
        lockfile_reader: LockfileReader | None = None,
    ) -> None:
        self._config = config
        self._project_dir = project_dir
        self._strict = strict
        self._prune = prune
        self._fix = fix
        self._lockfile_reader = lockfile_reader
        self.phase = Phase.IDLE

    @property
    def manifest_path(self) -> Path:
        return self._project_dir / self._config.manifest_name

    @property
    def lockfile_path(self) -> Path:
        return self._project_dir / self._config.lockfile_name

    def _advance(self, phase: Phase) -> None:
        if phase not in _TRANSITIONS[self.phase]:
            raise RuntimeError(f"invalid phase transition {self.phase.value} -> {phase.value}")
        log.debug("pipeline.phase", previous=self.phase.value, phase=phase.value)
        self.phase = phase

    def run(self) -> ValidationResult:
        """Execute every phase and return the result.

        Raises :class:`ManifestError` only when the manifest exists but
        cannot be read; all other problems are downgraded to warnings.
        """
        config = self._config
        result = ValidationResult(strict=self._strict)

        # ── Scanning ─────────────────────────────────────────────────────
        self._advance(Phase.SCANNING)
        dirs = config.dirs_for(self._strict)
        log.info("pipeline.scanning", dirs=list(dirs), strict=self._strict)
        tokens = scan_tokens(self._project_dir, dirs, config.source_kinds)
        result.used = sanitize((token.text for token in tokens), excluded=config.base_packages)

        # ── Parsing ──────────────────────────────────────────────────────
        self._advance(Phase.PARSING)
        manifest = parse_manifest(self.manifest_path)
        if manifest.package and manifest.package in result.used:
            # Calls into the project's own namespace are not dependencies.
            result.used = sanitize(
                result.used,
                excluded=config.base_packages,
                extra_excluded=(manifest.package,),
            )
        result.manifest_found = manifest.found
        result.declared = manifest.required
        result.optional = manifest.optional
        result.lockfile_found = self.lockfile_path.is_file()
        reader = self._lockfile_reader or select_reader(config.lockfile_reader)
        result.locked = parse_lockfile(self.lockfile_path, reader)

        # ── Comparing ────────────────────────────────────────────────────
        self._advance(Phase.COMPARING)
        comparison = compare(result.used, result.declared, result.locked, result.optional)
        result.missing = comparison.missing
        result.extra_locked = comparison.extra_locked
        result.unused = find_unused(result.declared, result.used, config.protected)
        log.info(
            "pipeline.compared",
            used=result.used_count,
            declared=result.declared_count,
            locked=result.locked_count,
            missing=len(result.missing),
        )

        # ── Fixing ───────────────────────────────────────────────────────
        if result.missing and self._fix:
            self._advance(Phase.FIXING)
            self._run_fix(result)

        # ── Pruning ──────────────────────────────────────────────────────
        if result.ok and self._prune and result.unused:
            self._advance(Phase.PRUNING)
            self._run_prune(result)

        return result

    def report(self, result: ValidationResult, render: Callable[[ValidationResult], None]) -> int:
        """Render *result* and return the process exit status."""
        self._advance(Phase.REPORTED)
        render(result)
        self._advance(Phase.EXIT)
        log.debug("pipeline.exit", exit_code=result.exit_code)
        return result.exit_code

    def _run_fix(self, result: ValidationResult) -> None:
        try:
            added = fix_file(self.manifest_path, result.missing)
        except (ManifestError, ManifestWriteError) as exc:
            log.warning("pipeline.fix_failed", error=str(exc))
            result.warnings.append(f"Auto-fix failed: {exc}")
            return
        result.added = added
        result.declared = tuple(sorted(set(result.declared) | set(added)))
        result.missing = tuple(name for name in result.missing if name not in added)

    def _run_prune(self, result: ValidationResult) -> None:
        # Pruning is cleanup only; a failure never changes the verdict.
        try:
            result.pruned = prune_file(
                self.manifest_path,
                result.used,
                self._config.protected,
            )
        except (ManifestError, ManifestWriteError) as exc:
            log.warning("pipeline.prune_failed", error=str(exc))
            result.warnings.append(f"Pruning skipped: {exc}")
            return
        if result.pruned:
            result.declared = tuple(n for n in result.declared if n not in result.pruned)
            result.unused = tuple(n for n in result.unused if n not in result.pruned)

"""rdepcheck — verify that R packages used in code are declared and locked."""

from rdepcheck.comparator import Comparison, compare
from rdepcheck.config import ValidatorConfig
from rdepcheck.lockfile import parse_lockfile
from rdepcheck.manifest import parse_field, parse_manifest, prune, prune_file
from rdepcheck.models import DependencyField, SourceKind, ValidationResult
from rdepcheck.pipeline import DependencyValidator, Phase
from rdepcheck.sanitizer import sanitize
from rdepcheck.scanner import scan_tokens

__all__ = [
    "Comparison",
    "DependencyField",
    "DependencyValidator",
    "Phase",
    "SourceKind",
    "ValidationResult",
    "ValidatorConfig",
    "compare",
    "parse_field",
    "parse_lockfile",
    "parse_manifest",
    "prune",
    "prune_file",
    "sanitize",
    "scan_tokens",
]

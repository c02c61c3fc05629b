"""Source scanner — extract package references from R code."""

from rdepcheck.scanner.patterns import TokenPattern
from rdepcheck.scanner.tokens import RawToken, extract_tokens, scan_tokens
from rdepcheck.scanner.walker import discover_files, iter_source_files

__all__ = [
    "RawToken",
    "TokenPattern",
    "discover_files",
    "extract_tokens",
    "iter_source_files",
    "scan_tokens",
]

"""DESCRIPTION manifest handling — parse, prune and fix dependency fields."""

from rdepcheck.manifest.parser import parse_field, parse_manifest, parse_manifest_text
from rdepcheck.manifest.pruner import find_unused, prune, prune_file
from rdepcheck.manifest.writer import add_entries, atomic_write_text, fix_file

__all__ = [
    "add_entries",
    "atomic_write_text",
    "find_unused",
    "fix_file",
    "parse_field",
    "parse_manifest",
    "parse_manifest_text",
    "prune",
    "prune_file",
]

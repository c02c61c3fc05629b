"""Field-block primitives for DESCRIPTION-style manifests.

A field starts at column 0 with ``Name:``.  Lines starting with whitespace
continue it; the first line starting with an uppercase letter begins the
next field.  Everything in this module works on ``splitlines(keepends=True)``
output so callers can reassemble the file byte-for-byte.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from rdepcheck.models import DependencyField

_CONSTRAINT_RE = re.compile(r"\([^)]*\)")
_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class FieldBlock:
    """Line range ``[start, end)`` occupied by a field."""

    field: DependencyField
    start: int
    end: int


def is_continuation(line: str) -> bool:
    """Return True if *line* continues the current field."""
    return line.rstrip("\r\n")[:1].isspace()


def starts_new_field(line: str) -> bool:
    return line[:1].isupper()


def find_block(lines: list[str], field: DependencyField) -> FieldBlock | None:
    """Locate the first block for *field*, or None if it is absent."""
    header = field.header
    for start, line in enumerate(lines):
        if not line.startswith(header):
            continue
        end = start + 1
        while end < len(lines) and not starts_new_field(lines[end]):
            end += 1
        return FieldBlock(field=field, start=start, end=end)
    return None


def field_lines(lines: list[str], block: FieldBlock) -> tuple[str, list[str]]:
    """Return the field's own text and the stray lines inside *block*.

    Stray lines neither continue the field nor start a new one.  The parser
    ignores them, so editors must keep them out of the entry list too.
    """
    own = [lines[block.start]]
    stray: list[str] = []
    for line in lines[block.start + 1 : block.end]:
        if is_continuation(line):
            own.append(line)
        else:
            stray.append(line)
    return "".join(own), stray


def newline_of(text: str) -> str:
    return "\r\n" if "\r\n" in text else "\n"


def split_entries(body: str) -> list[str]:
    """Split a field body on commas outside parentheses.

    The pieces keep their surrounding whitespace (including newlines), so
    ``",".join(split_entries(body)) == body``.
    """
    pieces: list[str] = []
    depth = 0
    current: list[str] = []
    for char in body:
        if char == "(":
            depth += 1
        elif char == ")" and depth > 0:
            depth -= 1
        elif char == "," and depth == 0:
            pieces.append("".join(current))
            current = []
            continue
        current.append(char)
    pieces.append("".join(current))
    return pieces


def strip_constraints(text: str) -> str:
    """Remove every parenthesized version constraint from *text*."""
    return _CONSTRAINT_RE.sub("", text)


def entry_name(piece: str) -> str:
    """Return the package name of a field entry, without its constraint."""
    return _WHITESPACE_RE.sub(" ", strip_constraints(piece)).strip()


def read_scalar(lines: list[str], name: str) -> str | None:
    """Return the single-line value of field *name*, if present."""
    header = f"{name}:"
    for line in lines:
        if line.startswith(header):
            value = line[len(header) :].strip()
            return value or None
    return None

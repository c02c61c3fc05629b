"""Textual patterns that reference external packages in R sources."""

from __future__ import annotations

import re
from enum import Enum

_NAME = r"([a-zA-Z][a-zA-Z0-9.]*)"


class TokenPattern(Enum):
    """How a raw token was found."""

    LIBRARY_CALL = "library-call"
    NAMESPACE = "namespace"
    IMPORT_FROM = "import-from"
    IMPORT = "import"


# library(dplyr), require("ggplot2"); the closing parenthesis is required
# so half-typed calls are not picked up.
LIBRARY_CALL_RE = re.compile(
    r"(?:library|require)\s*\(\s*[\"']?" + _NAME + r"[\"']?\s*\)",
)

# dplyr::mutate, utils:::head
NAMESPACE_RE = re.compile(_NAME + r"::")

# #' @importFrom magrittr %>%
IMPORT_FROM_RE = re.compile(r"#'\s*@importFrom\s+" + _NAME)

# #' @import data.table
IMPORT_RE = re.compile(r"#'\s*@import\s+" + _NAME)

PATTERNS: dict[TokenPattern, re.Pattern[str]] = {
    TokenPattern.LIBRARY_CALL: LIBRARY_CALL_RE,
    TokenPattern.NAMESPACE: NAMESPACE_RE,
    TokenPattern.IMPORT_FROM: IMPORT_FROM_RE,
    TokenPattern.IMPORT: IMPORT_RE,
}

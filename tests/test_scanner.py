"""Tests for the source scanner."""

from __future__ import annotations

import inspect
from pathlib import Path

from rdepcheck.models import SourceKind
from rdepcheck.scanner import (
    TokenPattern,
    discover_files,
    extract_tokens,
    iter_source_files,
    scan_tokens,
)

ALL_KINDS = tuple(SourceKind)


def _texts(source: str) -> list[str]:
    return [t.text for t in extract_tokens(source)]


# ── Pattern extraction ───────────────────────────────────────────────────


class TestExtractTokens:
    def test_library_call(self):
        tokens = list(extract_tokens("library(dplyr)\n"))
        assert [t.text for t in tokens] == ["dplyr"]
        assert tokens[0].pattern is TokenPattern.LIBRARY_CALL
        assert tokens[0].line_number == 1

    def test_require_with_quotes(self):
        assert _texts('require("ggplot2")') == ["ggplot2"]
        assert _texts("library( 'tidyr' )") == ["tidyr"]

    def test_incomplete_call_ignored(self):
        assert _texts("library(dplyr") == []

    def test_call_with_extra_arguments_ignored(self):
        assert _texts("library(dplyr, quietly = TRUE)") == []

    def test_namespace_access(self):
        tokens = list(extract_tokens("x <- purrr::map(1:3, f)"))
        assert [t.text for t in tokens] == ["purrr"]
        assert tokens[0].pattern is TokenPattern.NAMESPACE

    def test_internal_namespace_access(self):
        assert _texts("utils:::head(x)") == ["utils"]

    def test_multiple_matches_on_one_line(self):
        assert _texts("dplyr::filter(x) |> ggplot2::ggplot()") == ["dplyr", "ggplot2"]

    def test_roxygen_import_from(self):
        tokens = list(extract_tokens("#' @importFrom magrittr %>%"))
        assert [t.text for t in tokens] == ["magrittr"]
        assert tokens[0].pattern is TokenPattern.IMPORT_FROM

    def test_roxygen_import(self):
        tokens = list(extract_tokens("#' @import data.table"))
        assert [t.text for t in tokens] == ["data.table"]
        assert tokens[0].pattern is TokenPattern.IMPORT

    def test_plain_comment_import_ignored(self):
        assert _texts("# @import data.table") == []

    def test_line_numbers(self):
        tokens = list(extract_tokens("x <- 1\n\nlibrary(here)\n"))
        assert tokens[0].line_number == 3

    def test_duplicates_kept(self):
        assert _texts("dplyr::a()\ndplyr::b()\n") == ["dplyr", "dplyr"]


# ── File discovery ───────────────────────────────────────────────────────


class TestDiscoverFiles:
    def test_filters_by_extension(self, make_project):
        root = make_project(
            {
                "R/a.R": "",
                "R/b.Rmd": "",
                "R/notes.txt": "",
                "R/c.qmd": "",
                "R/d.Rnw": "",
            }
        )
        found = [(p.name, kind) for p, kind in discover_files(root, ["R"], ALL_KINDS)]
        assert found == [
            ("a.R", SourceKind.R),
            ("b.Rmd", SourceKind.RMD),
            ("c.qmd", SourceKind.QMD),
            ("d.Rnw", SourceKind.RNW),
        ]

    def test_lowercase_extension(self, make_project):
        root = make_project({"R/helpers.r": ""})
        found = [p.name for p, _ in discover_files(root, ["R"], ALL_KINDS)]
        assert found == ["helpers.r"]

    def test_only_requested_kinds(self, make_project):
        root = make_project({"R/a.R": "", "R/b.Rmd": ""})
        found = [p.name for p, _ in discover_files(root, ["R"], [SourceKind.RMD])]
        assert found == ["b.Rmd"]

    def test_only_requested_dirs(self, make_project):
        root = make_project({"R/a.R": "", "tests/t.R": ""})
        found = [p.name for p, _ in discover_files(root, ["R"], ALL_KINDS)]
        assert found == ["a.R"]

    def test_recurses_into_subdirectories(self, make_project):
        root = make_project({"analysis/scripts/deep/run.R": ""})
        found = [p.name for p, _ in discover_files(root, ["analysis"], ALL_KINDS)]
        assert found == ["run.R"]

    def test_skips_renv_library(self, make_project):
        root = make_project({"R/a.R": "", "R/renv/library/pkg.R": ""})
        found = [p.name for p, _ in discover_files(root, ["R"], ALL_KINDS)]
        assert found == ["a.R"]

    def test_missing_dirs_are_skipped(self, tmp_path):
        assert list(discover_files(tmp_path, ["R", "scripts"], ALL_KINDS)) == []

    def test_overlapping_dirs_yield_once(self, make_project):
        root = make_project({"R/a.R": ""})
        found = list(discover_files(root, ["R", "R"], ALL_KINDS))
        assert len(found) == 1


class TestIterSourceFiles:
    def test_reads_content(self, make_project):
        root = make_project({"R/a.R": "library(dplyr)\n"})
        files = list(iter_source_files(root, ["R"], ALL_KINDS))
        assert len(files) == 1
        assert files[0].text == "library(dplyr)\n"
        assert files[0].kind is SourceKind.R

    def test_unreadable_file_skipped(self, make_project, monkeypatch):
        root = make_project({"R/bad.R": "library(x1)", "R/good.R": "library(y1)"})
        original = Path.read_text

        def fake_read_text(self, *args, **kwargs):
            if self.name == "bad.R":
                raise PermissionError("denied")
            return original(self, *args, **kwargs)

        monkeypatch.setattr(Path, "read_text", fake_read_text)
        files = list(iter_source_files(root, ["R"], ALL_KINDS))
        assert [f.path.name for f in files] == ["good.R"]

    def test_invalid_utf8_is_replaced(self, tmp_path):
        (tmp_path / "R").mkdir()
        (tmp_path / "R" / "latin1.R").write_bytes(b"# caf\xe9\nlibrary(here)\n")
        files = list(iter_source_files(tmp_path, ["R"], ALL_KINDS))
        assert "library(here)" in files[0].text


class TestScanTokens:
    def test_is_lazy(self, tmp_path):
        assert inspect.isgenerator(scan_tokens(tmp_path, ["R"], ALL_KINDS))

    def test_collects_across_files(self, make_project):
        root = make_project(
            {
                "R/a.R": "dplyr::mutate(df)\n",
                "scripts/b.R": "library(ggplot2)\n",
                "analysis/report.Rmd": "```{r}\nknitr::kable(x)\n```\n",
            }
        )
        tokens = list(scan_tokens(root, ["R", "scripts", "analysis"], ALL_KINDS))
        assert sorted(t.text for t in tokens) == ["dplyr", "ggplot2", "knitr"]
        assert all(t.path is not None for t in tokens)

    def test_empty_project(self, tmp_path):
        assert list(scan_tokens(tmp_path, ["R"], ALL_KINDS)) == []

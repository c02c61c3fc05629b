"""Tests for the rdepcheck command line."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from rdepcheck.cli import main

PASSING = {
    "DESCRIPTION": "Package: demo\nImports: renv, dplyr\n",
    "R/a.R": "library(dplyr)\n",
}

FAILING = {
    "DESCRIPTION": "Package: demo\nImports: renv\n",
    "R/a.R": "alpha::f()\n",
}


class TestUsage:
    @pytest.mark.parametrize("flag", ["-h", "--help"])
    def test_help(self, flag, capsys):
        with patch("rdepcheck.cli.DependencyValidator") as mock_validator:
            assert main([flag]) == 0
        out = capsys.readouterr().out
        assert "Usage:" in out
        assert "--strict" in out
        assert "--fix" in out
        mock_validator.assert_not_called()

    def test_unknown_option(self, capsys):
        with patch("rdepcheck.cli.DependencyValidator") as mock_validator:
            assert main(["--bogus"]) == 1
        assert "No such option" in capsys.readouterr().err
        mock_validator.assert_not_called()

    def test_missing_project_dir(self, tmp_path, capsys):
        assert main(["--project-dir", str(tmp_path / "nope")]) == 1
        assert "does not exist" in capsys.readouterr().err

    def test_invalid_lockfile_reader_option(self, tmp_path):
        assert main(["--project-dir", str(tmp_path), "--lockfile-reader", "yaml"]) == 1

    def test_invalid_lockfile_reader_env(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setenv("RDEPCHECK_LOCKFILE_READER", "yaml")
        assert main(["--project-dir", str(tmp_path)]) == 1
        assert "RDEPCHECK_LOCKFILE_READER" in capsys.readouterr().err


class TestValidation:
    def test_passing_project(self, make_project, capsys):
        root = make_project(PASSING)
        assert main(["--project-dir", str(root)]) == 0
        out = capsys.readouterr().out
        assert "Found 1 packages in code" in out
        assert "Found 2 packages in DESCRIPTION Imports" in out
        assert "No renv.lock found" in out
        assert "Package environment validation passed" in out

    def test_failing_project(self, make_project, capsys):
        root = make_project(FAILING)
        assert main(["--project-dir", str(root)]) == 1
        out = capsys.readouterr().out
        assert "Missing from DESCRIPTION Imports:" in out
        assert "  - alpha" in out
        assert "Package environment validation failed" in out
        assert "To fix missing packages, you can:" in out
        assert "rdepcheck --fix" in out
        assert "renv::install()" in out

    def test_every_missing_package_listed(self, make_project, capsys):
        code = "".join(f"pkg{i:02d}::f()\n" for i in range(30))
        root = make_project({"DESCRIPTION": "Imports: renv\n", "R/a.R": code})
        assert main(["--project-dir", str(root)]) == 1
        out = capsys.readouterr().out
        for i in range(30):
            assert f"  - pkg{i:02d}" in out

    def test_strict_flag(self, make_project, capsys):
        root = make_project(
            {
                "DESCRIPTION": "Imports: renv, dplyr\n",
                "R/a.R": "dplyr::n()\n",
                "tests/testthat/test-a.R": "library(testthat)\n",
            }
        )
        assert main(["--project-dir", str(root)]) == 0
        assert main(["--project-dir", str(root), "--strict"]) == 1
        out = capsys.readouterr().out
        assert "strict mode" in out
        assert "  - testthat" in out

    def test_quiet_keeps_missing_list(self, make_project, capsys):
        root = make_project(FAILING)
        assert main(["--project-dir", str(root), "-q"]) == 1
        out = capsys.readouterr().out
        assert "Found" not in out
        assert "  - alpha" in out

    def test_fix(self, make_project, capsys):
        root = make_project(FAILING)
        assert main(["--project-dir", str(root), "--fix"]) == 0
        out = capsys.readouterr().out
        assert "  + alpha" in out
        assert "alpha" in (root / "DESCRIPTION").read_text()

    def test_prunes_by_default(self, make_project, capsys):
        root = make_project(
            {"DESCRIPTION": "Imports: renv, dplyr, stringr\n", "R/a.R": "dplyr::n()\n"}
        )
        assert main(["--project-dir", str(root)]) == 0
        assert "Removed unused packages" in capsys.readouterr().out
        assert (root / "DESCRIPTION").read_text() == "Imports: renv, dplyr\n"

    def test_no_prune(self, make_project, capsys):
        description = "Imports: renv, dplyr, stringr\n"
        root = make_project({"DESCRIPTION": description, "R/a.R": "dplyr::n()\n"})
        assert main(["--project-dir", str(root), "--no-prune"]) == 0
        assert "Unused packages in DESCRIPTION Imports: stringr" in capsys.readouterr().out
        assert (root / "DESCRIPTION").read_text() == description

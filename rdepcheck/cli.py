"""CLI entry point: rdepcheck.

Usage:
    rdepcheck                 # standard validation (R/, scripts/, analysis/)
    rdepcheck --strict        # also scan tests/, vignettes/, inst/
    rdepcheck --fix           # add missing packages to DESCRIPTION Imports

Exit status is 0 when every package used in code is declared in
DESCRIPTION, and 1 when something is missing or the invocation is invalid.
"""

from __future__ import annotations

import functools
import sys
from dataclasses import replace
from pathlib import Path

import click

from rdepcheck.config import LOCKFILE_READERS, ValidatorConfig
from rdepcheck.core.logging import setup_logging
from rdepcheck.exceptions import ValidatorError
from rdepcheck.pipeline import DependencyValidator
from rdepcheck.reporter import render_report

_EPILOG = """\b
Requirements:
  jq is only needed with --lockfile-reader jq (brew install jq / apt-get install jq).

\b
Package installation and renv::snapshot() happen inside the project
container; this tool only reads code and metadata on the host.
"""


@click.command(
    context_settings={"help_option_names": ["-h", "--help"]},
    epilog=_EPILOG,
)
@click.option(
    "--strict",
    is_flag=True,
    help="Scan all directories (including tests/, vignettes/, inst/).",
)
@click.option(
    "--project-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Project root containing DESCRIPTION and renv.lock.",
)
@click.option("--fix", is_flag=True, help="Add missing packages to DESCRIPTION Imports.")
@click.option("--no-prune", is_flag=True, help="Keep unused packages in DESCRIPTION Imports.")
@click.option("-q", "--quiet", is_flag=True, help="Only print problems and the verdict.")
@click.option(
    "--lockfile-reader",
    type=click.Choice(LOCKFILE_READERS),
    default=None,
    help="How to read renv.lock (default: json).",
)
def validate(
    strict: bool,
    project_dir: Path,
    fix: bool,
    no_prune: bool,
    quiet: bool,
    lockfile_reader: str | None,
) -> int:
    """Validate R package dependencies without requiring R on the host."""
    setup_logging(quiet=quiet)

    try:
        config = ValidatorConfig.from_env()
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        return 1
    if lockfile_reader:
        config = replace(config, lockfile_reader=lockfile_reader)

    validator = DependencyValidator(
        config,
        project_dir.resolve(),
        strict=strict,
        prune=not no_prune,
        fix=fix,
    )
    try:
        result = validator.run()
    except ValidatorError as e:
        click.echo(f"Error: {e}", err=True)
        return 1

    return validator.report(result, functools.partial(render_report, config=config, quiet=quiet))


def main(argv: list[str] | None = None) -> int:
    """Run the CLI and return the exit status instead of exiting.

    Usage errors (unknown flags, bad paths) exit with 1, not click's 2.
    """
    try:
        rv = validate.main(args=argv, prog_name="rdepcheck", standalone_mode=False)
    except click.UsageError as e:
        e.show()
        return 1
    except click.Abort:
        click.echo("Aborted!", err=True)
        return 1
    return rv if isinstance(rv, int) else 0


def run() -> None:
    sys.exit(main())

"""Human-readable rendering of a ValidationResult."""

from __future__ import annotations

import click

from rdepcheck.config import ValidatorConfig
from rdepcheck.models import ValidationResult


def remediation_steps(config: ValidatorConfig) -> list[str]:
    """Next steps printed when packages are missing."""
    return [
        f"Add them manually to the {config.manifest_name} Imports field",
        "Run: rdepcheck --fix",
        "Inside the container: renv::install() then exit (auto-snapshot)",
    ]


def render_report(result: ValidationResult, config: ValidatorConfig, quiet: bool = False) -> None:
    """Print the summary, every missing package and the final verdict.

    Missing packages are always listed in full, even with *quiet*.
    """
    manifest = config.manifest_name
    lockfile = config.lockfile_name

    if not quiet:
        mode = "strict" if result.strict else "standard"
        click.echo(f"Scanned {', '.join(config.dirs_for(result.strict))} ({mode} mode)")
        click.echo(f"Found {result.used_count} packages in code")
        if result.manifest_found:
            click.echo(f"Found {result.declared_count} packages in {manifest} Imports")
        else:
            click.echo(f"No {manifest} found; nothing is declared")
        if result.lockfile_found:
            click.echo(f"Found {result.locked_count} packages in {lockfile}")
        else:
            click.echo(f"No {lockfile} found")
        if result.extra_locked:
            click.echo(
                f"Note: {len(result.extra_locked)} packages in {lockfile} "
                f"are not declared in {manifest}"
            )

    for warning in result.warnings:
        click.secho(f"Warning: {warning}", fg="yellow", err=True)

    if result.added:
        click.echo(f"Added to {manifest} Imports:")
        for name in result.added:
            click.echo(f"  + {name}")

    if result.pruned:
        click.echo(f"Removed unused packages from {manifest} Imports:")
        for name in result.pruned:
            click.echo(f"  - {name}")
    elif result.unused and not quiet:
        click.echo(f"Unused packages in {manifest} Imports: {', '.join(result.unused)}")

    if result.missing:
        click.secho(f"Missing from {manifest} Imports:", fg="red")
        for name in result.missing:
            click.echo(f"  - {name}")
        click.secho("Package environment validation failed", fg="red")
        click.echo("")
        click.echo("To fix missing packages, you can:")
        for number, step in enumerate(remediation_steps(config), start=1):
            click.echo(f"  {number}. {step}")
        click.echo("")
        return

    click.secho(f"All packages properly declared in {manifest}", fg="green")
    click.secho("Package environment validation passed", fg="green")

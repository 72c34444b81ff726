"""CLI entry point for pin-bump."""

from __future__ import annotations

from pathlib import Path

import click

from pin_bump.errors import InvalidConfig, InvalidSettings, PinBumpError
from pin_bump.log import configure_logging
from pin_bump.pipeline import check_updates, run_update
from pin_bump.shell import step
from pin_bump.sources import GitTagVersionSource
from pin_bump.toml import load_settings, parse_target_options
from pin_bump.versions import (
    BUMP_KINDS,
    latest_of,
    new_date_version,
    next_version,
    parse_version,
    parse_versions,
)


def _config_options(func):
    """Options shared by the commands that read a pre-commit config."""
    func = click.option("-v", "--verbose", is_flag=True, help="Show debug output.")(func)
    func = click.option(
        "--pyproject",
        type=click.Path(dir_okay=False),
        default="pyproject.toml",
        show_default=True,
        help="pyproject.toml holding [tool.pin-bump] settings.",
    )(func)
    func = click.option(
        "--exclude",
        "excludes",
        multiple=True,
        metavar="URL",
        help="Leave this repo alone (repeatable).",
    )(func)
    func = click.option(
        "--target",
        "targets",
        multiple=True,
        metavar="URL=VERSION",
        help="Pin this repo to VERSION instead of its newest tag (repeatable).",
    )(func)
    func = click.argument("config", required=False, type=click.Path(dir_okay=False))(func)
    return func


def _resolve(
    config: str | None, targets: tuple[str, ...], excludes: tuple[str, ...], pyproject: str
) -> tuple[Path, dict[str, str], list[str]]:
    """Merge pyproject settings with command line options.

    Command line targets win over configured ones; excludes add up.
    """
    pyproject_path = Path(pyproject)
    try:
        settings = load_settings(pyproject_path)
    except InvalidSettings as exc:
        raise click.ClickException(str(exc)) from exc

    try:
        cli_targets = parse_target_options(targets)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--target") from exc

    if config:
        config_path = Path(config)
    else:
        config_path = pyproject_path.parent / settings.config_file
    if not config_path.exists():
        raise click.ClickException(f"No pre-commit config found at {config_path}")

    return config_path, {**settings.targets, **cli_targets}, [*settings.exclude, *excludes]


@click.group()
@click.version_option(package_name="pin-bump")
def cli() -> None:
    """Keep the pinned revs of a pre-commit config up to date."""


@cli.command()
@_config_options
@click.option("--dry-run", is_flag=True, help="Report updates without writing.")
def update(
    config: str | None,
    targets: tuple[str, ...],
    excludes: tuple[str, ...],
    pyproject: str,
    verbose: bool,
    dry_run: bool,
) -> None:
    """Move every pin in CONFIG to the newest version tag."""
    configure_logging(verbose)
    config_path, overrides, excluded = _resolve(config, targets, excludes, pyproject)

    try:
        report = run_update(
            config_path, GitTagVersionSource(), overrides, excluded, dry_run=dry_run
        )
    except InvalidConfig as exc:
        raise click.ClickException(str(exc)) from exc

    step("Summary")
    for name, version in report.updated.items():
        click.echo(f"  ✓ {name} → {version}")
    if not report.updated and report.ok:
        click.echo("  Nothing to update.")
    for name, error in report.failures.items():
        click.echo(f"  ✗ {name}: {error}", err=True)

    if not report.ok:
        raise SystemExit(1)


@cli.command()
@_config_options
def check(
    config: str | None,
    targets: tuple[str, ...],
    excludes: tuple[str, ...],
    pyproject: str,
    verbose: bool,
) -> None:
    """List the pins in CONFIG that have a newer version."""
    configure_logging(verbose)
    config_path, overrides, excluded = _resolve(config, targets, excludes, pyproject)

    try:
        report = check_updates(config_path, GitTagVersionSource(), overrides, excluded)
    except InvalidConfig as exc:
        raise click.ClickException(str(exc)) from exc

    step("Summary")
    for name, version in report.available.items():
        click.echo(f"  {name} → {version}")
    if not report.available and report.ok:
        click.echo("  Everything is up to date.")
    for name, error in report.failures.items():
        click.echo(f"  ✗ {name}: {error}", err=True)

    if not report.ok:
        raise SystemExit(1)


@cli.command()
@click.argument("versions", nargs=-1, required=True)
def latest(versions: tuple[str, ...]) -> None:
    """Print the newest of VERSIONS."""
    try:
        click.echo(latest_of(parse_versions(versions)).render())
    except PinBumpError as exc:
        raise click.ClickException(str(exc)) from exc


@cli.command(name="next")
@click.argument("version")
@click.option(
    "--kind",
    type=click.Choice(BUMP_KINDS),
    default="patch",
    show_default=True,
    help="Which component to bump.",
)
def next_(version: str, kind: str) -> None:
    """Print the version after VERSION."""
    try:
        click.echo(next_version(parse_version(version), kind).render())
    except PinBumpError as exc:
        raise click.ClickException(str(exc)) from exc


@cli.command(name="date-version")
def date_version() -> None:
    """Print a new YYYYMMDD_HHMMSS version for the current time."""
    click.echo(new_date_version().render())

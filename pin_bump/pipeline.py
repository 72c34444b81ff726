"""Update pipeline: collect → plan → write → report.

This module drives a whole config file:
1. Read the pre-commit config and derive one Dependency per remote repo
2. Apply target overrides and exclusions
3. Plan each dependency against the version source
4. Write the new pins, one file rewrite at a time
5. Report what changed and what failed

A failing dependency never stops the run. Its error is logged and recorded
in the report, and the remaining dependencies are still processed; the
caller decides what a failure means (the CLI exits non-zero).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path

from .deps import apply_update, plan_update
from .errors import PinBumpError
from .log import logger
from .models import ChangeSummary, CheckReport, Dependency, UpdateReport
from .precommit import PreCommitConfigFile
from .shell import step
from .sources import VersionSource


def collect_dependencies(
    config_path: Path,
    overrides: Mapping[str, str] | None = None,
    exclude: Iterable[str] = (),
) -> list[Dependency]:
    """Read the dependencies pinned in a pre-commit config.

    Args:
        config_path: Path to the pre-commit config file.
        overrides: Map of repo URL → version to pin instead of the newest.
        exclude: Repo URLs to skip.

    Raises:
        InvalidConfig: If the file is not a valid pre-commit config.
    """
    step(f"Reading dependencies from {config_path}")

    overrides = dict(overrides or {})
    excluded = set(exclude)
    dependencies: list[Dependency] = []
    for dependency in PreCommitConfigFile(config_path).get_dependencies():
        if dependency.url in excluded:
            logger.info(f"  {dependency.name}: excluded")
            continue
        if dependency.url in overrides:
            dependency.target_version_override = overrides.pop(dependency.url)
        dependencies.append(dependency)
        pinned = dependency.current_version or "<unpinned>"
        logger.info(f"  {dependency.name} {pinned}")

    for url in overrides:
        logger.warning(f"  Target for '{url}' ignored, no such repo in {config_path}")

    return dependencies


def check_updates(
    config_path: Path,
    source: VersionSource,
    overrides: Mapping[str, str] | None = None,
    exclude: Iterable[str] = (),
) -> CheckReport:
    """Plan every dependency without writing anything."""
    dependencies = collect_dependencies(config_path, overrides, exclude)

    step("Checking for updates")
    report = CheckReport()
    for dependency in dependencies:
        try:
            report.decisions[dependency.name] = plan_update(dependency, source)
        except PinBumpError as exc:
            logger.error(f"  {dependency.name}: {exc}")
            report.failures[dependency.name] = str(exc)
    return report


def run_update(
    config_path: Path,
    source: VersionSource,
    overrides: Mapping[str, str] | None = None,
    exclude: Iterable[str] = (),
    dry_run: bool = False,
) -> UpdateReport:
    """Update every dependency pinned in a pre-commit config.

    Dependencies are handled one after another; each write re-reads the
    file, so earlier pins are never overwritten by later ones.

    Args:
        config_path: Path to the pre-commit config file.
        source: Where newest versions come from.
        overrides: Map of repo URL → version to pin instead of the newest.
        exclude: Repo URLs to skip.
        dry_run: Plan and report, but don't write the file.

    Returns:
        An UpdateReport; check .ok for per-dependency failures.

    Raises:
        InvalidConfig: If the config file itself can't be read. Errors of
            single dependencies are recorded in the report instead.
    """
    dependencies = collect_dependencies(config_path, overrides, exclude)

    step("Updating dependencies" + (" (dry run)" if dry_run else ""))
    report = UpdateReport()
    for dependency in dependencies:
        try:
            decision = plan_update(dependency, source)
            if decision.update_available:
                summary = apply_update(dependency, decision.target_version, dry_run=dry_run)
            else:
                summary = ChangeSummary()
        except (PinBumpError, OSError) as exc:
            logger.error(f"  {dependency.name}: {exc}")
            report.failures[dependency.name] = str(exc)
            continue

        report.summary.add_child(summary)
        if summary.is_changed:
            report.updated[dependency.name] = decision.target_version

    if report.summary.is_changed:
        logger.info(f"Updated dependencies in pre-commit config file '{config_path}'.")
    elif report.ok:
        logger.info(
            f"All dependencies in pre-commit config file '{config_path}' "
            "were already up to date."
        )
    return report

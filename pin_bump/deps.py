"""Dependency update planning.

Decides whether a pinned git-repository dependency should move to a newer
version and writes the new pin into the files that record it.

Planning is pure: plan_update() only reads the dependency and asks the
version source. Writing is a separate step (apply_update), so callers can
plan a whole batch before touching any file.
"""

from __future__ import annotations

from pathlib import Path

from .errors import (
    DataInconsistency,
    IncomparableVersions,
    NoSourceLocations,
    VersionDiscoveryFailed,
)
from .log import logger
from .models import ChangeSummary, Dependency, UpdateDecision
from .precommit import PreCommitConfigFile
from .sources import VersionSource
from .versions import is_newer_than, parse_version


def resolve_target(dependency: Dependency, source: VersionSource) -> str:
    """Return the version string the dependency should be pinned to.

    A target override wins without asking the source.

    Raises:
        VersionDiscoveryFailed: If the source can't name a newest version.
    """
    if dependency.target_version_override:
        logger.debug(
            f"Newest version for '{dependency.name}' is set by target version "
            f"'{dependency.target_version_override}'"
        )
        return dependency.target_version_override

    newest = source.get_newest_version(dependency.url)
    if not newest:
        raise VersionDiscoveryFailed(dependency.url, "empty version string")
    logger.debug(f"Newest version of '{dependency.name}' is '{newest}'.")
    return newest


def plan_update(dependency: Dependency, source: VersionSource) -> UpdateDecision:
    """Decide whether a dependency's pin should move, and to what.

    An unpinned dependency always gets an update. Otherwise the target must
    be strictly newer than the current pin; an equal or older target is
    not an update.

    Raises:
        VersionDiscoveryFailed: If the target can't be resolved.
        InvalidVersionFormat: If the target or current pin is not a version
            (e.g. a commit hash).
        DataInconsistency: If current pin and target are different kinds of
            version.
    """
    target_string = resolve_target(dependency, source)
    target = parse_version(target_string)

    if dependency.current_version is None:
        logger.info(f"  {dependency.name}: not pinned yet, target {target_string}")
        return UpdateDecision(update_available=True, target_version=target_string)

    current = parse_version(dependency.current_version)
    try:
        available = is_newer_than(target, current)
    except IncomparableVersions as exc:
        raise DataInconsistency(dependency.name, current, target) from exc

    if available:
        logger.info(
            f"  {dependency.name}: update available "
            f"{dependency.current_version} → {target_string}"
        )
    else:
        logger.info(f"  {dependency.name}: up to date at {dependency.current_version}")
    return UpdateDecision(update_available=available, target_version=target_string)


def update_pin_in_source_file(
    dependency: Dependency, version: str, source_file: Path, dry_run: bool = False
) -> ChangeSummary:
    """Write version as the pin of dependency in one source file.

    Only pre-commit config files are supported as source files.

    Raises:
        InvalidConfig: If source_file is not a pre-commit config.
        AnchorNotFound, AmbiguousAnchor: If the pin line can't be located.
    """
    config_file = PreCommitConfigFile(source_file)
    # validates the file before the line-oriented rewrite
    config_file.get_config()
    return config_file.set_pin(dependency.url, version, dry_run=dry_run)


def apply_update(dependency: Dependency, version: str, dry_run: bool = False) -> ChangeSummary:
    """Write version into every source location of the dependency.

    Returns a summary with one child per source file.

    Raises:
        NoSourceLocations: If the dependency records no source files.
    """
    if not dependency.source_locations:
        raise NoSourceLocations(dependency.name)

    summary = ChangeSummary()
    for source_file in dependency.source_locations:
        summary.add_child(
            update_pin_in_source_file(dependency, version, source_file, dry_run=dry_run)
        )
    return summary


def update_dependency(
    dependency: Dependency, source: VersionSource, dry_run: bool = False
) -> ChangeSummary:
    """Plan one dependency and, if newer, write the new pin.

    Raises:
        NoSourceLocations: Before any lookup, if there is nowhere to write.
        Anything plan_update() or apply_update() raises.
    """
    if not dependency.source_locations:
        raise NoSourceLocations(dependency.name)

    decision = plan_update(dependency, source)
    if not decision.update_available:
        return ChangeSummary()
    return apply_update(dependency, decision.target_version, dry_run=dry_run)

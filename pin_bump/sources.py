"""Where newest versions come from.

A version source answers a single question: what is the newest released
version of the dependency with this identifier? The planner only relies on
that one call, so anything with a get_newest_version() method will do.
"""

from __future__ import annotations

import subprocess
from collections.abc import Mapping
from typing import Protocol

from .errors import IncomparableVersions, VersionDiscoveryFailed
from .log import logger
from .shell import git
from .versions import filter_version_strings, latest_of, parse_versions

TAG_REF_PREFIX = "refs/tags/"


class VersionSource(Protocol):
    def get_newest_version(self, identifier: str) -> str:
        """Return the newest version string for identifier.

        Raises:
            VersionDiscoveryFailed: If the source is unreachable or has no
                versions for identifier.
        """
        ...


def newest_version_tag(identifier: str, tags: list[str]) -> str:
    """Pick the newest version tag, returned exactly as it was named.

    Tags that are not versions ("latest", "nightly", ...) are ignored.

    Raises:
        VersionDiscoveryFailed: If no tag is a version, or the version tags
            mix semantic and date versions.
    """
    version_tags = filter_version_strings(tags)
    if not version_tags:
        raise VersionDiscoveryFailed(identifier, "no version tags found")

    versions = parse_versions(version_tags)
    try:
        latest = latest_of(versions)
    except IncomparableVersions as exc:
        raise VersionDiscoveryFailed(identifier, str(exc)) from exc
    return version_tags[versions.index(latest)]


class GitTagVersionSource:
    """Newest version from the tags of a remote git repository.

    Uses `git ls-remote`, so no clone is needed and any URL git can reach
    works.
    """

    def list_tags(self, url: str) -> list[str]:
        try:
            output = git("ls-remote", "--tags", "--refs", url)
        except subprocess.CalledProcessError as exc:
            reason = (exc.stderr or "").strip() or f"git exited with {exc.returncode}"
            raise VersionDiscoveryFailed(url, reason) from exc
        except FileNotFoundError as exc:
            raise VersionDiscoveryFailed(url, "git executable not found") from exc

        tags: list[str] = []
        for line in output.splitlines():
            _, _, ref = line.partition("\t")
            ref = ref.strip()
            if ref.startswith(TAG_REF_PREFIX):
                tags.append(ref[len(TAG_REF_PREFIX) :])
        return tags

    def get_newest_version(self, identifier: str) -> str:
        tags = self.list_tags(identifier)
        logger.debug(f"  {identifier}: {len(tags)} tags")
        newest = newest_version_tag(identifier, tags)
        logger.debug(f"  {identifier}: newest version is {newest}")
        return newest


class StaticVersionSource:
    """Newest versions from a fixed mapping of identifier → version."""

    def __init__(self, versions: Mapping[str, str]):
        self.versions = dict(versions)

    def get_newest_version(self, identifier: str) -> str:
        if identifier not in self.versions:
            raise VersionDiscoveryFailed(identifier, "unknown identifier")
        return self.versions[identifier]

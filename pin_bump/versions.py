"""Version parsing, ordering and bumping utilities.

Two kinds of version are recognised:
- semantic: "1.2.3", "v1.2.3" or "V1.2.3" (always three numeric components)
- date: "20231112_123456" (YYYYMMDD_HHMMSS)

Anything else (branch names, commit hashes) is not a version. Use
is_version_string() to ask; parse_version() raises for non-versions.
"""

from __future__ import annotations

import enum
import re
from collections.abc import Iterable, Sequence
from datetime import datetime

from .errors import EmptyInput, IncomparableVersions, InvalidVersionFormat
from .models import DATE_VERSION_PATTERN, DateVersion, SemanticVersion, Version

SEMANTIC_VERSION_RE = re.compile(r"^[vV]?([0-9]+)\.([0-9]+)\.([0-9]+)$")
DATE_VERSION_RE = re.compile(DATE_VERSION_PATTERN)
DATE_VERSION_FORMAT = "%Y%m%d_%H%M%S"

BUMP_KINDS = ("patch", "minor", "major")


class VersionKind(enum.Enum):
    SEMANTIC = "semantic"
    DATE = "date"
    INVALID = "invalid"


def classify(raw: str) -> VersionKind:
    """Tell which kind of version a string is, if any.

    The whole string must match; surrounding whitespace makes it invalid.
    """
    if DATE_VERSION_RE.fullmatch(raw):
        return VersionKind.DATE
    if SEMANTIC_VERSION_RE.fullmatch(raw):
        return VersionKind.SEMANTIC
    return VersionKind.INVALID


def is_version_string(raw: str) -> bool:
    return classify(raw) is not VersionKind.INVALID


def parse_version(raw: str) -> Version:
    """Parse a version string into a SemanticVersion or DateVersion.

    The leading "v"/"V" of semantic versions is dropped; date stamps are
    kept verbatim.

    Examples:
        "v1.2.3" → SemanticVersion(1, 2, 3)
        "1.2.3" → SemanticVersion(1, 2, 3)
        "20231112_123456" → DateVersion("20231112_123456")

    Raises:
        InvalidVersionFormat: If raw is neither kind of version.
    """
    kind = classify(raw)
    if kind is VersionKind.DATE:
        return DateVersion(stamp=raw)
    if kind is VersionKind.SEMANTIC:
        major, minor, patch = SEMANTIC_VERSION_RE.fullmatch(raw).groups()
        return SemanticVersion(major=int(major), minor=int(minor), patch=int(patch))
    raise InvalidVersionFormat(raw)


def parse_versions(raw_versions: Iterable[str]) -> list[Version]:
    return [parse_version(raw) for raw in raw_versions]


def filter_version_strings(candidates: Iterable[str]) -> list[str]:
    """Keep only the strings that are versions, preserving order.

    Useful for tag lists that mix release tags with other names.
    """
    return [c for c in candidates if is_version_string(c)]


def is_newer_than(a: Version, b: Version) -> bool:
    """Return True if a is strictly newer than b.

    Raises:
        IncomparableVersions: If a and b are different kinds of version.
    """
    return a.is_newer_than(b)


def newer_of(a: Version, b: Version) -> Version:
    """Return a if it is newer than b, otherwise b."""
    return a if is_newer_than(a, b) else b


def latest_of(versions: Sequence[Version]) -> Version:
    """Return the newest version in a sequence.

    Scans once, keeping the current maximum. On ties the element seen first
    wins, so "1.0.0" and "v1.0.0" resolve to whichever came first.

    Raises:
        EmptyInput: If versions is empty.
        IncomparableVersions: If versions mixes semantic and date versions.
    """
    if not versions:
        raise EmptyInput("versions")

    latest = versions[0]
    for candidate in versions[1:]:
        if is_newer_than(candidate, latest):
            latest = candidate
    return latest


def sort_versions(versions: Iterable[Version]) -> list[Version]:
    """Sort versions oldest first.

    Raises:
        IncomparableVersions: If versions mixes semantic and date versions.
    """
    versions = list(versions)
    kinds = {type(v) for v in versions}
    if len(kinds) > 1:
        first = versions[0]
        other = next(v for v in versions if not isinstance(v, type(first)))
        raise IncomparableVersions(first, other)
    return sorted(versions, key=lambda v: v.sort_key())


def sort_version_strings(raw_versions: Iterable[str]) -> list[str]:
    """Sort version strings oldest first, returning canonical renderings.

    Example:
        ["0.1.2", "v0.0.0"] → ["v0.0.0", "v0.1.2"]
    """
    return [v.render() for v in sort_versions(parse_versions(raw_versions))]


def next_version(version: Version, kind: str = "patch") -> SemanticVersion:
    """Return the next semantic version of the given kind.

    Examples:
        ("v1.2.3", "patch") → "v1.2.4"
        ("v1.2.3", "minor") → "v1.3.0"
        ("v1.2.3", "major") → "v2.0.0"

    Raises:
        UnsupportedOperation: For date versions or an unknown kind.
    """
    return version.next(kind)


def new_date_version(now: datetime | None = None) -> DateVersion:
    """Create a date version stamped with now (default: current local time)."""
    now = now or datetime.now()
    return DateVersion(stamp=now.strftime(DATE_VERSION_FORMAT))

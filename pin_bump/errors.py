"""Exception hierarchy for pin-bump.

Every error carries the identifier or version string that triggered it, both
as an attribute and in its message, so batch runs can report failures per
dependency.
"""

from __future__ import annotations


class PinBumpError(Exception):
    """Base exception for all pin-bump errors."""


class InvalidVersionFormat(PinBumpError, ValueError):
    """Raised when a string is neither a semantic nor a date version."""

    def __init__(self, version_string: str):
        self.version_string = version_string
        super().__init__(
            f"Invalid version format: '{version_string}'. "
            "Expected [v]MAJOR.MINOR.PATCH or YYYYMMDD_HHMMSS"
        )


class IncomparableVersions(PinBumpError):
    """Raised when comparing a semantic version with a date version."""

    def __init__(self, first: object, second: object):
        self.first = first
        self.second = second
        super().__init__(f"Non comparable versions '{first}' and '{second}'")


class DataInconsistency(IncomparableVersions):
    """Recorded pin and discovered target are different kinds of version."""

    def __init__(self, name: str, current: object, target: object):
        self.name = name
        super().__init__(current, target)
        self.args = (
            f"Dependency '{name}' is pinned to '{current}' but the newest "
            f"version '{target}' is of a different kind",
        )


class EmptyInput(PinBumpError, ValueError):
    """Raised when an operation needs at least one version."""

    def __init__(self, what: str = "versions"):
        self.what = what
        super().__init__(f"Unable to find latest version, '{what}' is empty")


class UnsupportedOperation(PinBumpError):
    """Raised when an operation is not defined for a version kind."""


class VersionDiscoveryFailed(PinBumpError):
    """Raised when the newest version of a dependency can't be determined."""

    def __init__(self, identifier: str, reason: str):
        self.identifier = identifier
        self.reason = reason
        super().__init__(f"Unable to get newest version of '{identifier}': {reason}")


class RepoNotFound(PinBumpError, KeyError):
    """Raised when a config has no entry for a repository URL."""

    def __init__(self, repo_url: str):
        self.repo_url = repo_url
        super().__init__(repo_url)

    def __str__(self) -> str:
        return f"No pre-commit repo '{self.repo_url}' found"


class AnchorNotFound(PinBumpError):
    """Raised when the line to patch after can't be located."""

    def __init__(self, anchor: str, reason: str = "not found"):
        self.anchor = anchor
        super().__init__(f"Anchor line '{anchor}' {reason}")


class AmbiguousAnchor(PinBumpError):
    """Raised when the anchor line occurs more than once."""

    def __init__(self, anchor: str, count: int):
        self.anchor = anchor
        self.count = count
        super().__init__(f"Anchor line '{anchor}' occurs {count} times")


class InvalidConfig(PinBumpError):
    """Raised when pre-commit config text can't be loaded."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Failed to load pre-commit config '{source}': {reason}")


class NoSourceLocations(PinBumpError):
    """Raised when a dependency has nowhere to write its pin."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"No source files set for git repository dependency '{name}'")


class InvalidSettings(PinBumpError):
    """Raised when the [tool.pin-bump] table can't be loaded."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Invalid [tool.pin-bump] settings in '{source}': {reason}")

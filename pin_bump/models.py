"""Data models for pin-bump.

These Pydantic models represent the core data structures used throughout
the update pipeline: the two kinds of version, the change summary tree,
dependency descriptors and the pre-commit config document.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any, Literal, Union

import semver
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import IncomparableVersions, RepoNotFound, UnsupportedOperation

DATE_VERSION_PATTERN = r"^[0-9]{8}_[0-9]{6}$"
DEFAULT_CONFIG_FILE_NAME = ".pre-commit-config.yaml"


class SemanticVersion(BaseModel):
    """A major.minor.patch version.

    Stored without the leading "v"; rendered with it.

    Attributes:
        major: Major component (>= 0).
        minor: Minor component (>= 0).
        patch: Patch component (>= 0).
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["semantic"] = "semantic"
    major: int = Field(ge=0)
    minor: int = Field(ge=0)
    patch: int = Field(ge=0)

    def render(self) -> str:
        """Canonical string form, e.g. "v1.2.3"."""
        return f"v{self.render_without_v()}"

    def render_without_v(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    def sort_key(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    def is_newer_than(self, other: Version) -> bool:
        """Compare (major, minor, patch) against another semantic version.

        Raises:
            IncomparableVersions: If other is a DateVersion.
        """
        if not isinstance(other, SemanticVersion):
            raise IncomparableVersions(self, other)
        return self._as_semver() > other._as_semver()

    def next(self, kind: str) -> SemanticVersion:
        """Return the next version of the given kind.

        - "patch": 1.2.3 → 1.2.4
        - "minor": 1.2.3 → 1.3.0
        - "major": 1.2.3 → 2.0.0
        """
        current = self._as_semver()
        bumps = {
            "patch": current.bump_patch,
            "minor": current.bump_minor,
            "major": current.bump_major,
        }
        if kind not in bumps:
            raise UnsupportedOperation(f"Unknown version kind '{kind}'")
        bumped = bumps[kind]()
        return SemanticVersion(major=bumped.major, minor=bumped.minor, patch=bumped.patch)

    def _as_semver(self) -> semver.Version:
        return semver.Version(self.major, self.minor, self.patch)

    def __str__(self) -> str:
        return self.render()


class DateVersion(BaseModel):
    """A date-stamped version of the form YYYYMMDD_HHMMSS.

    Ordering is plain string comparison of the stamp. That only matches
    chronological order because the format is fixed width and zero padded.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["date"] = "date"
    stamp: str = Field(pattern=DATE_VERSION_PATTERN)

    def render(self) -> str:
        return self.stamp

    def sort_key(self) -> str:
        return self.stamp

    def is_newer_than(self, other: Version) -> bool:
        """Compare stamps.

        Raises:
            IncomparableVersions: If other is a SemanticVersion.
        """
        if not isinstance(other, DateVersion):
            raise IncomparableVersions(self, other)
        return self.stamp > other.stamp

    def next(self, kind: str) -> SemanticVersion:
        raise UnsupportedOperation(
            f"No next '{kind}' version defined for date version '{self.stamp}'"
        )

    def __str__(self) -> str:
        return self.render()


Version = Annotated[Union[SemanticVersion, DateVersion], Field(discriminator="kind")]


class ChangeSummary(BaseModel):
    """Reports whether an operation changed its target.

    Summaries nest: a node counts as changed if it recorded a change itself
    or if any of its children did.

    Attributes:
        number_of_changes: Changes recorded directly on this node.
        children: Summaries of nested operations.
    """

    number_of_changes: int = Field(default=0, ge=0)
    children: list[ChangeSummary] = Field(default_factory=list)

    @classmethod
    def of(cls, changed: bool) -> ChangeSummary:
        return cls(number_of_changes=1 if changed else 0)

    @property
    def is_changed(self) -> bool:
        if self.number_of_changes != 0:
            return True
        return any(child.is_changed for child in self.children)

    def set_changed(self, changed: bool) -> None:
        if changed:
            if self.number_of_changes == 0:
                self.number_of_changes = 1
        else:
            self.number_of_changes = 0

    def add_child(self, child: ChangeSummary) -> None:
        self.children.append(child)

    def total_changes(self) -> int:
        """Sum of changes over the whole tree."""
        return self.number_of_changes + sum(c.total_changes() for c in self.children)


class Dependency(BaseModel):
    """A pinned dependency on another git repository.

    Attributes:
        url: Repository URL; also used as the dependency name.
        current_version: The pin as currently recorded, None if never pinned.
        target_version_override: If set, used as the newest version instead
            of asking a version source.
        source_locations: Files that record the pin.
    """

    url: str = Field(min_length=1)
    current_version: str | None = None
    target_version_override: str | None = None
    source_locations: list[Path] = Field(default_factory=list)

    @property
    def name(self) -> str:
        return self.url

    def add_source_location(self, path: Path) -> None:
        self.source_locations.append(path)


class UpdateDecision(BaseModel):
    """Outcome of planning one dependency.

    Attributes:
        update_available: True if the pin should move.
        target_version: Pin value to write, exactly as it should appear.
    """

    update_available: bool
    target_version: str


def _as_str(value: Any) -> Any:
    # YAML reads `rev: 1.0` as a float
    if value is None or isinstance(value, str):
        return value
    return str(value)


class PreCommitHook(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Any:
        return _as_str(value)


class PreCommitRepo(BaseModel):
    """One entry of the `repos` list.

    Keys other than repo/rev/hooks are kept and written back after them.
    """

    model_config = ConfigDict(extra="allow")

    repo: str
    rev: str | None = None
    hooks: list[PreCommitHook] = Field(default_factory=list)

    @field_validator("repo", "rev", mode="before")
    @classmethod
    def coerce_strings(cls, value: Any) -> Any:
        return _as_str(value)

    @property
    def is_remote(self) -> bool:
        return self.repo not in ("local", "meta")


class PreCommitConfig(BaseModel):
    """A parsed .pre-commit-config.yaml document."""

    model_config = ConfigDict(extra="allow")

    repos: list[PreCommitRepo] = Field(default_factory=list)

    def get_repo(self, repo_url: str) -> PreCommitRepo:
        for repo in self.repos:
            if repo.repo == repo_url:
                return repo
        raise RepoNotFound(repo_url)

    def set_pin(self, repo_url: str, new_rev: str) -> ChangeSummary:
        """Set the rev of the entry for repo_url.

        Idempotent: returns an unchanged summary if rev already matches.

        Raises:
            RepoNotFound: If no entry has this repo URL.
        """
        repo = self.get_repo(repo_url)
        if repo.rev == new_rev:
            return ChangeSummary.of(False)
        repo.rev = new_rev
        return ChangeSummary.of(True)


class UpdateReport(BaseModel):
    """Result of updating every dependency in one config file.

    Attributes:
        summary: One child summary per dependency that was processed.
        updated: Map of dependency name → version it was moved to.
        failures: Map of dependency name → error message.
    """

    summary: ChangeSummary = Field(default_factory=ChangeSummary)
    updated: dict[str, str] = Field(default_factory=dict)
    failures: dict[str, str] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures


class CheckReport(BaseModel):
    """Result of planning (not writing) every dependency in a config file."""

    decisions: dict[str, UpdateDecision] = Field(default_factory=dict)
    failures: dict[str, str] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def available(self) -> dict[str, str]:
        return {
            name: d.target_version for name, d in self.decisions.items() if d.update_available
        }


class Settings(BaseModel):
    """The [tool.pin-bump] table of pyproject.toml.

    Attributes:
        config_file: Pre-commit config to update (key: config-file).
        targets: Map of repo URL → version to pin instead of the newest.
        exclude: Repo URLs to leave alone.
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    config_file: str = Field(default=DEFAULT_CONFIG_FILE_NAME, alias="config-file")
    targets: dict[str, str] = Field(default_factory=dict)
    exclude: list[str] = Field(default_factory=list)

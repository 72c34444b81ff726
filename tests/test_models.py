"""Tests for pin_bump.models."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import TypeAdapter, ValidationError

from pin_bump.errors import IncomparableVersions, RepoNotFound
from pin_bump.models import (
    ChangeSummary,
    CheckReport,
    DateVersion,
    Dependency,
    PreCommitConfig,
    PreCommitRepo,
    SemanticVersion,
    Settings,
    UpdateDecision,
    UpdateReport,
    Version,
)


class TestSemanticVersion:
    def test_negative_component_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SemanticVersion(major=-1, minor=0, patch=0)

    def test_frozen(self) -> None:
        v = SemanticVersion(major=1, minor=2, patch=3)
        with pytest.raises(ValidationError):
            v.major = 2  # type: ignore[misc]

    def test_str_is_render(self) -> None:
        assert str(SemanticVersion(major=1, minor=2, patch=3)) == "v1.2.3"

    def test_not_comparable_to_date(self) -> None:
        with pytest.raises(IncomparableVersions) as exc_info:
            SemanticVersion(major=1, minor=0, patch=0).is_newer_than(
                DateVersion(stamp="20231112_123456")
            )
        assert "v1.0.0" in str(exc_info.value)
        assert "20231112_123456" in str(exc_info.value)


class TestDateVersion:
    def test_pattern_enforced(self) -> None:
        with pytest.raises(ValidationError):
            DateVersion(stamp="20231112_12345")


class TestVersionUnion:
    def test_discriminated_by_kind(self) -> None:
        adapter = TypeAdapter(Version)
        assert isinstance(
            adapter.validate_python({"kind": "semantic", "major": 1, "minor": 0, "patch": 0}),
            SemanticVersion,
        )
        assert isinstance(
            adapter.validate_python({"kind": "date", "stamp": "20231112_123456"}),
            DateVersion,
        )


class TestChangeSummary:
    def test_default_unchanged(self) -> None:
        assert not ChangeSummary().is_changed

    def test_own_changes(self) -> None:
        assert ChangeSummary(number_of_changes=2).is_changed

    def test_changed_child_marks_parent(self) -> None:
        root = ChangeSummary()
        root.add_child(ChangeSummary.of(False))
        root.add_child(ChangeSummary.of(True))
        assert root.is_changed

    def test_deep_nesting(self) -> None:
        leaf = ChangeSummary.of(True)
        middle = ChangeSummary(children=[ChangeSummary(), leaf])
        root = ChangeSummary(children=[middle])
        assert root.is_changed

    def test_unchanged_children(self) -> None:
        root = ChangeSummary(children=[ChangeSummary(), ChangeSummary(children=[ChangeSummary()])])
        assert not root.is_changed

    def test_set_changed(self) -> None:
        summary = ChangeSummary()
        summary.set_changed(True)
        assert summary.number_of_changes == 1
        summary.set_changed(False)
        assert summary.number_of_changes == 0

    def test_set_changed_keeps_existing_count(self) -> None:
        summary = ChangeSummary(number_of_changes=3)
        summary.set_changed(True)
        assert summary.number_of_changes == 3

    def test_total_changes(self) -> None:
        root = ChangeSummary(
            number_of_changes=1,
            children=[ChangeSummary.of(True), ChangeSummary(number_of_changes=2)],
        )
        assert root.total_changes() == 4

    def test_negative_count_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ChangeSummary(number_of_changes=-1)


class TestDependency:
    def test_name_is_url(self) -> None:
        dep = Dependency(url="https://github.com/psf/black")
        assert dep.name == "https://github.com/psf/black"

    def test_empty_url_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Dependency(url="")

    def test_add_source_location(self) -> None:
        dep = Dependency(url="https://example.com/repo")
        dep.add_source_location(Path("a.yaml"))
        assert dep.source_locations == [Path("a.yaml")]


class TestPreCommitConfig:
    def _config(self) -> PreCommitConfig:
        return PreCommitConfig(
            repos=[
                PreCommitRepo(repo="https://github.com/psf/black", rev="22.1.0"),
                PreCommitRepo(repo="local"),
            ]
        )

    def test_set_pin_changes(self) -> None:
        config = self._config()
        summary = config.set_pin("https://github.com/psf/black", "24.1.0")
        assert summary.is_changed
        assert config.get_repo("https://github.com/psf/black").rev == "24.1.0"

    def test_set_pin_is_idempotent(self) -> None:
        config = self._config()
        first = config.set_pin("https://github.com/psf/black", "24.1.0")
        second = config.set_pin("https://github.com/psf/black", "24.1.0")
        assert first.is_changed
        assert not second.is_changed

    def test_set_pin_unknown_repo(self) -> None:
        with pytest.raises(RepoNotFound) as exc_info:
            self._config().set_pin("https://example.com/missing", "v1.0.0")
        assert exc_info.value.repo_url == "https://example.com/missing"
        assert "https://example.com/missing" in str(exc_info.value)

    def test_local_and_meta_are_not_remote(self) -> None:
        assert not PreCommitRepo(repo="local").is_remote
        assert not PreCommitRepo(repo="meta").is_remote
        assert PreCommitRepo(repo="https://github.com/psf/black").is_remote

    def test_numeric_rev_coerced(self) -> None:
        repo = PreCommitRepo.model_validate({"repo": "https://x", "rev": 1.0})
        assert repo.rev == "1.0"

    def test_extra_keys_kept(self) -> None:
        config = PreCommitConfig.model_validate(
            {"fail_fast": True, "repos": [{"repo": "local", "hooks": [{"id": "x", "name": "X"}]}]}
        )
        dumped = config.model_dump(exclude_none=True)
        assert dumped["fail_fast"] is True
        assert dumped["repos"][0]["hooks"][0]["name"] == "X"


class TestReports:
    def test_update_report_ok(self) -> None:
        report = UpdateReport()
        assert report.ok
        report.failures["x"] = "boom"
        assert not report.ok

    def test_check_report_available(self) -> None:
        report = CheckReport(
            decisions={
                "a": UpdateDecision(update_available=True, target_version="v2.0.0"),
                "b": UpdateDecision(update_available=False, target_version="v1.0.0"),
            }
        )
        assert report.available == {"a": "v2.0.0"}
        assert report.ok


class TestSettings:
    def test_defaults(self) -> None:
        settings = Settings()
        assert settings.config_file == ".pre-commit-config.yaml"
        assert settings.targets == {}
        assert settings.exclude == []

    def test_alias(self) -> None:
        assert Settings.model_validate({"config-file": "ci.yaml"}).config_file == "ci.yaml"

    def test_unknown_key_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings.model_validate({"bogus": 1})

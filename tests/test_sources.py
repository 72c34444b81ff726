"""Tests for pin_bump.sources."""

from __future__ import annotations

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from pin_bump.errors import VersionDiscoveryFailed
from pin_bump.sources import GitTagVersionSource, StaticVersionSource, newest_version_tag

LS_REMOTE_OUTPUT = """\
1111111111111111111111111111111111111111\trefs/tags/22.1.0
2222222222222222222222222222222222222222\trefs/tags/22.12.0
3333333333333333333333333333333333333333\trefs/tags/22.3.0
4444444444444444444444444444444444444444\trefs/tags/latest
5555555555555555555555555555555555555555\trefs/tags/24.1.0a1"""


class TestNewestVersionTag:
    def test_returns_tag_as_named(self) -> None:
        assert newest_version_tag("x", ["1.0.0", "2.0.0", "1.5.0"]) == "2.0.0"
        assert newest_version_tag("x", ["v1.0.0", "v2.0.0"]) == "v2.0.0"

    def test_numeric_ordering(self) -> None:
        assert newest_version_tag("x", ["v0.0.9", "v0.0.11", "v0.0.10"]) == "v0.0.11"

    def test_ignores_non_versions(self) -> None:
        assert newest_version_tag("x", ["nightly", "v1.0.0", "stable"]) == "v1.0.0"

    def test_no_versions(self) -> None:
        with pytest.raises(VersionDiscoveryFailed) as exc_info:
            newest_version_tag("https://x", ["main", "latest"])
        assert exc_info.value.identifier == "https://x"

    def test_mixed_kinds(self) -> None:
        with pytest.raises(VersionDiscoveryFailed):
            newest_version_tag("x", ["v1.0.0", "20231112_123456"])


class TestGitTagVersionSource:
    @patch("pin_bump.sources.git")
    def test_list_tags(self, mock_git: MagicMock) -> None:
        mock_git.return_value = LS_REMOTE_OUTPUT
        tags = GitTagVersionSource().list_tags("https://github.com/psf/black")
        assert tags == ["22.1.0", "22.12.0", "22.3.0", "latest", "24.1.0a1"]
        mock_git.assert_called_once_with(
            "ls-remote", "--tags", "--refs", "https://github.com/psf/black"
        )

    @patch("pin_bump.sources.git")
    def test_list_tags_crlf(self, mock_git: MagicMock) -> None:
        mock_git.return_value = "1111\trefs/tags/v1.0.0\r\n2222\trefs/tags/v1.1.0"
        assert GitTagVersionSource().list_tags("https://x") == ["v1.0.0", "v1.1.0"]

    @patch("pin_bump.sources.git")
    def test_newest(self, mock_git: MagicMock) -> None:
        mock_git.return_value = LS_REMOTE_OUTPUT
        assert GitTagVersionSource().get_newest_version("https://x") == "22.12.0"

    @patch("pin_bump.sources.git")
    def test_no_tags(self, mock_git: MagicMock) -> None:
        mock_git.return_value = ""
        with pytest.raises(VersionDiscoveryFailed):
            GitTagVersionSource().get_newest_version("https://x")

    @patch("pin_bump.sources.git")
    def test_git_failure(self, mock_git: MagicMock) -> None:
        mock_git.side_effect = subprocess.CalledProcessError(
            128, ["git", "ls-remote"], stderr="fatal: repository not found\n"
        )
        with pytest.raises(VersionDiscoveryFailed) as exc_info:
            GitTagVersionSource().get_newest_version("https://x")
        assert exc_info.value.reason == "fatal: repository not found"

    @patch("pin_bump.sources.git")
    def test_git_failure_without_stderr(self, mock_git: MagicMock) -> None:
        mock_git.side_effect = subprocess.CalledProcessError(2, ["git", "ls-remote"])
        with pytest.raises(VersionDiscoveryFailed) as exc_info:
            GitTagVersionSource().list_tags("https://x")
        assert exc_info.value.reason == "git exited with 2"

    @patch("pin_bump.sources.git")
    def test_git_missing(self, mock_git: MagicMock) -> None:
        mock_git.side_effect = FileNotFoundError("git")
        with pytest.raises(VersionDiscoveryFailed):
            GitTagVersionSource().list_tags("https://x")


class TestStaticVersionSource:
    def test_lookup(self) -> None:
        assert StaticVersionSource({"a": "v1.0.0"}).get_newest_version("a") == "v1.0.0"

    def test_unknown(self) -> None:
        with pytest.raises(VersionDiscoveryFailed):
            StaticVersionSource({}).get_newest_version("a")

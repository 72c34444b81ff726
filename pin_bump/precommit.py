"""Reading and rewriting pre-commit config files.

Two ways to move a pin are offered:

- structured: parse the YAML into a PreCommitConfig, change the entry with
  apply_pin(), and serialize it again. Simple, but comments and formatting
  of the original file are lost.
- line-oriented: set_pin_in_text() finds the `- repo: <url>` line and
  rewrites (or, for an unpinned entry, inserts) its `rev:` line. Everything
  else in the file is left alone, which is why PreCommitConfigFile uses it
  for writing.
"""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import ValidationError

from .errors import AmbiguousAnchor, AnchorNotFound, InvalidConfig
from .log import logger
from .models import DEFAULT_CONFIG_FILE_NAME, ChangeSummary, Dependency, PreCommitConfig


def parse_config(text: str, source: str = "<string>") -> PreCommitConfig:
    """Parse pre-commit config YAML.

    Args:
        text: YAML content.
        source: Where the text came from, used in error messages.

    Raises:
        InvalidConfig: If the text is not YAML, not a mapping, has no
            `repos` key, or its entries have the wrong shape.
    """
    if not text.strip():
        raise InvalidConfig(source, "content is empty")
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise InvalidConfig(source, str(exc)) from exc

    if not isinstance(data, dict):
        raise InvalidConfig(source, "top level is not a mapping")
    if "repos" not in data:
        raise InvalidConfig(source, "no 'repos' key")

    try:
        return PreCommitConfig.model_validate(data)
    except ValidationError as exc:
        raise InvalidConfig(source, str(exc)) from exc


def serialize_config(config: PreCommitConfig) -> str:
    """Dump a config back to YAML, keeping repo, rev, hooks in that order."""
    data = config.model_dump(mode="json", exclude_none=True)
    return yaml.safe_dump(data, sort_keys=False, default_flow_style=False)


def apply_pin(config: PreCommitConfig, repo_url: str, new_version: str) -> ChangeSummary:
    """Set the pinned rev of repo_url in a parsed config.

    Raises:
        RepoNotFound: If the config has no entry for repo_url.
    """
    return config.set_pin(repo_url, new_version)


def _normalize(line: str) -> str:
    # "-   repo: x" and "- repo: x" are the same anchor
    return " ".join(line.split())


def _find_anchor(lines: list[str], anchor: str) -> int:
    wanted = _normalize(anchor)
    matches = [i for i, line in enumerate(lines) if _normalize(line) == wanted]
    if not matches:
        raise AnchorNotFound(anchor)
    if len(matches) > 1:
        raise AmbiguousAnchor(anchor, len(matches))
    return matches[0]


def _line_ending(line: str) -> str:
    return line[len(line.rstrip("\r\n")) :]


def _insert_after(lines: list[str], index: int, new_line: str) -> str:
    ending = _line_ending(lines[index])
    if ending:
        lines.insert(index + 1, new_line + ending)
    else:
        # anchor is a last line without terminator
        lines[index] += "\n"
        lines.insert(index + 1, new_line)
    return "".join(lines)


def replace_line_after_anchor(
    text: str, anchor: str, replacement: str
) -> tuple[str, ChangeSummary]:
    """Replace the line following the single line equal to anchor.

    Lines are compared with surrounding whitespace stripped and inner runs
    of whitespace collapsed. The replaced line keeps its original line
    ending. If the anchor is the last line, replacement is appended after
    it instead.

    Returns:
        The new text and a summary that is changed unless the line already
        read exactly replacement.

    Raises:
        AnchorNotFound: If no line matches.
        AmbiguousAnchor: If more than one line matches.
    """
    lines = text.splitlines(keepends=True)
    anchor_index = _find_anchor(lines, anchor)
    index = anchor_index + 1
    if index >= len(lines):
        return _insert_after(lines, anchor_index, replacement), ChangeSummary.of(True)

    old = lines[index]
    body = old.rstrip("\r\n")
    if body == replacement:
        return text, ChangeSummary.of(False)

    lines[index] = replacement + old[len(body) :]
    return "".join(lines), ChangeSummary.of(True)


def _find_rev_line(lines: list[str], anchor_index: int, indent: str) -> int | None:
    """Index of the entry's own `rev:` line, None if the entry has none.

    The entry ends at the first non-blank line indented no deeper than the
    `-` of the anchor line.
    """
    anchor_line = lines[anchor_index]
    dash_column = len(anchor_line) - len(anchor_line.lstrip())
    for index in range(anchor_index + 1, len(lines)):
        line = lines[index]
        if not line.strip():
            continue
        if len(line) - len(line.lstrip()) <= dash_column:
            return None
        if line.startswith(f"{indent}rev:"):
            return index
    return None


def set_pin_in_text(text: str, repo_url: str, new_rev: str) -> tuple[str, ChangeSummary]:
    """Set the rev line of the `- repo: <repo_url>` entry.

    The rev line is written as `rev: "<new_rev>"`, indented to line up with
    the `repo:` key above it, so a top-level entry gets `  rev: "<new_rev>"`.
    An existing rev line of the entry is replaced in place, keeping its line
    ending. An entry without one (never pinned) gets the rev line inserted
    right after the repo line, so its hooks are kept.

    Raises:
        AnchorNotFound: If the repo line is missing.
        AmbiguousAnchor: If the repo line occurs more than once.
    """
    anchor = f"- repo: {repo_url}"
    lines = text.splitlines(keepends=True)
    anchor_index = _find_anchor(lines, anchor)
    indent = " " * lines[anchor_index].index("repo:")
    rev_line = f'{indent}rev: "{new_rev}"'

    rev_index = _find_rev_line(lines, anchor_index, indent)
    if rev_index is None:
        return _insert_after(lines, anchor_index, rev_line), ChangeSummary.of(True)

    old = lines[rev_index]
    if old.rstrip("\r\n") == rev_line:
        return text, ChangeSummary.of(False)
    lines[rev_index] = rev_line + _line_ending(old)
    return "".join(lines), ChangeSummary.of(True)


class PreCommitConfigFile:
    """A pre-commit config file on disk."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    @classmethod
    def in_directory(cls, directory: Path | str) -> PreCommitConfigFile:
        return cls(Path(directory) / DEFAULT_CONFIG_FILE_NAME)

    def read_text(self) -> str:
        # newline="" keeps CRLF files CRLF
        with self.path.open(encoding="utf-8", newline="") as fh:
            return fh.read()

    def write_text(self, content: str) -> None:
        with self.path.open("w", encoding="utf-8", newline="") as fh:
            fh.write(content)

    def get_config(self) -> PreCommitConfig:
        """Read and parse the file.

        Raises:
            InvalidConfig: If the file is not UTF-8 or not a pre-commit config.
        """
        try:
            text = self.read_text()
        except UnicodeDecodeError as exc:
            raise InvalidConfig(str(self.path), f"not valid UTF-8 ({exc.reason})") from exc
        return parse_config(text, str(self.path))

    def is_valid(self) -> bool:
        """True if the file parses as a pre-commit config.

        Only content problems count as invalid; a missing file still raises.
        """
        try:
            self.get_config()
        except InvalidConfig:
            return False
        return True

    def write_config(self, config: PreCommitConfig) -> None:
        """Overwrite the file with a serialized config.

        Comments and custom formatting are not preserved.
        """
        self.write_text(serialize_config(config))
        logger.info(f"Wrote content of pre-commit config file '{self.path}'.")

    def get_dependencies(self) -> list[Dependency]:
        """One Dependency per remote repo entry, sourced from this file.

        `local` and `meta` entries are not git repositories and are skipped.
        """
        return [
            Dependency(url=repo.repo, current_version=repo.rev, source_locations=[self.path])
            for repo in self.get_config().repos
            if repo.is_remote
        ]

    def set_pin(self, repo_url: str, new_rev: str, dry_run: bool = False) -> ChangeSummary:
        """Rewrite the pin of repo_url in this file.

        The file is read fresh on every call so pins written by earlier
        calls are kept.
        """
        new_text, summary = set_pin_in_text(self.read_text(), repo_url, new_rev)
        if summary.is_changed:
            if not dry_run:
                self.write_text(new_text)
            logger.info(f"Dependency '{repo_url}' updated to '{new_rev}' in '{self.path}'.")
        else:
            logger.info(f"Dependency '{repo_url}' already up to date in '{self.path}'.")
        return summary

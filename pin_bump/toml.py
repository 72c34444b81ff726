"""TOML reading utilities.

Settings live in the [tool.pin-bump] table of pyproject.toml. tomlkit is
used for parsing so the same document type is used here as anywhere a
pyproject.toml is edited.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import tomlkit
from pydantic import ValidationError
from tomlkit.exceptions import ParseError

from .errors import InvalidSettings
from .models import Settings

TOOL_NAME = "pin-bump"


def load_pyproject(path: Path) -> tomlkit.TOMLDocument:
    """Load and parse a pyproject.toml file."""
    return tomlkit.parse(path.read_text())


def get_tool_table(doc: tomlkit.TOMLDocument) -> dict[str, Any]:
    """Extract [tool.pin-bump] as plain Python values, {} when absent."""
    table = doc.get("tool", {}).get(TOOL_NAME, {})
    if hasattr(table, "unwrap"):
        return table.unwrap()
    return dict(table)


def load_settings(path: Path) -> Settings:
    """Read settings from a pyproject.toml.

    A missing file or a file without the table gives default settings.

    Raises:
        InvalidSettings: If the file is not TOML or the table has unknown
            keys or wrongly typed values.
    """
    if not path.exists():
        return Settings()

    try:
        doc = load_pyproject(path)
    except ParseError as exc:
        raise InvalidSettings(str(path), str(exc)) from exc

    try:
        return Settings.model_validate(get_tool_table(doc))
    except ValidationError as exc:
        raise InvalidSettings(str(path), str(exc)) from exc


def parse_target_options(entries: tuple[str, ...] | list[str]) -> dict[str, str]:
    """Turn repeated URL=VERSION options into a mapping.

    The split is on the last "=", so URLs containing "=" still work.
    Whitespace around either side is dropped.

    Raises:
        ValueError: If an entry has no "=" or an empty side.
    """
    targets: dict[str, str] = {}
    for entry in entries:
        url, sep, version = entry.rpartition("=")
        url, version = url.strip(), version.strip()
        if not sep or not url or not version:
            raise ValueError(f"Invalid target '{entry}', expected URL=VERSION")
        targets[url] = version
    return targets

"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from pin_bump.log import logger

SAMPLE_CONFIG = """\
# Managed by pin-bump
repos:
- repo: https://github.com/psf/black
  rev: "22.1.0"
  hooks:
  - id: black
- repo: https://github.com/pycqa/flake8
  rev: v5.0.4
  hooks:
  - id: flake8
    args: [--max-line-length=100]
- repo: local
  hooks:
  - id: pytest
    name: pytest
    entry: pytest
    language: system
"""


@pytest.fixture
def sample_config_text() -> str:
    """Pre-commit config text with two remote repos and one local repo."""
    return SAMPLE_CONFIG


@pytest.fixture
def tmp_config(tmp_path: Path) -> Path:
    """Write the sample config to a temporary .pre-commit-config.yaml."""
    config = tmp_path / ".pre-commit-config.yaml"
    config.write_text(SAMPLE_CONFIG)
    return config


@pytest.fixture(autouse=True)
def reset_logger():
    """Drop handlers added by configure_logging() so tests stay isolated."""
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

"""Fixtures for CLI tests.

Disables Rich console styling to ensure consistent output across environments.
"""

from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def disable_rich_colors(monkeypatch):
    """Rich help output differs between a TTY and CI; NO_COLOR keeps it plain."""
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.setenv("TERM", "dumb")

"""Pytest configuration and fixtures."""

from __future__ import annotations

import os

from typing import TYPE_CHECKING, Any

import pytest

from gridview.config import GridViewSettings, clear_settings
from gridview.context import RenderContext


if TYPE_CHECKING:
    from collections.abc import Generator


# =============================================================================
# Settings isolation
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_settings(
    tmp_path: Any, monkeypatch: pytest.MonkeyPatch
) -> Generator[None, None, None]:
    """Run each test without config files or GRIDVIEW_* environment variables."""
    for name in list(os.environ):
        if name.startswith("GRIDVIEW"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("APPDATA", str(tmp_path))
    clear_settings()
    yield
    clear_settings()


# =============================================================================
# Sample data
# =============================================================================


@pytest.fixture
def users() -> list[dict[str, Any]]:
    """Three user rows with mixed value types."""
    return [
        {"id": 1, "name": "Ann", "email": "ann@example.com", "active": True},
        {"id": 2, "name": "Bob", "email": "bob@example.com", "active": False},
        {"id": 3, "name": "<Cy>", "email": "cy@example.com", "active": True},
    ]


@pytest.fixture
def settings() -> GridViewSettings:
    """Fresh default settings."""
    return GridViewSettings()


@pytest.fixture
def context() -> RenderContext:
    """Context for a request to /users with no query parameters."""
    return RenderContext(path="/users")

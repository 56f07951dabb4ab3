"""Shared pytest fixtures."""

from __future__ import annotations

import os
import sys
from collections.abc import Iterator

import pytest

# Headless Linux runners have no display server; use Qt's offscreen platform.
_HEADLESS = sys.platform.startswith("linux") and not (
    os.environ.get("DISPLAY") or os.environ.get("WAYLAND_DISPLAY")
)
if _HEADLESS:
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture(scope="session")
def qapp() -> Iterator[object]:
    """The process-wide QApplication, created on first use."""
    from PyQt6.QtWidgets import QApplication

    yield QApplication.instance() or QApplication([])


@pytest.fixture(autouse=True)
def _close_windows(request: pytest.FixtureRequest) -> Iterator[None]:
    """Close every top-level window a Qt test left open."""
    yield
    if "qapp" not in request.fixturenames:
        return
    app = request.getfixturevalue("qapp")
    for widget in list(app.topLevelWidgets()):
        widget.close()
    app.processEvents()

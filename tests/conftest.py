# tests/conftest.py
"""Shared test fixtures.

Builds a resources directory on disk that mirrors the layout the server
expects:

    resources/
        border/          dom-node.html, style.css, control-image
        partial/         dom-node.html only
        empty-style/     all three files, style.css empty
        README.md        stray file, not a fixture
    dom-to-image.js
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
import structlog
from starlette.testclient import TestClient

from rendercheck.server.app import create_app
from rendercheck.server.config import FixtureConfig, HarnessConfig

BORDER_HTML = '<div class="box">Hello <b>world</b></div>'
BORDER_CSS = ".box { border: 2px solid red; width: 100px; }"
BORDER_CONTROL = "data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8z8BQDwAEhQGAhKmMIQAAAABJRU5ErkJggg=="
SCRIPT_SOURCE = "window.domtoimage = { toPng: function () {}, toJpeg: function () {}, toSvg: function () {} };\n"


def write_fixture(resources_dir: Path, name: str, files: dict[str, str]) -> Path:
    """Create fixture directory ``name`` holding ``files``."""
    fixture_dir = resources_dir / name
    fixture_dir.mkdir(parents=True)
    for file_name, content in files.items():
        (fixture_dir / file_name).write_text(content, encoding="utf-8")
    return fixture_dir


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    """Undo configure_logging() (called by the CLI callback and logging tests)."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    structlog.reset_defaults()


@pytest.fixture
def resources_dir(tmp_path: Path) -> Path:
    """Resources directory with a complete, a partial and an empty-style fixture."""
    resources = tmp_path / "resources"
    resources.mkdir()
    write_fixture(
        resources,
        "border",
        {"dom-node.html": BORDER_HTML, "style.css": BORDER_CSS, "control-image": BORDER_CONTROL},
    )
    write_fixture(resources, "partial", {"dom-node.html": "<p>partial</p>"})
    write_fixture(
        resources,
        "empty-style",
        {"dom-node.html": "<span>x</span>", "style.css": "", "control-image": BORDER_CONTROL},
    )
    (resources / "README.md").write_text("not a fixture", encoding="utf-8")
    return resources


@pytest.fixture
def script_file(tmp_path: Path) -> Path:
    """Stand-in for the rendering library script."""
    path = tmp_path / "dom-to-image.js"
    path.write_text(SCRIPT_SOURCE, encoding="utf-8")
    return path


@pytest.fixture
def fixture_config(resources_dir: Path, script_file: Path) -> FixtureConfig:
    return FixtureConfig(resources_dir=resources_dir, script_path=script_file)


@pytest.fixture
def config(fixture_config: FixtureConfig) -> HarnessConfig:
    """Harness config pointing at the temporary resources directory."""
    return HarnessConfig(fixtures=fixture_config)


@pytest.fixture
def client(config: HarnessConfig) -> TestClient:
    """Test client for the fixture viewer."""
    return TestClient(create_app(config))

# src/rendercheck/server/__init__.py
"""Fixture viewer server: serves DOM fixtures next to their control images.

The server provides:
- A test page per fixture (HTML fragment + style sheet + control image)
- The rendering library script the page loads
- A fixture picker listing every fixture directory

Usage:
    # CLI - Start server
    rendercheck serve --resources-dir=spec/resources --port=3000

    # In-process (tests)
    from starlette.testclient import TestClient
    client = TestClient(create_app(HarnessConfig()))
    client.get("/?resource=border")
"""

from rendercheck.server.app import FixtureServer, create_app
from rendercheck.server.config import (
    FixtureConfig,
    HarnessConfig,
    RenderConfig,
    RenderMethod,
    ServerConfig,
    load_config,
)
from rendercheck.server.fixtures import (
    Fixture,
    FixtureEntry,
    FixtureError,
    is_directory,
    list_fixtures,
    load_fixture,
    read_text,
)

__all__ = [
    "Fixture",
    "FixtureConfig",
    "FixtureEntry",
    "FixtureError",
    "FixtureServer",
    "HarnessConfig",
    "RenderConfig",
    "RenderMethod",
    "ServerConfig",
    "create_app",
    "is_directory",
    "list_fixtures",
    "load_config",
    "load_fixture",
    "read_text",
]

# src/rendercheck/server/app.py
"""Starlette ASGI application for the fixture viewer.

Routes:
- GET <script_url> (default /dom-to-image.js): the rendering library
- GET /?resource=<name>: test page for a fixture (empty state without one)
- GET /health: liveness and fixture count

Usage:
    from rendercheck.server.app import create_app, FixtureServer
    from rendercheck.server.config import HarnessConfig

    app = create_app(HarnessConfig())
"""

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import HTMLResponse, JSONResponse, Response
from starlette.routing import Route

from rendercheck.core.logging import get_logger, request_context
from rendercheck.server.config import HarnessConfig
from rendercheck.server.fixtures import FixtureError, list_fixtures, load_fixture, read_text
from rendercheck.server.pages import render_error_page, render_test_page

logger = get_logger(__name__)


class FixtureServer:
    """Fixture viewer server.

    Holds the frozen configuration and builds the Starlette application.
    Requests share no mutable state; each one reads the filesystem afresh
    so fixture edits show up on reload.
    """

    def __init__(self, config: HarnessConfig) -> None:
        self._config = config
        self._app = self._create_app()

    def _create_app(self) -> Starlette:
        """Create the Starlette application with all routes."""
        routes = [
            Route(self._config.render.script_url, self._script_endpoint, methods=["GET"]),
            Route("/health", self._health_endpoint, methods=["GET"]),
            Route("/", self._page_endpoint, methods=["GET"]),
        ]
        return Starlette(debug=False, routes=routes)

    @property
    def app(self) -> Starlette:
        """Get the Starlette ASGI application."""
        return self._app

    @property
    def config(self) -> HarnessConfig:
        return self._config

    # === Endpoint handlers ===

    async def _script_endpoint(self, request: Request) -> Response:
        """Handle GET <script_url>: serve the rendering library."""
        script_path = self._config.fixtures.script_path
        with request_context(route="script", script_path=str(script_path)):
            try:
                contents = read_text(script_path, self._config.fixtures.missing_placeholder)
            except OSError as e:
                logger.exception("script_read_failed")
                return JSONResponse(
                    {"error": type(e).__name__, "message": str(e), "path": str(script_path)},
                    status_code=500,
                )
        return Response(content=contents, media_type="application/javascript")

    async def _health_endpoint(self, request: Request) -> JSONResponse:
        """Handle GET /health."""
        resources_dir = self._config.fixtures.resources_dir
        try:
            count: int | None = len(list_fixtures(resources_dir))
        except OSError:
            count = None
        return JSONResponse(
            {
                "status": "healthy",
                "resources_dir": str(resources_dir),
                "fixtures": count,
            }
        )

    async def _page_endpoint(self, request: Request) -> HTMLResponse:
        """Handle GET /?resource=<name>.

        Filesystem failures and bad fixture names become an error page
        (still 200, this is a debugging aid). A missing fixture file is not
        a failure; it shows up as the placeholder text.
        """
        name = request.query_params.get("resource") or None
        with request_context(route="page", resource=name):
            try:
                fixtures = list_fixtures(self._config.fixtures.resources_dir)
                fixture = load_fixture(self._config.fixtures, name)
            except (OSError, FixtureError) as e:
                logger.exception("fixture_page_failed")
                return HTMLResponse(render_error_page(e, include_traceback=self._config.show_tracebacks))

            logger.info("fixture_page_served", fixtures=len(fixtures))
        return HTMLResponse(render_test_page(fixtures, fixture, self._config.render))


def create_app(config: HarnessConfig) -> Starlette:
    """Create a Starlette ASGI application from config.

    The FixtureServer is kept on ``app.state.server``.
    """
    server = FixtureServer(config)
    server.app.state.server = server
    return server.app

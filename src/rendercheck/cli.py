# src/rendercheck/cli.py
"""rendercheck Command Line Interface.

Starts the fixture viewer server and inspects its configuration.

Usage:
    rendercheck serve                                  # Start with defaults
    rendercheck serve --port=3001 --resources-dir=spec/resources
    rendercheck --json-logs serve --config=rendercheck.yaml
    rendercheck fixtures                               # List fixtures
    rendercheck show-config --format=json              # Effective config
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any

import pydantic
import typer
import yaml

from rendercheck import __version__
from rendercheck.server.config import HarnessConfig, load_config

app = typer.Typer(
    name="rendercheck",
    help="rendercheck: side-by-side visual checks for DOM-to-image rendering.",
    no_args_is_help=True,
)

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Path to YAML configuration file.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
    ),
]

ResourcesDirOption = Annotated[
    Path | None,
    typer.Option("--resources-dir", "-r", help="Directory containing one subdirectory per fixture."),
]


def _version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"rendercheck {__version__}")
        raise typer.Exit()


def _load_or_exit(config_file: Path | None, cli_overrides: dict[str, Any]) -> HarnessConfig:
    """Load configuration, turning configuration errors into exit code 1."""
    try:
        return load_config(config_file=config_file, cli_overrides=cli_overrides)
    except FileNotFoundError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1) from e
    except (pydantic.ValidationError, yaml.YAMLError, ValueError) as e:
        typer.secho(f"Configuration error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1) from e


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose/debug logging."),
    ] = False,
    json_logs: Annotated[
        bool,
        typer.Option("--json-logs", help="Output structured JSON logs (for machine processing)."),
    ] = False,
) -> None:
    """rendercheck: side-by-side visual checks for DOM-to-image rendering."""
    from rendercheck.core.logging import configure_logging

    configure_logging(json_output=json_logs, level="DEBUG" if verbose else "INFO")


@app.command()
def serve(
    config_file: ConfigOption = None,
    host: Annotated[
        str | None,
        typer.Option("--host", "-h", help="Host address to bind to."),
    ] = None,
    port: Annotated[
        int | None,
        typer.Option("--port", "-P", help="Port to listen on.", min=1, max=65535),
    ] = None,
    resources_dir: ResourcesDirOption = None,
    script: Annotated[
        Path | None,
        typer.Option("--script", "-s", help="Rendering library script to serve."),
    ] = None,
) -> None:
    """Start the fixture viewer server.

    Configuration precedence (highest to lowest):
    1. Command-line flags
    2. Config file (--config)
    3. Built-in defaults

    Examples:

        rendercheck serve
        rendercheck serve --port=3001
        rendercheck serve --resources-dir=spec/resources --script=dist/dom-to-image.js
    """
    server_overrides: dict[str, Any] = {}
    if host is not None:
        server_overrides["host"] = host
    if port is not None:
        server_overrides["port"] = port

    fixture_overrides: dict[str, Any] = {}
    if resources_dir is not None:
        fixture_overrides["resources_dir"] = resources_dir
    if script is not None:
        fixture_overrides["script_path"] = script

    cli_overrides: dict[str, Any] = {}
    if server_overrides:
        cli_overrides["server"] = server_overrides
    if fixture_overrides:
        cli_overrides["fixtures"] = fixture_overrides

    config = _load_or_exit(config_file, cli_overrides)

    typer.secho(
        f"Starting test server on {config.server.host}:{config.server.port}",
        fg=typer.colors.GREEN,
    )
    if config_file:
        typer.echo(f"  Config: {config_file}")
    typer.echo(f"  Fixtures: {config.fixtures.resources_dir}")
    typer.echo(f"  Library: {config.fixtures.script_path} -> {config.render.script_url}")
    typer.echo(f"  Methods: {', '.join(m.name for m in config.render.methods)}")
    typer.echo()

    import uvicorn

    from rendercheck.server.app import create_app

    uvicorn.run(
        create_app(config),
        host=config.server.host,
        port=config.server.port,
        log_level="info",
        # Keep the handlers configure_logging() installed
        log_config=None,
    )


@app.command()
def fixtures(
    config_file: ConfigOption = None,
    resources_dir: ResourcesDirOption = None,
) -> None:
    """List the fixture directories the server would offer."""
    from rendercheck.server.fixtures import list_fixtures

    cli_overrides: dict[str, Any] = {}
    if resources_dir is not None:
        cli_overrides["fixtures"] = {"resources_dir": resources_dir}
    config = _load_or_exit(config_file, cli_overrides)

    try:
        entries = list_fixtures(config.fixtures.resources_dir)
    except OSError as e:
        typer.secho(f"Error: cannot list {config.fixtures.resources_dir}: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1) from e

    if not entries:
        typer.echo("No fixtures found.")
        return
    for entry in entries:
        typer.echo(entry.file_name)


@app.command()
def show_config(
    config_file: ConfigOption = None,
    output_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: json or yaml."),
    ] = "yaml",
) -> None:
    """Show the effective configuration."""
    config = _load_or_exit(config_file, {})

    config_dict = config.model_dump(mode="json")
    if output_format == "json":
        typer.echo(json.dumps(config_dict, indent=2))
    else:
        typer.echo(yaml.safe_dump(config_dict, default_flow_style=False, sort_keys=False))


if __name__ == "__main__":
    app()

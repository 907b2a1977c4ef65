# src/rendercheck/server/config.py
"""Configuration schema and loading for the fixture viewer server.

Uses Pydantic for validation with frozen (immutable) models.
Configuration precedence: CLI > YAML file > defaults.
"""

import re
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from rendercheck.core.config_loader import load_config as _load_config

_JS_IDENTIFIER = re.compile(r"[A-Za-z_$][\w$]*", re.ASCII)


class ServerConfig(BaseModel):
    """Server binding configuration."""

    model_config = {"frozen": True, "extra": "forbid"}

    host: str = Field(
        default="127.0.0.1",
        description="Host address to bind to",
    )
    port: int = Field(
        default=3000,
        gt=0,
        le=65535,
        description="Port to listen on",
    )


class FixtureConfig(BaseModel):
    """Where fixtures and the rendering library live on disk.

    Relative paths are resolved against the working directory the server
    is started from.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    resources_dir: Path = Field(
        default=Path("spec/resources"),
        description="Directory whose subdirectories are the fixtures",
    )
    script_path: Path = Field(
        default=Path("src/dom-to-image.js"),
        description="Rendering library served at the script URL",
    )
    dom_node_file: str = Field(
        default="dom-node.html",
        description="Fixture file holding the HTML fragment under test",
    )
    style_file: str = Field(
        default="style.css",
        description="Fixture file holding the fragment's style sheet",
    )
    control_image_file: str = Field(
        default="control-image",
        description="Fixture file holding the control image URL (usually a data URL)",
    )
    missing_placeholder: str = Field(
        default="<none>",
        description="Text substituted for a fixture file that does not exist",
    )

    @field_validator("dom_node_file", "style_file", "control_image_file")
    @classmethod
    def validate_plain_file_name(cls, v: str) -> str:
        """Fixture file names are single path components."""
        if not v or Path(v).name != v:
            raise ValueError(f"Fixture file name must be a plain file name, got {v!r}")
        return v


class RenderMethod(BaseModel):
    """One rendering function exported by the library."""

    model_config = {"frozen": True, "extra": "forbid"}

    name: str = Field(description="Function name on the library global, e.g. 'toPng'")
    label: str = Field(description="Heading shown above the rendered output")


def _default_methods() -> tuple[RenderMethod, ...]:
    return (
        RenderMethod(name="toPng", label="PNG"),
        RenderMethod(name="toJpeg", label="JPG"),
        RenderMethod(name="toSvg", label="SVG"),
    )


class RenderConfig(BaseModel):
    """How the test page drives the rendering library in the browser."""

    model_config = {"frozen": True, "extra": "forbid"}

    library_global: str = Field(
        default="domtoimage",
        description="Global object the library script defines",
    )
    script_url: str = Field(
        default="/dom-to-image.js",
        description="URL path the library script is served from",
    )
    methods: tuple[RenderMethod, ...] = Field(
        default_factory=_default_methods,
        description="Rendering functions invoked on the DOM node, in display order",
    )

    @field_validator("library_global")
    @classmethod
    def validate_library_global(cls, v: str) -> str:
        """The global is written into the page's inline script as a bare identifier."""
        if not _JS_IDENTIFIER.fullmatch(v):
            raise ValueError(f"library_global must be a JavaScript identifier, got {v!r}")
        return v

    @field_validator("script_url")
    @classmethod
    def validate_script_url(cls, v: str) -> str:
        """Script URL must be an absolute path that does not shadow the page route."""
        if not v.startswith("/") or v == "/":
            raise ValueError(f"script_url must be an absolute path other than '/', got {v!r}")
        return v

    @model_validator(mode="after")
    def validate_methods(self) -> "RenderConfig":
        """Method names must be unique; each one owns a slot id on the page."""
        names = [m.name for m in self.methods]
        if not names:
            raise ValueError("At least one render method is required")
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate render methods: {duplicates}")
        return self


class HarnessConfig(BaseModel):
    """Top-level fixture viewer configuration.

    Configuration precedence (highest to lowest):
    1. CLI flags
    2. YAML config file
    3. Built-in defaults
    """

    model_config = {"frozen": True, "extra": "forbid"}

    server: ServerConfig = Field(
        default_factory=ServerConfig,
        description="Server binding configuration (default port 3000)",
    )
    fixtures: FixtureConfig = Field(
        default_factory=FixtureConfig,
        description="Fixture and library file locations",
    )
    render: RenderConfig = Field(
        default_factory=RenderConfig,
        description="Browser-side rendering configuration",
    )
    show_tracebacks: bool = Field(
        default=True,
        description="Include the Python traceback on the error page",
    )
    allow_external_bind: bool = Field(
        default=False,
        description="Allow binding to 0.0.0.0 or :: (all interfaces). Blocked by default for safety.",
    )

    @model_validator(mode="after")
    def validate_host_binding(self) -> "HarnessConfig":
        """Block binding to all interfaces unless explicitly allowed.

        Fixture names arrive from the query string and are joined onto the
        resources directory, so the server should stay on localhost.
        """
        dangerous_hosts = {"0.0.0.0", "::", "0:0:0:0:0:0:0:0"}
        if self.server.host in dangerous_hosts and not self.allow_external_bind:
            raise ValueError(
                f"Binding to '{self.server.host}' exposes the fixture server to the network. "
                f"Use allow_external_bind: true to override, or bind to 127.0.0.1."
            )
        return self


def load_config(
    *,
    config_file: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> HarnessConfig:
    """Load fixture viewer configuration with precedence handling.

    Precedence (highest to lowest):
    1. cli_overrides - Direct overrides from CLI flags
    2. config_file - User's YAML configuration file
    3. defaults - Built-in Pydantic defaults
    """
    return _load_config(
        HarnessConfig,
        config_file=config_file,
        cli_overrides=cli_overrides,
    )

"""Tests for fixture viewer configuration."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from rendercheck.server.config import (
    FixtureConfig,
    HarnessConfig,
    RenderConfig,
    RenderMethod,
    ServerConfig,
    load_config,
)


class TestDefaults:
    """Built-in defaults match the layout of the library's repository."""

    def test_server_defaults(self) -> None:
        config = HarnessConfig()
        assert config.server.host == "127.0.0.1"
        assert config.server.port == 3000

    def test_fixture_defaults(self) -> None:
        fixtures = HarnessConfig().fixtures
        assert fixtures.resources_dir == Path("spec/resources")
        assert fixtures.script_path == Path("src/dom-to-image.js")
        assert fixtures.dom_node_file == "dom-node.html"
        assert fixtures.style_file == "style.css"
        assert fixtures.control_image_file == "control-image"
        assert fixtures.missing_placeholder == "<none>"

    def test_render_defaults(self) -> None:
        render = HarnessConfig().render
        assert render.library_global == "domtoimage"
        assert render.script_url == "/dom-to-image.js"
        assert [(m.name, m.label) for m in render.methods] == [
            ("toPng", "PNG"),
            ("toJpeg", "JPG"),
            ("toSvg", "SVG"),
        ]

    def test_config_is_frozen(self) -> None:
        config = HarnessConfig()
        with pytest.raises(ValidationError):
            config.show_tracebacks = False  # type: ignore[misc]


class TestValidation:
    """Tests for model validators."""

    def test_unknown_keys_rejected(self) -> None:
        with pytest.raises(ValidationError):
            HarnessConfig(**{"server": {"hostname": "localhost"}})

    @pytest.mark.parametrize("port", [0, 70000])
    def test_port_range(self, port: int) -> None:
        with pytest.raises(ValidationError):
            ServerConfig(port=port)

    @pytest.mark.parametrize("host", ["0.0.0.0", "::"])
    def test_external_bind_blocked(self, host: str) -> None:
        with pytest.raises(ValidationError, match="exposes the fixture server"):
            HarnessConfig(server=ServerConfig(host=host))

    def test_external_bind_allowed_when_opted_in(self) -> None:
        config = HarnessConfig(server=ServerConfig(host="0.0.0.0"), allow_external_bind=True)
        assert config.server.host == "0.0.0.0"

    @pytest.mark.parametrize("name", ["", "sub/dom-node.html", "../style.css"])
    def test_fixture_file_names_must_be_plain(self, name: str) -> None:
        with pytest.raises(ValidationError, match="plain file name"):
            FixtureConfig(style_file=name)

    @pytest.mark.parametrize("name", ["", "dom-to-image", "1lib", "window.domtoimage", "x;alert(1)"])
    def test_library_global_must_be_identifier(self, name: str) -> None:
        with pytest.raises(ValidationError, match="JavaScript identifier"):
            RenderConfig(library_global=name)

    @pytest.mark.parametrize("name", ["domtoimage", "_lib", "$render", "lib2"])
    def test_library_global_identifiers_accepted(self, name: str) -> None:
        assert RenderConfig(library_global=name).library_global == name

    @pytest.mark.parametrize("url", ["/", "dom-to-image.js"])
    def test_script_url_must_be_absolute_path(self, url: str) -> None:
        with pytest.raises(ValidationError, match="script_url"):
            RenderConfig(script_url=url)

    def test_duplicate_methods_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Duplicate render methods"):
            RenderConfig(
                methods=(
                    RenderMethod(name="toPng", label="PNG"),
                    RenderMethod(name="toPng", label="PNG again"),
                )
            )

    def test_no_methods_rejected(self) -> None:
        with pytest.raises(ValidationError, match="At least one render method"):
            RenderConfig(methods=())


class TestLoadConfig:
    """Tests for load_config() with merge precedence."""

    def test_defaults_only(self) -> None:
        assert load_config() == HarnessConfig()

    def test_config_file(self, tmp_path: Path) -> None:
        config_file = tmp_path / "rendercheck.yaml"
        config_file.write_text(
            yaml.safe_dump(
                {
                    "server": {"port": 4000},
                    "fixtures": {"resources_dir": "test/resources"},
                    "render": {"methods": [{"name": "toPng", "label": "PNG"}]},
                }
            )
        )
        config = load_config(config_file=config_file)
        assert config.server.port == 4000
        assert config.server.host == "127.0.0.1"
        assert config.fixtures.resources_dir == Path("test/resources")
        assert [m.name for m in config.render.methods] == ["toPng"]

    def test_cli_overrides_win(self, tmp_path: Path) -> None:
        config_file = tmp_path / "rendercheck.yaml"
        config_file.write_text(yaml.safe_dump({"server": {"port": 4000, "host": "localhost"}}))
        config = load_config(config_file=config_file, cli_overrides={"server": {"port": 5000}})
        assert config.server.port == 5000
        assert config.server.host == "localhost"

    def test_missing_config_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            load_config(config_file=tmp_path / "nope.yaml")

    def test_invalid_value_in_file(self, tmp_path: Path) -> None:
        config_file = tmp_path / "rendercheck.yaml"
        config_file.write_text(yaml.safe_dump({"server": {"port": "not-a-port"}}))
        with pytest.raises(ValidationError):
            load_config(config_file=config_file)

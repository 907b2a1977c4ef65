# src/rendercheck/server/fixtures.py
"""Fixture discovery and loading.

A fixture is a subdirectory of the resources directory holding an HTML
fragment, its style sheet and a control image. Everything here is a plain
read of the filesystem: errors propagate to the caller, except that a
missing fixture file reads as a placeholder string.
"""

import os
import stat
from dataclasses import dataclass
from pathlib import Path

from rendercheck.server.config import FixtureConfig


class FixtureError(ValueError):
    """Raised when a requested fixture name cannot name a fixture directory."""


@dataclass(frozen=True, slots=True)
class FixtureEntry:
    """One entry of the resources directory.

    Attributes:
        file_name: Entry name (the fixture name for directories)
        file_path: Full path of the entry
        is_directory: Whether the entry is a directory
    """

    file_name: str
    file_path: Path
    is_directory: bool


@dataclass(frozen=True, slots=True)
class Fixture:
    """Loaded content of the selected fixture.

    ``name`` is None for the empty state, in which case every content
    field is an empty string.
    """

    name: str | None
    dom_node: str = ""
    style: str = ""
    control_image: str = ""

    @classmethod
    def empty(cls) -> "Fixture":
        return cls(name=None)


def is_directory(path: Path) -> bool:
    """Return whether ``path`` is a directory.

    Unlike ``Path.is_dir()`` this stats the path and lets errors through,
    so a dangling entry fails loudly instead of silently disappearing.
    """
    return stat.S_ISDIR(path.stat().st_mode)


def list_fixtures(resources_dir: Path) -> list[FixtureEntry]:
    """List the fixture directories under ``resources_dir``, sorted by name.

    Raises:
        OSError: If the directory cannot be listed or an entry cannot be stat'ed.
    """
    entries = [
        FixtureEntry(
            file_name=child.name,
            file_path=child,
            is_directory=is_directory(child),
        )
        for child in resources_dir.iterdir()
    ]
    return sorted((e for e in entries if e.is_directory), key=lambda e: e.file_name)


def read_text(path: Path, placeholder: str = "<none>") -> str:
    """Read a UTF-8 text file, returning ``placeholder`` if it does not exist.

    Bytes that are not valid UTF-8 come through as U+FFFD.

    Raises:
        OSError: For any failure other than the file not existing.
    """
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except FileNotFoundError:
        return placeholder


def resolve_fixture_dir(resources_dir: Path, name: str) -> Path:
    """Join a fixture name onto the resources directory.

    The check is lexical: ``..`` components and absolute names are
    rejected, but symlinks are not followed, so a fixture directory that
    links elsewhere loads like any other entry the picker lists.

    Raises:
        FixtureError: If the name points outside ``resources_dir``.
    """
    if "\x00" in name:
        raise FixtureError(f"Fixture name contains a NUL byte: {name!r}")
    normalized = os.path.normpath(name)
    if (
        os.path.isabs(normalized)
        or normalized in (os.curdir, os.pardir)
        or normalized.startswith(os.pardir + os.sep)
    ):
        raise FixtureError(f"Fixture name escapes the resources directory: {name!r}")
    return resources_dir / name


def load_fixture(config: FixtureConfig, name: str | None) -> Fixture:
    """Load the three files of fixture ``name``.

    No name gives the empty fixture. A missing file reads as
    ``config.missing_placeholder``; an existing empty file stays empty.

    Raises:
        FixtureError: If the name escapes the resources directory.
        OSError: For read failures other than a missing file.
    """
    if not name:
        return Fixture.empty()

    fixture_dir = resolve_fixture_dir(config.resources_dir, name)
    placeholder = config.missing_placeholder
    return Fixture(
        name=name,
        dom_node=read_text(fixture_dir / config.dom_node_file, placeholder),
        style=read_text(fixture_dir / config.style_file, placeholder),
        control_image=read_text(fixture_dir / config.control_image_file, placeholder),
    )

"""
Shared test fixtures for the Starlight test suite.

Provides temporary application directories, descriptor files and
settings files that use real file I/O (no mocking of the filesystem).
"""

from pathlib import Path

import pytest
import toml
from loguru import logger


def make_desktop_text(**fields) -> str:
    """Build [Desktop Entry] text from keyword arguments (Name="X", Exec="x")."""
    lines = ["[Desktop Entry]", "Type=Application"]
    for key, value in fields.items():
        lines.append(f"{key}={value}")
    return "\n".join(lines) + "\n"


def fake_which(*available):
    """Return a shutil.which stand-in that only finds the given names."""
    found = set(available)
    return lambda name: f"/usr/bin/{name}" if name in found else None


@pytest.fixture
def write_desktop():
    """Write a .desktop file into a directory and return its path."""
    def _write(directory: Path, stem: str, text: str = None, **fields) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / f"{stem}.desktop"
        path.write_text(text if text is not None else make_desktop_text(**fields), encoding="utf-8")
        return path
    return _write


@pytest.fixture
def app_dirs(tmp_path, write_desktop):
    """
    Two application directories, user and system, with overlapping keys.

    user/:   firefox (user copy), gimp
    system/: firefox (system copy), hidden-tool (Hidden), settings-daemon (NoDisplay)
    """
    user = tmp_path / "user" / "applications"
    system = tmp_path / "system" / "applications"

    write_desktop(user, "firefox", Name="Firefox (user)", Exec="firefox %u",
                  Categories="Network;WebBrowser;", Keywords="web;browser;")
    write_desktop(user, "gimp", Name="GIMP Image Editor", Exec="gimp-2.10 %U",
                  GenericName="Image Editor", Categories="Graphics;2DGraphics;")
    write_desktop(system, "firefox", Name="Firefox", Exec="firefox %u",
                  Categories="Network;WebBrowser;")
    write_desktop(system, "hidden-tool", Name="Hidden Tool", Exec="hidden-tool", Hidden="true")
    write_desktop(system, "settings-daemon", Name="Settings Daemon", Exec="gsd", NoDisplay="true")

    return user, system


@pytest.fixture
def log_messages():
    """Capture loguru output as (level, message) tuples."""
    messages = []
    handler_id = logger.add(
        lambda m: messages.append((m.record["level"].name, m.record["message"])),
        level="DEBUG",
    )
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def tmp_settings(tmp_path):
    """Create a real settings TOML file with all sections."""
    settings_path = tmp_path / "settings.toml"
    data = {
        "logging": {"level": "INFO"},
        "discovery": {"extra_paths": [str(tmp_path / "extra")]},
        "search": {"max_results": 5, "include_categories": True},
        "launcher": {"terminals": ["foot", "xterm"]},
    }
    settings_path.write_text(toml.dumps(data))
    return settings_path

"""
Tests for Exec cleanup, terminal wrapping and detached spawning.

subprocess.Popen is patched so nothing is actually started, except in
the tests that run a real short-lived process.
"""

import asyncio
import subprocess
import sys
import time
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from starlight.desktop.entry import ApplicationRecord
from starlight.desktop.scanner import scan_directory
from starlight.errors import LaunchError
from starlight.services.launcher import (
    DEFAULT_TERMINALS,
    Invocation,
    Launcher,
    clean_exec,
    find_terminal,
    terminal_command,
    tokenize_exec,
)
from starlight.utils.helpers import launch_app

from conftest import fake_which


def _record(exec_line, **kwargs):
    return ApplicationRecord(
        name="App",
        exec=exec_line,
        source_path=Path("/usr/share/applications/app.desktop"),
        **kwargs,
    )


class TestCleanExec:
    """Test field-code removal and tokenization."""

    def test_placeholders_removed_and_percent_unescaped(self):
        assert clean_exec("app %f --flag %%done") == "app  --flag %done"

    def test_tokenized(self):
        assert tokenize_exec("app %f --flag %%done") == ["app", "--flag", "%done"]

    @pytest.mark.parametrize("code", list("fFuUdDnNickv"))
    def test_every_field_code_removed(self, code):
        assert tokenize_exec(f"app %{code}") == ["app"]

    def test_escaped_percent_before_code_letter(self):
        # %%d is a literal "%d", not a field code
        assert clean_exec("printf %%d") == "printf %d"

    def test_unknown_codes_left_alone(self):
        assert clean_exec("app %x") == "app %x"

    def test_no_quote_handling(self):
        assert tokenize_exec('sh -c "echo hi"') == ["sh", "-c", '"echo', 'hi"']


class TestTerminals:
    """Test terminal lookup and per-terminal argv."""

    def test_first_available_wins(self):
        assert find_terminal(DEFAULT_TERMINALS, fake_which("kitty", "konsole")) == "konsole"

    def test_none_available(self):
        assert find_terminal(DEFAULT_TERMINALS, fake_which()) is None

    def test_gnome_terminal_form(self):
        assert terminal_command("gnome-terminal", "htop -d 5") == ["gnome-terminal", "--", "sh", "-c", "htop -d 5"]

    def test_konsole_form(self):
        assert terminal_command("konsole", "htop") == ["konsole", "-e", "htop"]

    @pytest.mark.parametrize("terminal", ["foot", "alacritty", "kitty", "wezterm", "xterm"])
    def test_generic_form(self, terminal):
        assert terminal_command(terminal, "htop") == [terminal, "-e", "sh", "-c", "htop"]


class TestBuildInvocation:
    """Test record -> argv/cwd."""

    def test_direct_invocation(self):
        launcher = Launcher(log=MagicMock(), which=fake_which())
        inv = launcher.build_invocation(_record("app %U --new"))
        assert inv == Invocation(["app", "--new"], None)

    def test_path_becomes_cwd(self):
        launcher = Launcher(log=MagicMock(), which=fake_which())
        inv = launcher.build_invocation(_record("app", path="/srv/work"))
        assert inv.cwd == "/srv/work"

    def test_terminal_wraps_original_exec(self):
        launcher = Launcher(log=MagicMock(), which=fake_which("gnome-terminal"))
        inv = launcher.build_invocation(_record("htop %f", terminal=True))
        assert inv.argv == ["gnome-terminal", "--", "sh", "-c", "htop %f"]

    def test_terminal_falls_back_to_direct(self):
        log = MagicMock()
        launcher = Launcher(log=log, which=fake_which())
        inv = launcher.build_invocation(_record("htop %f", terminal=True))
        assert inv.argv == ["htop"]
        log.warning.assert_called_once()

    def test_custom_terminal_order(self):
        launcher = Launcher(terminals=["foot", "gnome-terminal"], log=MagicMock(),
                            which=fake_which("gnome-terminal", "foot"))
        inv = launcher.build_invocation(_record("htop", terminal=True))
        assert inv.argv[0] == "foot"

    def test_exec_of_only_field_codes_is_an_error(self):
        launcher = Launcher(log=MagicMock(), which=fake_which())
        with pytest.raises(LaunchError):
            launcher.build_invocation(_record("%f %U"))


class TestSpawn:
    """Test process creation and error reporting."""

    def test_launch_spawns_detached(self):
        launcher = Launcher(log=MagicMock(), which=fake_which())
        with patch("starlight.services.launcher.subprocess.Popen") as popen:
            launcher.launch(_record("app %f --flag %%done", path="/tmp"))

        args, kwargs = popen.call_args
        assert args[0] == ["app", "--flag", "%done"]
        assert kwargs["cwd"] == "/tmp"
        assert kwargs["start_new_session"] is True
        assert kwargs["stdout"] is subprocess.DEVNULL
        assert kwargs["stderr"] is subprocess.DEVNULL

    def test_launch_in_terminal(self):
        launcher = Launcher(log=MagicMock(), which=fake_which("gnome-terminal"))
        with patch("starlight.services.launcher.subprocess.Popen") as popen:
            launcher.launch(_record("vim %F", terminal=True))
        assert popen.call_args[0][0] == ["gnome-terminal", "--", "sh", "-c", "vim %F"]

    def test_missing_binary_raises_launch_error(self):
        launcher = Launcher(log=MagicMock(), which=fake_which())
        with pytest.raises(LaunchError):
            launcher.launch(_record("definitely-not-a-real-binary-starlight"))

    def test_spawn_error_is_not_retried(self):
        launcher = Launcher(log=MagicMock(), which=fake_which())
        with patch("starlight.services.launcher.subprocess.Popen",
                   side_effect=PermissionError("denied")) as popen:
            with pytest.raises(LaunchError, match="denied"):
                launcher.launch(_record("app"))
        assert popen.call_count == 1

    def test_nul_byte_in_exec_raises_launch_error(self, tmp_path):
        (tmp_path / "nul.desktop").write_bytes(b"[Desktop Entry]\nName=Nul\nExec=app\x00x --go\n")
        records = asyncio.run(scan_directory(tmp_path, log=MagicMock(), which=fake_which()))
        assert len(records) == 1

        launcher = Launcher(log=MagicMock(), which=fake_which())
        with pytest.raises(LaunchError, match="null byte"):
            launcher.launch(records[0])

    def test_nul_byte_in_path_raises_launch_error(self):
        launcher = Launcher(log=MagicMock(), which=fake_which())
        with pytest.raises(LaunchError):
            launcher.launch(_record(f"{sys.executable} -c pass", path="/tmp\x00x"))

    def test_launch_returns_without_waiting_and_child_is_reaped(self):
        launcher = Launcher(log=MagicMock(), which=fake_which())
        record = _record(f"{sys.executable} -c pass")

        proc = launcher.launch(record)

        # The reaper thread collects the exit status
        for _ in range(100):
            if proc.returncode is not None:
                break
            time.sleep(0.02)
        assert proc.returncode == 0

    def test_run_command_uses_shell(self):
        launcher = Launcher(log=MagicMock(), which=fake_which())
        with patch("starlight.services.launcher.subprocess.Popen") as popen:
            launcher.run_command("better-bar -d")
        assert popen.call_args[0][0] == ["sh", "-c", "better-bar -d"]

    def test_run_in_terminal_defaults_to_xterm(self):
        launcher = Launcher(log=MagicMock(), which=fake_which())
        with patch("starlight.services.launcher.subprocess.Popen") as popen:
            launcher.run_in_terminal("htop")
        assert popen.call_args[0][0] == ["xterm", "-e", "sh", "-c", "htop"]

    def test_open_url(self):
        launcher = Launcher(log=MagicMock(), which=fake_which())
        with patch("starlight.services.launcher.subprocess.Popen") as popen:
            launcher.open_url("https://example.org")
        assert popen.call_args[0][0] == ["xdg-open", "https://example.org"]


class TestLaunchApp:
    """Test launching by key through the index."""

    def test_launches_record_from_index(self):
        record = _record("app")
        index = MagicMock()

        async def get(key):
            return record if key == "app" else None

        index.get = get
        launcher = MagicMock()

        asyncio.run(launch_app(index, "app", launcher))
        launcher.launch.assert_called_once_with(record)

    def test_unknown_key_raises(self):
        index = MagicMock()

        async def get(key):
            return None

        index.get = get
        with pytest.raises(LaunchError, match="nope"):
            asyncio.run(launch_app(index, "nope", MagicMock()))

"""
Launcher - Start applications as detached processes.

Turns an ApplicationRecord into an argv:
  1. Field codes (%f %F %u %U %d %D %n %N %i %c %k %v) are dropped,
     since no files or URLs are ever passed, and %% becomes %.
  2. The result is split on whitespace. Quoting is NOT supported.
  3. Terminal=true entries are wrapped in the first terminal emulator
     found on PATH, running the original Exec line through sh.

Children get their own session and /dev/null for stdio. A daemon
thread waits on each child so it never lingers as a zombie; the exit
status is thrown away.
"""

import re
import shutil
import subprocess
import threading
from dataclasses import dataclass
from typing import Optional

from loguru import logger

from ..errors import LaunchError

FIELD_CODES = "fFuUdDnNickv"
_FIELD_CODE_RE = re.compile(r"%([%" + FIELD_CODES + r"])")

DEFAULT_TERMINALS = (
    "gnome-terminal",
    "konsole",
    "foot",
    "alacritty",
    "kitty",
    "wezterm",
    "xterm",
)
FALLBACK_TERMINAL = "xterm"


def clean_exec(exec_line: str) -> str:
    """
    Remove field codes from an Exec line.

    Example:
        clean_exec("app %f --flag %%done") == "app  --flag %done"
    """
    return _FIELD_CODE_RE.sub(lambda m: "%" if m.group(1) == "%" else "", exec_line)


def tokenize_exec(exec_line: str) -> list[str]:
    """Clean an Exec line and split it into argv (no quote handling)."""
    return clean_exec(exec_line).split()


def find_terminal(terminals=DEFAULT_TERMINALS, which=shutil.which) -> Optional[str]:
    """Return the first terminal emulator available on PATH, or None."""
    for terminal in terminals:
        if which(terminal):
            return terminal
    return None


def terminal_command(terminal: str, command: str) -> list[str]:
    """Build the argv that makes terminal run command."""
    if terminal == "gnome-terminal":
        return [terminal, "--", "sh", "-c", command]
    if terminal == "konsole":
        return [terminal, "-e", command]
    return [terminal, "-e", "sh", "-c", command]


@dataclass(frozen=True)
class Invocation:
    """A concrete process to start."""
    argv: list[str]
    cwd: Optional[str] = None


class Launcher:
    """Spawn applications, shell commands and URLs without waiting on them."""

    def __init__(self, terminals=DEFAULT_TERMINALS, log=logger, which=shutil.which):
        self.terminals = tuple(terminals)
        self.log = log
        self.which = which

    def build_invocation(self, record) -> Invocation:
        """
        Work out how to start a record.

        Args:
            record: ApplicationRecord to launch

        Returns:
            Invocation with argv and working directory

        Raises:
            LaunchError: If the Exec line is empty after field-code removal
        """
        argv = tokenize_exec(record.exec)
        if not argv:
            raise LaunchError(f"Nothing to execute for {record.key}: {record.exec!r}")

        cwd = record.path or None

        if record.terminal:
            terminal = find_terminal(self.terminals, self.which)
            if terminal:
                return Invocation(terminal_command(terminal, record.exec), cwd)
            self.log.warning(
                f"No terminal emulator found for {record.key}, launching directly"
            )

        return Invocation(argv, cwd)

    def launch(self, record) -> subprocess.Popen:
        """
        Launch an application and return without waiting for it.

        Raises:
            LaunchError: If the process could not be started
        """
        invocation = self.build_invocation(record)
        proc = self._spawn(invocation.argv, cwd=invocation.cwd)
        self.log.debug(f"Launched {record.key} (pid {proc.pid}): {invocation.argv}")
        return proc

    def run_command(self, command: str) -> subprocess.Popen:
        """Run a shell command line detached."""
        return self._spawn(["sh", "-c", command])

    def run_in_terminal(self, command: str) -> subprocess.Popen:
        """Run a shell command inside a terminal emulator (xterm if none is found)."""
        terminal = find_terminal(self.terminals, self.which) or FALLBACK_TERMINAL
        return self._spawn(terminal_command(terminal, command))

    def open_url(self, url: str) -> subprocess.Popen:
        """Open a URL with the desktop's default handler."""
        return self._spawn(["xdg-open", url])

    def _spawn(self, argv: list[str], cwd: Optional[str] = None) -> subprocess.Popen:
        try:
            proc = subprocess.Popen(
                argv,
                cwd=cwd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except (OSError, ValueError) as e:
            self.log.error(f"Failed to run {argv}: {e}")
            raise LaunchError(f"Failed to run {argv[0]}: {e}") from e

        threading.Thread(target=proc.wait, name=f"reap-{proc.pid}", daemon=True).start()
        return proc

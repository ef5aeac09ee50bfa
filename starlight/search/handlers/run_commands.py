"""
Run Command Handler - Run executables from $PATH.

Matches queries starting with "r:" or "run:". Results are the PATH
executables whose name contains the typed text (case-sensitive).

Usage: r:htop, run: better-bar -d
"""

from loguru import logger

from ...utils.executables import list_path_executables
from ..router import ResultItem, SearchHandler, strip_prefix as _strip

PREFIXES = ("run:", "r:")
MAX_MATCHES = 1000


def strip_prefix(query: str) -> str:
    return _strip(query, PREFIXES)


def resolve_command_line(selected: str, typed: str) -> str:
    """
    Decide what to actually run when a listed executable is picked.

    If the user typed arguments ("better-bar -d") the typed text wins;
    otherwise the selected executable name is used.

    Args:
        selected: Executable name from the result list
        typed: Text after the run prefix

    Returns:
        Command line to run
    """
    if " " in typed and " " not in selected:
        return typed
    if selected.startswith(typed) or len(typed) < len(selected):
        return selected
    return typed


class RunCommandHandler(SearchHandler):
    """List and run PATH executables via 'r:' prefix."""

    name = "run_command"
    priority = 300
    prefixes = PREFIXES

    def __init__(self, launcher, lister=list_path_executables):
        self.launcher = launcher
        self.lister = lister

    async def get_results(self, query: str) -> list[ResultItem]:
        typed = self.query_text(query)
        # Match on the command name only, not on typed arguments
        needle = typed.split(" ", 1)[0] if typed else ""

        commands = [c for c in self.lister() if needle in c][:MAX_MATCHES]

        if not commands:
            return [ResultItem(
                title=f"No matching commands '{typed}'",
                description="Type r: followed by a command name",
                icon="dialog-question",
                result_type="command",
            )]

        return [self._command_to_result(cmd, typed) for cmd in commands]

    def _command_to_result(self, cmd: str, typed: str) -> ResultItem:
        """Convert an executable name to a ResultItem."""
        return ResultItem(
            title=cmd,
            description="Run command",
            icon="utilities-terminal",
            result_type="command",
            on_activate=lambda c=cmd, t=typed: self._execute(resolve_command_line(c, t)),
        )

    def _execute(self, command_line: str):
        """Run the command detached."""
        logger.debug(f"Running command: {command_line}")
        return self.launcher.run_command(command_line)

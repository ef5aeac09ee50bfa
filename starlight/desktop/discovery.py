"""
Discovery Coordinator - Scan all application directories concurrently.

Search paths, in priority order:
  1. $HOME/.local/share/applications
  2. <dir>/applications for each dir in $XDG_DATA_DIRS
     (default: /usr/local/share:/usr/share)
  3. $HOME/.local/share/flatpak/exports/share/applications
  4. /var/lib/flatpak/exports/share/applications

Every path gets its own scan task. Results are merged only after all
tasks have finished, walking the paths in the order above: the first
directory that provides a key keeps it, so a user's local copy of
firefox.desktop shadows the system one no matter which scan finished
first.
"""

import asyncio
import os
import shutil
from pathlib import Path

from loguru import logger

from ..errors import DiscoveryError
from .entry import ApplicationRecord
from .scanner import scan_directory

DEFAULT_XDG_DATA_DIRS = "/usr/local/share:/usr/share"
SYSTEM_FLATPAK_APPS = Path("/var/lib/flatpak/exports/share/applications")


def default_search_paths(environ=None) -> list[Path]:
    """
    Build the standard search path list from the environment.

    Args:
        environ: Mapping to read HOME and XDG_DATA_DIRS from (os.environ by default)

    Returns:
        Directories in priority order (they do not need to exist)
    """
    if environ is None:
        environ = os.environ

    home = Path(environ.get("HOME") or Path.home())
    data_dirs = environ.get("XDG_DATA_DIRS") or DEFAULT_XDG_DATA_DIRS

    paths = [home / ".local" / "share" / "applications"]
    paths.extend(Path(d) / "applications" for d in data_dirs.split(":") if d)
    paths.append(home / ".local" / "share" / "flatpak" / "exports" / "share" / "applications")
    paths.append(SYSTEM_FLATPAK_APPS)
    return paths


class DiscoveryCoordinator:
    """Fan out one directory scan per search path and merge the results."""

    def __init__(self, search_paths=None, log=logger, which=shutil.which):
        if search_paths is None:
            search_paths = default_search_paths()
        self.search_paths = [Path(p) for p in search_paths]
        self.log = log
        self.which = which

    async def discover(self) -> dict[str, ApplicationRecord]:
        """
        Scan every search path and return records keyed by filename stem.

        Raises:
            DiscoveryError: If there are no search paths to scan
        """
        if not self.search_paths:
            raise DiscoveryError("no application search paths configured")

        results = await asyncio.gather(
            *[scan_directory(p, log=self.log, which=self.which) for p in self.search_paths],
            return_exceptions=True,
        )

        merged: dict[str, ApplicationRecord] = {}
        for path, result in zip(self.search_paths, results):
            if isinstance(result, BaseException):
                self.log.error(f"Scan of {path} failed: {result!r}")
                continue

            for record in result:
                existing = merged.get(record.key)
                if existing is not None:
                    self.log.debug(
                        f"{record.source_path} shadowed by {existing.source_path}"
                    )
                    continue
                merged[record.key] = record

        self.log.debug(
            f"Discovered {len(merged)} applications in {len(self.search_paths)} paths"
        )
        return merged

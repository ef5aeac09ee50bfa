"""
Exception types shared across the Starlight packages.

Only LaunchError is expected to reach a user: discovery recovers from
file- and directory-level failures on its own and just logs them.
"""


class StarlightError(Exception):
    """Base class for all Starlight errors."""


class DesktopEntryError(StarlightError):
    """A descriptor file is not a usable [Desktop Entry]."""


class DiscoveryError(StarlightError):
    """Discovery could not scan anything at all (no search paths configured)."""


class LaunchError(StarlightError):
    """Spawning the external process for an application failed."""

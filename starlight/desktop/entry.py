"""
Desktop Entry Parser - Turn one .desktop file into an ApplicationRecord.

Only the [Desktop Entry] group is read. Keys outside the fixed table
below (localized names, vendor extensions, X-* keys) are ignored rather
than rejected, so odd-but-working descriptors still show up.

classify_entry() is the single place that decides whether a descriptor
ends up in the index:
  - Accepted(record)
  - RejectedFormat: no [Desktop Entry] group, empty Name or Exec
  - RejectedFiltered: NoDisplay/Hidden set, or TryExec binary missing
"""

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Union

from ..errors import DesktopEntryError

DESKTOP_SECTION = "[Desktop Entry]"
DESKTOP_SUFFIX = ".desktop"

# Descriptor key -> (record field, kind)
_STRING, _BOOL, _LIST = "string", "bool", "list"
KNOWN_KEYS = {
    "Name": ("name", _STRING),
    "Exec": ("exec", _STRING),
    "Icon": ("icon", _STRING),
    "Comment": ("comment", _STRING),
    "Categories": ("categories", _LIST),
    "MimeType": ("mime_types", _LIST),
    "NoDisplay": ("no_display", _BOOL),
    "Hidden": ("hidden", _BOOL),
    "Terminal": ("terminal", _BOOL),
    "StartupNotify": ("startup_notify", _BOOL),
    "GenericName": ("generic_name", _STRING),
    "Keywords": ("keywords", _LIST),
    "StartupWMClass": ("startup_wm_class", _STRING),
    "TryExec": ("try_exec", _STRING),
    "Path": ("path", _STRING),
    "Actions": ("actions", _LIST),
    "Type": ("type", _STRING),
    "Version": ("version", _STRING),
}


@dataclass(frozen=True)
class ApplicationRecord:
    """One launchable application, as read from its descriptor file."""
    name: str
    exec: str
    source_path: Path
    generic_name: Optional[str] = None
    comment: Optional[str] = None
    icon: Optional[str] = None  # absolute path or theme icon name
    categories: tuple[str, ...] = ()
    keywords: tuple[str, ...] = ()
    mime_types: tuple[str, ...] = ()
    actions: tuple[str, ...] = ()
    try_exec: Optional[str] = None
    path: Optional[str] = None  # working directory for the child
    terminal: bool = False
    no_display: bool = False
    hidden: bool = False
    startup_notify: bool = False
    startup_wm_class: Optional[str] = None
    type: str = "Application"
    version: Optional[str] = None

    @property
    def key(self) -> str:
        """Filename stem of the descriptor, e.g. "firefox" for firefox.desktop."""
        return self.source_path.stem


@dataclass(frozen=True)
class Accepted:
    record: ApplicationRecord


@dataclass(frozen=True)
class RejectedFormat:
    source_path: Path
    reason: str


@dataclass(frozen=True)
class RejectedFiltered:
    source_path: Path
    reason: str


EntryResult = Union[Accepted, RejectedFormat, RejectedFiltered]


def _split_list(value: str) -> tuple[str, ...]:
    return tuple(part for part in value.split(";") if part)


def _parse_bool(value: str) -> bool:
    return value.lower() == "true"


def parse_entry(text: str, source_path) -> ApplicationRecord:
    """
    Parse descriptor text into an ApplicationRecord.

    Args:
        text: Full file contents
        source_path: Path of the file (used for the record key)

    Returns:
        The parsed record. Visibility flags and TryExec are NOT checked
        here; see classify_entry().

    Raises:
        DesktopEntryError: Missing [Desktop Entry] group, Name or Exec
    """
    values: dict = {}
    seen_section = False
    in_section = False

    for raw_line in text.splitlines():
        line = raw_line.strip()

        if not line or line.startswith("#"):
            continue

        if line.startswith("[") and line.endswith("]"):
            in_section = line == DESKTOP_SECTION
            seen_section = seen_section or in_section
            continue

        if not in_section or "=" not in line:
            continue

        key, _, value = line.partition("=")
        known = KNOWN_KEYS.get(key.strip())
        if known is None:
            continue

        field_name, kind = known
        value = value.strip()
        if kind == _BOOL:
            values[field_name] = _parse_bool(value)
        elif kind == _LIST:
            values[field_name] = _split_list(value)
        else:
            values[field_name] = value

    if not seen_section:
        raise DesktopEntryError("missing [Desktop Entry] section")
    if not values.get("name"):
        raise DesktopEntryError("missing required Name field")
    if not values.get("exec"):
        raise DesktopEntryError("missing required Exec field")

    return ApplicationRecord(source_path=Path(source_path), **values)


def classify_entry(
    text: str,
    source_path,
    which: Callable[[str], Optional[str]] = shutil.which,
) -> EntryResult:
    """
    Parse and validate a descriptor in one step.

    Args:
        text: Full file contents
        source_path: Path of the file
        which: Binary lookup used for TryExec (shutil.which by default)

    Returns:
        Accepted, RejectedFormat or RejectedFiltered
    """
    source_path = Path(source_path)
    try:
        record = parse_entry(text, source_path)
    except DesktopEntryError as e:
        return RejectedFormat(source_path, str(e))

    if record.no_display:
        return RejectedFiltered(source_path, "NoDisplay=true")
    if record.hidden:
        return RejectedFiltered(source_path, "Hidden=true")
    if record.try_exec and which(record.try_exec) is None:
        return RejectedFiltered(source_path, f"TryExec binary not found: {record.try_exec}")

    return Accepted(record)

"""
Directory Scanner - Parse every .desktop file in one directory.

A directory that is missing or unreadable simply yields no records.
A broken file is logged and skipped; it never aborts the rest of the
directory. Blocking I/O runs in worker threads so many directories can
be scanned concurrently from one event loop.
"""

import asyncio
import os
import shutil
from pathlib import Path

from loguru import logger

from .entry import (
    DESKTOP_SUFFIX,
    Accepted,
    ApplicationRecord,
    RejectedFiltered,
    classify_entry,
)


def _list_candidates(directory: Path) -> list[Path]:
    """Return .desktop regular files in directory, in listing order."""
    with os.scandir(directory) as it:
        return [
            Path(entry.path)
            for entry in it
            if Path(entry.name).suffix == DESKTOP_SUFFIX and entry.is_file()
        ]


def _read_and_classify(path: Path, which):
    text = path.read_text(encoding="utf-8", errors="replace")
    return classify_entry(text, path, which=which)


async def scan_directory(directory, log=logger, which=shutil.which) -> list[ApplicationRecord]:
    """
    Scan one directory for application descriptors.

    Args:
        directory: Directory to list (not recursed into)
        log: Logger to report skipped files and directories to
        which: Binary lookup used for TryExec checks

    Returns:
        Accepted records in directory listing order
    """
    directory = Path(directory)

    try:
        candidates = await asyncio.to_thread(_list_candidates, directory)
    except FileNotFoundError:
        log.warning(f"Skipping missing directory {directory}")
        return []
    except OSError as e:
        log.warning(f"Cannot list {directory}: {e}")
        return []

    records = []
    for path in candidates:
        try:
            result = await asyncio.to_thread(_read_and_classify, path, which)
        except OSError as e:
            log.warning(f"Cannot read {path}: {e}")
            continue

        if isinstance(result, Accepted):
            records.append(result.record)
        elif isinstance(result, RejectedFiltered):
            log.debug(f"Filtered {path}: {result.reason}")
        else:
            log.warning(f"Error parsing desktop file {path}: {result.reason}")

    log.debug(f"Scanned {directory}: {len(records)}/{len(candidates)} entries accepted")
    return records

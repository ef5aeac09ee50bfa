"""
PATH executable lister for run mode.
"""

import os


def list_path_executables(environ=None) -> list[str]:
    """
    List executable file names found in $PATH.

    Args:
        environ: Mapping to read PATH from (os.environ by default)

    Returns:
        Sorted, de-duplicated file names. Directories that cannot be
        read are skipped.
    """
    if environ is None:
        environ = os.environ

    names = set()
    for directory in environ.get("PATH", "").split(":"):
        if not directory:
            continue
        try:
            with os.scandir(directory) as it:
                for entry in it:
                    try:
                        if entry.is_file() and entry.stat().st_mode & 0o111:
                            names.add(entry.name)
                    except OSError:
                        continue
        except OSError:
            continue

    return sorted(names)

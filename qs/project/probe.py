"""
qs.project.probe - Filesystem predicates

Stateless helpers used to resolve the source files of a target:
existence checks, source extension sniffing, glob detection and
single-level directory discovery.
"""

import os
from pathlib import Path
from typing import Iterable, Optional

# Extensions accepted as target sources (headers included)
SOURCE_EXTENSIONS = (".cpp", ".c", ".cc", ".cxx", ".h", ".hpp", ".hxx")

# Probe order for `<target>.<ext>` when a target is added without files
MAIN_EXTENSIONS = (".cpp", ".cc", ".c", ".cxx")

GLOB_CHARS = "*?["


def _under(path: str, base_dir: Optional[str]) -> str:
    if base_dir is None:
        return path
    return os.path.join(base_dir, path)


def file_exists(path: str, base_dir: Optional[str] = None) -> bool:
    """Check that path exists and is not a directory."""
    return os.path.isfile(_under(path, base_dir))


def is_dir(path: str, base_dir: Optional[str] = None) -> bool:
    return os.path.isdir(_under(path, base_dir))


def is_source_file(filename: str) -> bool:
    """Check whether a filename has a recognized C/C++ source extension."""
    return os.path.splitext(filename)[1] in SOURCE_EXTENSIONS


def contains_glob_char(pattern: str) -> bool:
    return any(c in pattern for c in GLOB_CHARS)


def normalize_path(path: str) -> str:
    """Use forward slashes regardless of how the path was typed."""
    return path.replace("\\", "/")


def remove_duplicates(items: Iterable[str]) -> list[str]:
    """Drop repeated items, keeping the first occurrence of each."""
    seen = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


def find_source_files(directory: str, base_dir: Optional[str] = None) -> list[str]:
    """
    Collect the source files directly inside a directory.

    Subdirectories are not descended into.

    Args:
        directory: Directory to scan, as the user typed it
        base_dir: Directory that relative paths are resolved against
                  (default: current working directory)

    Returns:
        Paths of the form `directory/name`, sorted by name. Empty if the
        directory cannot be read.
    """
    try:
        entries = sorted(os.listdir(_under(directory, base_dir)))
    except OSError:
        return []

    sources = []
    for name in entries:
        if is_dir(os.path.join(directory, name), base_dir):
            continue
        if is_source_file(name):
            sources.append(os.path.join(directory, name))
    return sources


def find_main_file(target: str, base_dir: Optional[str] = None) -> Optional[str]:
    """Return the first existing `<target>.<ext>` in MAIN_EXTENSIONS order."""
    for ext in MAIN_EXTENSIONS:
        candidate = target + ext
        if file_exists(candidate, base_dir):
            return candidate
    return None


def is_executable(path: str) -> bool:
    """Check for a regular file with any execute permission bit set."""
    try:
        mode = os.stat(path).st_mode
    except OSError:
        return False
    return os.path.isfile(path) and bool(mode & 0o111)


def find_executables(directory: str) -> list[str]:
    """Names of the non-hidden executable files directly inside directory."""
    try:
        entries = sorted(os.listdir(directory))
    except OSError:
        return []
    return [
        name
        for name in entries
        if not name.startswith(".") and is_executable(os.path.join(directory, name))
    ]


def is_home_directory(path: str) -> bool:
    """Check whether path resolves to the current user's home directory."""
    try:
        home = Path.home().resolve()
    except RuntimeError:
        # Home directory cannot be determined
        return False
    return Path(path).resolve() == home

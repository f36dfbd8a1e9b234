"""
qs.project.editor - Incremental CMakeLists.txt editing

Every function in this module is a pure text transform: it takes the full
document text and returns the full new text, leaving everything outside the
touched region byte-for-byte intact. Nothing here reads or writes files.

Recognized statement shapes are the ones qs itself emits:

    add_executable(app
        src/main.cc
        src/util.cc
    )

    set(CMAKE_CXX_STANDARD 17)
    add_subdirectory(core)
    target_link_libraries(app PRIVATE core)

A declaration written in a different shape (for example with the first
source on the same line as the name) is not recognized as mergeable, and a
new block is appended instead.
"""

import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Optional

from qs.project.probe import normalize_path, remove_duplicates

INDENT = "    "

# Marker statements of the standard settings bundle; any one of them
# present means the whole bundle is considered applied
STANDARD_MARKERS = ("CMAKE_RUNTIME_OUTPUT_DIRECTORY", "CMAKE_ARCHIVE_OUTPUT_DIRECTORY")

STANDARD_SETTINGS = """# Compiler options
set(CMAKE_CXX_FLAGS "${CMAKE_CXX_FLAGS} -Wall -Wextra")

# Output directories
set(CMAKE_RUNTIME_OUTPUT_DIRECTORY ${CMAKE_BINARY_DIR}/bin)
set(CMAKE_ARCHIVE_OUTPUT_DIRECTORY ${CMAKE_BINARY_DIR}/lib)
set(CMAKE_LIBRARY_OUTPUT_DIRECTORY ${CMAKE_BINARY_DIR}/lib)

# Include directories
include_directories(${CMAKE_CURRENT_SOURCE_DIR}/include)

# Enable testing
enable_testing()
"""

CXX_STANDARD_RE = re.compile(r"set\(CMAKE_CXX_STANDARD \d+\)")
EXECUTABLE_RE = re.compile(r"add_executable\(([^):\n\s]+)")
LIBRARY_RE = re.compile(r"add_library\(([^):\n\s]+)")
SUBDIRECTORY_RE = re.compile(r"add_subdirectory\(([^)\s]+)\)")
PROJECT_RE = re.compile(r"^\s*project\(\s*([^)\s]+)", re.MULTILINE)
CXX_STANDARD_VALUE_RE = re.compile(r"set\(CMAKE_CXX_STANDARD (\d+)\)")

# Action names carried by EditResult
CREATED = "created"
MERGED = "merged"
REPLACED = "replaced"
APPENDED = "appended"
UNCHANGED = "unchanged"


@dataclass
class EditResult:
    """Outcome of one editor call."""

    content: str
    action: str
    # Entries that were newly written (source paths, statements)
    added: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return self.action != UNCHANGED


@dataclass
class TargetBlock:
    """Location of an `add_executable` block's source entries."""

    name: str
    # Span of the entries text, between the opening line and the closing `)`
    start: int
    end: int
    entries: list[str]


def _target_head_pattern(name: str) -> re.Pattern:
    return re.compile(rf"add_executable\({re.escape(name)}\s")


def _target_block_pattern(name: str) -> re.Pattern:
    # Opening line, then paren-free entry lines, then a bare `)` line
    return re.compile(
        rf"^[ \t]*add_executable\({re.escape(name)}[ \t]*\n"
        r"(?P<body>(?:[^()\n]*\n)*?)"
        r"[ \t]*\)[ \t]*$",
        re.MULTILINE,
    )


def has_target(content: str, name: str) -> bool:
    """Check for an `add_executable` declaration with exactly this name."""
    return _target_head_pattern(name).search(content) is not None


def find_target_block(content: str, name: str) -> Optional[TargetBlock]:
    """
    Locate the first mergeable declaration block for a target.

    Returns:
        The block, or None when the first declaration is missing or not in
        the expected shape.
    """
    head = _target_head_pattern(name).search(content)
    if head is None:
        return None

    # Only the first declaration is considered
    line_start = content.rfind("\n", 0, head.start()) + 1
    match = _target_block_pattern(name).match(content, line_start)
    if match is None:
        return None

    entries = [line.strip() for line in match.group("body").split("\n")]
    return TargetBlock(
        name=name,
        start=match.start("body"),
        end=match.end("body"),
        entries=[e for e in entries if e],
    )


def _format_entries(entries: list[str]) -> str:
    return "".join(f"{INDENT}{entry}\n" for entry in entries)


def merge_target_sources(
    content: str, block: TargetBlock, sources: Iterable[str]
) -> EditResult:
    """
    Merge sources into an existing block.

    Existing entries keep their order; new ones follow in the order given,
    skipping any already listed.
    """
    merged = list(block.entries)
    seen = {normalize_path(entry) for entry in merged}
    added = []
    for source in sources:
        source = normalize_path(source)
        if source not in seen:
            seen.add(source)
            merged.append(source)
            added.append(source)

    if not added:
        return EditResult(content, UNCHANGED)

    new_content = content[: block.start] + _format_entries(merged) + content[block.end :]
    return EditResult(new_content, MERGED, added)


def append_target(content: str, name: str, sources: list[str]) -> EditResult:
    """Append a new `add_executable` block to the end of the document."""
    block = f"\nadd_executable({name}\n{_format_entries(sources)})\n"
    return EditResult(content + block, APPENDED, list(sources))


def add_target_sources(content: str, name: str, sources: Iterable[str]) -> EditResult:
    """
    Merge sources into the target's block, or append a new block.

    Paths are separator-normalized and de-duplicated first. Whether the files
    exist is not checked here.
    """
    normalized = remove_duplicates(normalize_path(s) for s in sources)

    block = find_target_block(content, name)
    if block is not None:
        return merge_target_sources(content, block, normalized)
    return append_target(content, name, normalized)


def find_cxx_standard(content: str) -> Optional[int]:
    match = CXX_STANDARD_VALUE_RE.search(content)
    return int(match.group(1)) if match else None


def upsert_cxx_standard(content: str, standard: int) -> EditResult:
    """
    Set the C++ standard.

    Replaces the first `set(CMAKE_CXX_STANDARD N)` line when there is one;
    otherwise appends the setting together with its REQUIRED companion.
    """
    statement = f"set(CMAKE_CXX_STANDARD {standard})"
    match = CXX_STANDARD_RE.search(content)
    if match:
        if match.group(0) == statement:
            return EditResult(content, UNCHANGED)
        new_content = content[: match.start()] + statement + content[match.end() :]
        return EditResult(new_content, REPLACED, [statement])

    block = (
        f"\n# C++ Standard\n{statement}\nset(CMAKE_CXX_STANDARD_REQUIRED ON)\n"
    )
    return EditResult(content + block, APPENDED, [statement])


def has_standard_settings(content: str) -> bool:
    return any(marker in content for marker in STANDARD_MARKERS)


def install_rule(targets: list[str]) -> str:
    if targets:
        return f"# Add install target\ninstall(TARGETS {' '.join(targets)} DESTINATION bin)\n"
    return "# Add install target\n# No targets found to install\n"


def add_standard_settings(content: str) -> EditResult:
    """
    Append the standard settings bundle unless it is already present.

    The bundle is compiler warnings, output directories, include path,
    testing and an install rule for every executable declared so far.
    """
    if has_standard_settings(content):
        return EditResult(content, UNCHANGED)

    bundle = f"\n{STANDARD_SETTINGS}\n{install_rule(find_executable_targets(content))}"
    return EditResult(content + bundle, APPENDED, list(STANDARD_MARKERS))


def ensure_subdirectory(content: str, name: str) -> EditResult:
    """Append `add_subdirectory(name)` unless that exact statement exists."""
    statement = f"add_subdirectory({name})"
    if statement in content:
        return EditResult(content, UNCHANGED)
    block = f"\n# Sub-project {name}\n{statement}\n"
    return EditResult(content + block, APPENDED, [statement])


def ensure_link(content: str, parent: str, child: str) -> EditResult:
    """Append a private link from parent to child unless already declared."""
    statement = f"target_link_libraries({parent} PRIVATE {child})"
    if statement in content:
        return EditResult(content, UNCHANGED)
    block = f"\n# Link {child} into {parent}\n{statement}\n"
    return EditResult(content + block, APPENDED, [statement])


def find_executable_targets(content: str) -> list[str]:
    return EXECUTABLE_RE.findall(content)


def find_library_targets(content: str) -> list[str]:
    return LIBRARY_RE.findall(content)


def find_subdirectories(content: str) -> list[str]:
    return SUBDIRECTORY_RE.findall(content)


def find_project_name(content: str) -> Optional[str]:
    match = PROJECT_RE.search(content)
    return match.group(1) if match else None


def find_duplicate_targets(content: str) -> list[str]:
    """Names declared by more than one `add_executable` statement."""
    counts = Counter(find_executable_targets(content))
    return [name for name, count in counts.items() if count > 1]

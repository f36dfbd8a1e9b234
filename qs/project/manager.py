"""
qs.project.manager - Document-editing operations

This module provides the ProjectManager class which handles:
- Resolving the source files of a target (files, globs, directories)
- Adding or extending executable targets
- Applying the standard settings bundle and the C++ standard
- Linking sub-projects into the parent document

Each operation loads the document, computes the new text in memory with
qs.project.editor, and writes it back once.
"""

import glob
from typing import Optional

from qs.console import Console
from qs.project import editor
from qs.project.config import ProjectConfig
from qs.project.probe import (
    contains_glob_char,
    file_exists,
    find_main_file,
    find_source_files,
    is_dir,
    is_source_file,
    normalize_path,
    remove_duplicates,
)


class NoSourcesError(ValueError):
    """Raised when a target resolves to an empty list of source files."""


class ProjectManager:
    """
    Applies incremental edits to a project's CMakeLists.txt.

    Source paths given to the manager are interpreted relative to the
    project root.
    """

    def __init__(self, config: ProjectConfig, console: Optional[Console] = None):
        """
        Initialize a ProjectManager with a project configuration.

        Args:
            config: A loaded ProjectConfig instance
            console: Where to report progress (default: a fresh Console)
        """
        self.config = config
        self.console = console or Console()

    @property
    def project_root(self) -> str:
        return self.config.project_root

    def _load(self) -> str:
        content = self.config.read_document()
        self.config.parse(content)
        self.console.trace(f"Loaded {self.config.document_path}")
        return content

    def _save(self, content: str) -> None:
        self.config.write_document(content)
        self.config.refresh()
        self.console.trace(f"Wrote {self.config.document_path}")

    def _expand_glob(self, pattern: str) -> list[str]:
        matches = sorted(glob.glob(pattern, root_dir=self.project_root))
        if not matches:
            self.console.warning(f"No files match pattern '{pattern}'")
            return []
        return [m for m in matches if is_source_file(m)]

    def resolve_sources(self, target: str, patterns: Optional[list[str]] = None) -> list[str]:
        """
        Work out the source files for a target.

        With arguments, each one is expanded as a glob pattern if it contains
        glob characters, taken as-is if it names a file, or scanned one level
        deep if it names a directory. Without arguments, a directory named
        after the target is scanned, else `<target>.{cpp,cc,c,cxx}` is probed.

        Args:
            target: Target name
            patterns: Files, glob patterns or directories

        Returns:
            De-duplicated, forward-slash source paths.

        Raises:
            NoSourcesError: If nothing could be resolved.
        """
        root = self.project_root
        sources: list[str] = []

        if not patterns:
            if is_dir(target, root):
                sources = find_source_files(target, root)
                if not sources:
                    raise NoSourcesError(f"No source files found in directory '{target}'")
            else:
                main_file = find_main_file(target, root)
                if main_file is None:
                    raise NoSourcesError(
                        f"No source file found for target '{target}' "
                        "(tried .cpp, .cc, .c, .cxx extensions)"
                    )
                sources = [main_file]
        else:
            for pattern in patterns:
                if contains_glob_char(pattern):
                    sources.extend(self._expand_glob(pattern))
                elif file_exists(pattern, root):
                    sources.append(pattern)
                elif is_dir(pattern, root):
                    sources.extend(find_source_files(pattern, root))
                else:
                    self.console.warning(f"File '{pattern}' not found")

        if not sources:
            raise NoSourcesError("No source files found for target")

        return remove_duplicates(normalize_path(s) for s in sources)

    def add_target(self, target: str, patterns: Optional[list[str]] = None) -> editor.EditResult:
        """
        Add an executable target, or extend it if it is already declared.

        Raises:
            NoSourcesError: If no source files could be resolved.
            OSError: If the document cannot be read or written.
        """
        content = self._load()
        sources = self.resolve_sources(target, patterns)

        if target in editor.find_duplicate_targets(content):
            self.console.warning(
                f"Target '{target}' is declared more than once; only the first "
                "declaration is edited"
            )

        result = editor.add_target_sources(content, target, sources)

        if result.action == editor.UNCHANGED:
            self.console.info(
                f"Target '{target}' already lists all {len(sources)} source files"
            )
            return result

        self._save(result.content)

        if result.action == editor.MERGED:
            self.console.info(
                f"Updated existing target '{target}' with "
                f"{len(result.added)} additional source files"
            )
        else:
            self.console.info(
                f"Added executable target '{target}' with {len(result.added)} source files"
            )
        return result

    def add_standard_config(self, cxx_standard: Optional[int] = None) -> editor.EditResult:
        """
        Apply the standard settings bundle and, optionally, a C++ standard.

        The standard is upserted regardless of whether the bundle is already
        present. The document is only written when something changed.

        Args:
            cxx_standard: C++ standard to set (e.g. 17), or None to leave it

        Returns:
            An EditResult whose action is UNCHANGED if nothing was written,
            APPENDED if the bundle or a new standard line was appended, and
            REPLACED if only the standard value was rewritten.
        """
        content = self._load()
        action = editor.UNCHANGED
        added: list[str] = []

        if cxx_standard:
            std_result = editor.upsert_cxx_standard(content, cxx_standard)
            content = std_result.content
            if std_result.action == editor.REPLACED:
                self.console.info(f"Updated C++ standard to C++{cxx_standard}")
            elif std_result.action == editor.APPENDED:
                self.console.info(f"Set C++ standard to C++{cxx_standard}")
            else:
                self.console.info(f"C++ standard already set to C++{cxx_standard}")
            if std_result.changed:
                action = std_result.action
                added.extend(std_result.added)

        bundle_result = editor.add_standard_settings(content)
        content = bundle_result.content
        if bundle_result.changed:
            self.console.info("Added standard CMake configuration")
            action = bundle_result.action
            added.extend(bundle_result.added)
        else:
            self.console.info("Standard CMake configuration already present")

        if action != editor.UNCHANGED:
            self._save(content)
        return editor.EditResult(content, action, added)

    def link_subproject(self, name: str) -> editor.EditResult:
        """
        Include a sub-project directory and link it into the primary target.

        Both statements are only added when missing, so linking the same
        sub-project twice leaves the document unchanged.
        """
        content = self._load()

        sub_result = editor.ensure_subdirectory(content, name)
        if sub_result.changed:
            self.console.success(f"Added add_subdirectory({name})")
        else:
            self.console.info(f"Sub-project '{name}' is already included")

        if not self.config.executables:
            # target_link_libraries on an undeclared target fails at configure time
            self.console.warning(
                f"No executable target declared; link {name} manually once one exists"
            )
            if sub_result.changed:
                self._save(sub_result.content)
            return sub_result

        parent = self.config.primary_target
        link_result = editor.ensure_link(sub_result.content, parent, name)
        if link_result.changed:
            self.console.success(f"Linked {name} into {parent}")
        else:
            self.console.info(f"'{name}' is already linked into '{parent}'")

        if not (sub_result.changed or link_result.changed):
            return link_result

        self._save(link_result.content)
        return editor.EditResult(
            link_result.content,
            editor.APPENDED,
            sub_result.added + link_result.added,
        )

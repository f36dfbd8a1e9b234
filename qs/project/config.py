"""
qs.project.config - Project configuration view

This module reads a project's CMakeLists.txt and exposes what qs needs to
know about it (project name, C++ standard, declared targets) together with
the standard locations of the build tree.

The document on disk is the only persistent state: a ProjectConfig is a
snapshot taken when it was loaded, and every operation re-reads the document
before editing it.
"""

import os
from dataclasses import dataclass, field
from typing import Optional

from qs.project import editor

DOCUMENT_FILENAME = "CMakeLists.txt"
BUILD_DIRNAME = "build"
CMAKE_MINIMUM_VERSION = "3.10"
DEFAULT_CXX_STANDARD = 14
SUPPORTED_CXX_STANDARDS = (11, 14, 17, 20)
CMAKE_DOCS_URL = "https://cmake.org/cmake/help/latest/index.html"


def get_cmake_command() -> str:
    """The cmake executable, overridable with QS_CMAKE."""
    return os.environ.get("QS_CMAKE") or "cmake"


def get_make_command() -> str:
    """The make executable, overridable with QS_MAKE."""
    return os.environ.get("QS_MAKE") or "make"


@dataclass
class ProjectConfig:
    """
    Represents a CMake project rooted at the directory holding CMakeLists.txt.

    Fields parsed from the document:
        name: Argument of the `project(...)` statement
        cxx_standard: Value of `set(CMAKE_CXX_STANDARD N)`
        executables: Names declared with add_executable, in document order
        libraries: Names declared with add_library, in document order
        subdirectories: Names passed to add_subdirectory

    Computed fields:
        project_root: Absolute path to the directory containing the document
    """

    project_root: str
    name: Optional[str] = None
    cxx_standard: Optional[int] = None
    executables: list[str] = field(default_factory=list)
    libraries: list[str] = field(default_factory=list)
    subdirectories: list[str] = field(default_factory=list)

    @property
    def document_path(self) -> str:
        return os.path.join(self.project_root, DOCUMENT_FILENAME)

    @property
    def build_dir(self) -> str:
        return os.path.join(self.project_root, BUILD_DIRNAME)

    @property
    def bin_dir(self) -> str:
        return os.path.join(self.build_dir, "bin")

    @property
    def executables_dir(self) -> str:
        """Where built executables land: build/bin, else the build dir itself."""
        if os.path.isdir(self.bin_dir):
            return self.bin_dir
        return self.build_dir

    @property
    def primary_target(self) -> str:
        """The first executable target, falling back to the project name."""
        if self.executables:
            return self.executables[0]
        return self.name or os.path.basename(self.project_root)

    def has_build_dir(self) -> bool:
        return os.path.isdir(self.build_dir)

    def read_document(self) -> str:
        """Read the current document text from disk."""
        with open(self.document_path, encoding="utf-8") as f:
            return f.read()

    def write_document(self, content: str) -> None:
        """Replace the document on disk with content."""
        with open(self.document_path, "w", encoding="utf-8") as f:
            f.write(content)

    def refresh(self) -> None:
        """Re-parse the fields from the document on disk."""
        self.parse(self.read_document())

    def parse(self, content: str) -> None:
        """Update the parsed fields from document text."""
        self.name = editor.find_project_name(content)
        self.cxx_standard = editor.find_cxx_standard(content)
        self.executables = editor.find_executable_targets(content)
        self.libraries = editor.find_library_targets(content)
        self.subdirectories = editor.find_subdirectories(content)

    @classmethod
    def load(cls, path: Optional[str] = None) -> "ProjectConfig":
        """
        Load a ProjectConfig from a CMakeLists.txt file.

        Args:
            path: Path to CMakeLists.txt, the directory containing it, or None
                  to use the current directory.

        Returns:
            Loaded ProjectConfig instance.

        Raises:
            FileNotFoundError: If there is no CMakeLists.txt at that location.
        """
        if path is None:
            project_root = os.getcwd()
        elif os.path.isfile(path):
            project_root = os.path.dirname(os.path.abspath(path))
        else:
            project_root = os.path.abspath(path)

        config = cls(project_root=project_root)
        if not os.path.isfile(config.document_path):
            raise FileNotFoundError(
                f"{DOCUMENT_FILENAME} not found. Run 'qs init' first."
            )

        config.refresh()
        return config


def load_config(path: Optional[str] = None) -> ProjectConfig:
    """
    Convenience function to load a ProjectConfig.

    Args:
        path: Path to CMakeLists.txt, directory containing it, or None for the
              current directory.
    """
    return ProjectConfig.load(path)

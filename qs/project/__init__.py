"""
qs.project - CMake project system

This package contains the project management system for qs, including:

- probe.py: Filesystem predicates and source discovery
- editor.py: Pure, pattern-based CMakeLists.txt editing
- config.py: Read-only view of a project's CMakeLists.txt
- manager.py: Target, settings and sub-project edits
- scaffold.py: Project scaffolding for 'qs init' and 'qs init sub'
- build.py: cmake/make builds, running and listing targets

Usage:
    from qs.project import ProjectConfig, ProjectManager, init_project

    # Create a project in the current directory
    init_project()

    # Add sources to a target
    manager = ProjectManager(ProjectConfig.load())
    manager.add_target("app", ["src/*.cc"])
"""

from qs.project.build import (
    BuildError,
    build_project,
    find_built_executables,
    list_targets,
    open_documentation,
    run_target,
)
from qs.project.config import (
    CMAKE_DOCS_URL,
    DEFAULT_CXX_STANDARD,
    DOCUMENT_FILENAME,
    SUPPORTED_CXX_STANDARDS,
    ProjectConfig,
    load_config,
)
from qs.project.editor import EditResult, TargetBlock
from qs.project.manager import NoSourcesError, ProjectManager
from qs.project.scaffold import (
    generate_cmakelists,
    generate_main_source,
    generate_subproject_cmakelists,
    generate_subproject_header,
    generate_subproject_source,
    init_project,
    init_subproject,
)

__all__ = [
    # Build
    "build_project",
    "run_target",
    "list_targets",
    "find_built_executables",
    "open_documentation",
    "BuildError",
    # Config
    "ProjectConfig",
    "load_config",
    "DOCUMENT_FILENAME",
    "DEFAULT_CXX_STANDARD",
    "SUPPORTED_CXX_STANDARDS",
    "CMAKE_DOCS_URL",
    # Editor
    "EditResult",
    "TargetBlock",
    # Manager
    "ProjectManager",
    "NoSourcesError",
    # Scaffold
    "init_project",
    "init_subproject",
    "generate_cmakelists",
    "generate_main_source",
    "generate_subproject_cmakelists",
    "generate_subproject_header",
    "generate_subproject_source",
]

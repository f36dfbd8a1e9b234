"""
qs.project.scaffold - Project scaffolding

This module provides functionality for creating new CMake projects and
sub-projects with the standard layout and starter sources.

`qs init` creates, in the current directory:
    CMakeLists.txt       # Skeleton with the standard settings
    src/
    └── main.cc          # Hello world entry point

`qs init sub <name>` creates:
    name/
    ├── CMakeLists.txt   # Library build with install rules
    ├── include/
    │   └── name.h
    └── src/
        └── name.cpp
"""

import os
import re
from typing import Optional

from qs.console import Console
from qs.project.config import (
    CMAKE_MINIMUM_VERSION,
    DEFAULT_CXX_STANDARD,
    DOCUMENT_FILENAME,
    ProjectConfig,
)
from qs.project.editor import STANDARD_SETTINGS
from qs.project.manager import ProjectManager
from qs.project.probe import file_exists, is_home_directory

MAIN_SOURCE_PATH = "src/main.cc"


def to_class_name(name: str) -> str:
    """
    Convert a sub-project name to a C++ class name.

    "my-lib" and "my_lib" both become "MyLib". A leading digit is prefixed
    with an underscore.
    """
    parts = [p for p in re.split(r"[^0-9A-Za-z]+", name) if p]
    class_name = "".join(p[:1].upper() + p[1:] for p in parts)
    if not class_name:
        raise ValueError(f"Invalid sub-project name: '{name}' has no usable characters")
    if class_name[0].isdigit():
        class_name = "_" + class_name
    return class_name


def to_macro_name(name: str) -> str:
    """Convert a sub-project name to an include guard prefix."""
    return re.sub(r"[^0-9A-Za-z]+", "_", name).strip("_").upper()


def generate_cmakelists(name: str, cxx_standard: int = DEFAULT_CXX_STANDARD) -> str:
    """
    Generate the skeleton CMakeLists.txt for a new project.

    Args:
        name: Project name
        cxx_standard: Initial C++ standard (default: 14)

    Returns:
        The CMakeLists.txt content as a string
    """
    return f"""cmake_minimum_required(VERSION {CMAKE_MINIMUM_VERSION})
project({name})

set(CMAKE_CXX_STANDARD {cxx_standard})
set(CMAKE_CXX_STANDARD_REQUIRED ON)

{STANDARD_SETTINGS}"""


def generate_main_source() -> str:
    """Generate the hello world main.cc for a new project."""
    return """#include <iostream>

int main() {
    std::cout << "Hello, World!" << std::endl;
    return 0;
}
"""


def generate_subproject_cmakelists(name: str) -> str:
    """
    Generate the CMakeLists.txt of a library sub-project.

    Sources and headers are collected with GLOB_RECURSE and the include
    directory is exported publicly so that linking targets pick it up.

    Args:
        name: Sub-project (and library target) name

    Returns:
        The CMakeLists.txt content as a string
    """
    return f"""cmake_minimum_required(VERSION {CMAKE_MINIMUM_VERSION})
project({name})

# Collect sources and headers
file(GLOB_RECURSE {to_macro_name(name)}_SOURCES CONFIGURE_DEPENDS
    ${{CMAKE_CURRENT_SOURCE_DIR}}/src/*.cpp
    ${{CMAKE_CURRENT_SOURCE_DIR}}/src/*.cc
    ${{CMAKE_CURRENT_SOURCE_DIR}}/src/*.c
    ${{CMAKE_CURRENT_SOURCE_DIR}}/src/*.cxx
)
file(GLOB_RECURSE {to_macro_name(name)}_HEADERS CONFIGURE_DEPENDS
    ${{CMAKE_CURRENT_SOURCE_DIR}}/include/*.h
    ${{CMAKE_CURRENT_SOURCE_DIR}}/include/*.hpp
    ${{CMAKE_CURRENT_SOURCE_DIR}}/include/*.hxx
)

add_library({name}
    ${{{to_macro_name(name)}_SOURCES}}
    ${{{to_macro_name(name)}_HEADERS}}
)

target_include_directories({name} PUBLIC
    $<BUILD_INTERFACE:${{CMAKE_CURRENT_SOURCE_DIR}}/include>
    $<INSTALL_INTERFACE:include>
)

# Install rules
install(TARGETS {name}
    ARCHIVE DESTINATION lib
    LIBRARY DESTINATION lib
    RUNTIME DESTINATION bin
)
install(DIRECTORY include/ DESTINATION include)
"""


def generate_subproject_header(name: str) -> str:
    guard = f"{to_macro_name(name)}_H"
    class_name = to_class_name(name)
    return f"""#ifndef {guard}
#define {guard}

class {class_name} {{
public:
    void hello() const;
}};

#endif // {guard}
"""


def generate_subproject_source(name: str) -> str:
    class_name = to_class_name(name)
    return f"""#include "{name}.h"

#include <iostream>

void {class_name}::hello() const {{
    std::cout << "Hello from {name}!" << std::endl;
}}
"""


def _write_new_file(path: str, content: str, console: Console) -> bool:
    """Write content to path unless the file already exists."""
    if os.path.exists(path):
        console.info(f"  {path} already exists, leaving it untouched")
        return False
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)
    console.trace(f"Created {path}")
    return True


def init_project(path: Optional[str] = None, console: Optional[Console] = None) -> str:
    """
    Initialize a CMake project in an existing directory.

    Writes the skeleton CMakeLists.txt and src/main.cc, then adds an
    executable target named after the directory.

    Args:
        path: Project directory (default: current directory)
        console: Where to report progress

    Returns:
        Absolute path to the project directory

    Raises:
        ValueError: If the directory is the user's home directory
        FileExistsError: If CMakeLists.txt already exists
        OSError: If writing a file fails
    """
    console = console or Console()
    project_root = os.path.abspath(path or os.getcwd())

    if is_home_directory(project_root):
        raise ValueError(
            "Cannot initialize a CMake project in your home directory. "
            "Please create a new directory for your project and run 'qs init' there."
        )

    document_path = os.path.join(project_root, DOCUMENT_FILENAME)
    if file_exists(document_path):
        raise FileExistsError(
            f"{DOCUMENT_FILENAME} already exists. Run 'qs add' to add targets."
        )

    name = os.path.basename(project_root)
    with open(document_path, "w", encoding="utf-8") as f:
        f.write(generate_cmakelists(name))
    console.info(f"Initialized CMake project '{name}'")

    os.makedirs(os.path.join(project_root, "src"), exist_ok=True)
    main_path = os.path.join(project_root, MAIN_SOURCE_PATH)
    if _write_new_file(main_path, generate_main_source(), console):
        console.info("Initialized project with main.cc")

    manager = ProjectManager(ProjectConfig.load(project_root), console)
    manager.add_target(name, [MAIN_SOURCE_PATH])

    return project_root


def init_subproject(
    name: str, path: Optional[str] = None, console: Optional[Console] = None
) -> str:
    """
    Create a library sub-project and wire it into the parent project.

    Existing files are never overwritten, so running this twice for the same
    name only re-checks the parent's add_subdirectory and link statements.

    Args:
        name: Sub-project directory and library target name
        path: Parent project directory (default: current directory)
        console: Where to report progress

    Returns:
        Absolute path to the sub-project directory

    Raises:
        ValueError: If the name is empty or not a plain directory name
        FileNotFoundError: If the parent has no CMakeLists.txt
        OSError: If creating a directory or file fails
    """
    console = console or Console()
    name = name.strip() if name else ""
    if not name:
        raise ValueError("Sub-project name must not be empty")
    if "/" in name or "\\" in name:
        raise ValueError(f"Sub-project name must be a single directory name: '{name}'")
    to_class_name(name)

    parent_root = os.path.abspath(path or os.getcwd())
    config = ProjectConfig.load(parent_root)

    sub_root = os.path.join(parent_root, name)
    if not os.path.isdir(sub_root):
        console.info(f"Creating sub-project directory '{name}'")
    for directory in (sub_root, os.path.join(sub_root, "include"), os.path.join(sub_root, "src")):
        os.makedirs(directory, exist_ok=True)

    if _write_new_file(
        os.path.join(sub_root, DOCUMENT_FILENAME),
        generate_subproject_cmakelists(name),
        console,
    ):
        console.success(f"Created {name}/{DOCUMENT_FILENAME}")
    if _write_new_file(
        os.path.join(sub_root, "include", f"{name}.h"),
        generate_subproject_header(name),
        console,
    ):
        console.success(f"Created {name}/include/{name}.h")
    if _write_new_file(
        os.path.join(sub_root, "src", f"{name}.cpp"),
        generate_subproject_source(name),
        console,
    ):
        console.success(f"Created {name}/src/{name}.cpp")

    ProjectManager(config, console).link_subproject(name)
    console.info(f"Initialized sub-project '{name}'")
    return sub_root

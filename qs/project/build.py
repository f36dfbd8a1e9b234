"""
qs.project.build - Build and run CMake projects

This module handles the commands that delegate to external tools:

- `qs build`  Configure with cmake in build/ and compile with make
- `qs run`    Run an executable from build/bin (or build/)
- `qs list`   List declared targets and built executables
- `qs doc`    Open the CMake documentation in a browser

Child processes inherit stdin/stdout/stderr and qs waits for each one to
exit. A non-zero exit status is reported once; nothing is retried.
"""

import os
import subprocess
import webbrowser
from typing import Optional

from qs.console import Console
from qs.project.config import (
    BUILD_DIRNAME,
    CMAKE_DOCS_URL,
    ProjectConfig,
    get_cmake_command,
    get_make_command,
)
from qs.project.probe import file_exists, find_executables


class BuildError(RuntimeError):
    """Raised when an external tool cannot be started or exits non-zero."""


def run_tool(cmd: list[str], cwd: Optional[str] = None) -> None:
    """
    Run an external command with inherited standard streams.

    Args:
        cmd: Command and arguments
        cwd: Working directory for the child process

    Raises:
        BuildError: If the command is missing or exits with a non-zero status.
    """
    try:
        subprocess.run(cmd, cwd=cwd, check=True)
    except subprocess.CalledProcessError as e:
        raise BuildError(f"{cmd[0]} exited with status {e.returncode}") from e
    except FileNotFoundError:
        raise BuildError(f"{cmd[0]} not found. Is it installed and on PATH?") from None


def build_project(config: ProjectConfig, console: Optional[Console] = None) -> str:
    """
    Configure and compile the project in its build directory.

    Returns:
        Path to the build directory

    Raises:
        BuildError: If cmake or make fails.
        OSError: If the build directory cannot be created.
    """
    console = console or Console()
    build_dir = config.build_dir

    if not os.path.isdir(build_dir):
        console.info(f"Creating {BUILD_DIRNAME} directory...")
        os.makedirs(build_dir)

    console.info("Running CMake...")
    run_tool([get_cmake_command(), ".."], cwd=build_dir)

    console.info("Running make...")
    run_tool([get_make_command()], cwd=build_dir)

    console.info("Build completed successfully!")
    return build_dir


def find_built_executables(config: ProjectConfig) -> list[str]:
    """Names of executables in the build output directory."""
    if not config.has_build_dir():
        return []
    return find_executables(config.executables_dir)


def run_target(
    config: ProjectConfig,
    target: Optional[str] = None,
    console: Optional[Console] = None,
) -> None:
    """
    Run a built executable.

    Without a target name the only built executable is run; if several are
    found they are listed and the user has to pick one.

    Raises:
        FileNotFoundError: If there is no build directory or no such target.
        ValueError: If no target was named and it cannot be inferred.
        BuildError: If the executable fails.
    """
    console = console or Console()

    if not config.has_build_dir():
        raise FileNotFoundError(
            f"{BUILD_DIRNAME} directory not found. "
            "Run 'qs build' to build the project first."
        )

    if not target:
        executables = find_built_executables(config)
        if not executables:
            raise ValueError(
                "No executable targets found in build directory. Specify a "
                "target name or build the project first with 'qs build'."
            )
        if len(executables) > 1:
            console.info("Multiple targets found:")
            for i, name in enumerate(executables, 1):
                console.info(f"  {i}. {name}")
            raise ValueError("Please specify a target name: qs run <target>")
        target = executables[0]
        console.info(f"Running target: {target}")

    target_path = os.path.join(config.executables_dir, target)
    if not file_exists(target_path):
        raise FileNotFoundError(f"Target '{target}' not found in build directory.")

    console.info(f"Running {target}...")
    run_tool([target_path])


def list_targets(config: ProjectConfig, console: Optional[Console] = None) -> bool:
    """
    Print the targets declared in the document and any built executables.

    Returns:
        True if at least one target was declared.
    """
    console = console or Console()

    if not config.executables and not config.libraries:
        console.info(f"No targets found in {os.path.basename(config.document_path)}.")
        return False

    console.info("Project targets:")

    if config.executables:
        console.info()
        console.info("Executables:")
        for i, name in enumerate(config.executables, 1):
            console.info(f"  {i}. {name}")

    if config.libraries:
        console.info()
        console.info("Libraries:")
        for i, name in enumerate(config.libraries, 1):
            console.info(f"  {i}. {name}")

    if config.subdirectories:
        console.info()
        console.info("Sub-projects:")
        for i, name in enumerate(config.subdirectories, 1):
            console.info(f"  {i}. {name}")

    built = find_built_executables(config)
    if built:
        console.info()
        console.info("Built executables:")
        for i, name in enumerate(built, 1):
            console.info(f"  {i}. {name}")

    return True


def open_documentation(console: Optional[Console] = None, url: str = CMAKE_DOCS_URL) -> bool:
    """
    Open the CMake documentation in the default browser.

    Returns:
        True if a browser was launched.
    """
    console = console or Console()
    console.info(f"Opening CMake documentation: {url}")

    try:
        opened = webbrowser.open(url)
    except webbrowser.Error as e:
        console.trace(f"Browser error: {e}")
        opened = False

    if not opened:
        console.error("Could not open a browser")
        console.info(f"Please open the following URL manually: {url}")
    return opened

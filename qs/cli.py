"""
qs.cli - qs Command Line Interface

This module provides the main CLI entry point for qs with subcommand support:

- qs init                 Initialize a new CMake project
- qs init sub <name>      Create a library sub-project and link it in
- qs add <target> [files] Add or extend an executable target
- qs std [cxx_std]        Add the standard configuration bundle
- qs build                Run cmake and make in build/
- qs run [target]         Run a built executable
- qs list                 List declared and built targets
- qs doc                  Open the CMake documentation
- qs version              Show version information
- qs help                 Show the help message

Reported errors do not change the exit status unless --strict is given.
"""

import argparse
import os
import sys
from typing import Optional

from qs import __version__
from qs.console import Console

# Known subcommands - anything else is reported as an unknown command
SUBCOMMANDS = {"init", "add", "std", "build", "run", "list", "doc", "version", "help"}


def cmd_init(args: argparse.Namespace, console: Console) -> int:
    """
    Initialize a project, or a sub-project with `init sub <name>`.

    Any other word after `init` is ignored and the project is initialized.
    """
    from qs.project.scaffold import init_project, init_subproject

    if args.kind == "sub":
        if not args.name:
            console.error("'init sub' requires a subdirectory name")
            return 1
        try:
            init_subproject(args.name, console=console)
            return 0
        except (ValueError, OSError) as e:
            console.error(str(e))
            return 1

    try:
        init_project(console=console)
        return 0
    except (ValueError, OSError) as e:
        console.error(str(e))
        return 1


def cmd_add(args: argparse.Namespace, console: Console) -> int:
    """Add source files to an executable target."""
    from qs.project import ProjectConfig, ProjectManager

    if not args.target:
        console.error("'add' requires a target name")
        return 1

    try:
        manager = ProjectManager(ProjectConfig.load(), console)
        manager.add_target(args.target, args.files)
        return 0
    except (ValueError, OSError) as e:
        console.error(str(e))
        return 1


def parse_cxx_standard(value: Optional[str], console: Console) -> Optional[int]:
    """Parse a `std` argument, warning about unsupported values."""
    from qs.project.config import SUPPORTED_CXX_STANDARDS

    if value is None:
        return None
    try:
        standard = int(value)
    except ValueError:
        standard = None
    if standard not in SUPPORTED_CXX_STANDARDS:
        console.warning("Invalid C++ standard, using default")
        return None
    return standard


def cmd_std(args: argparse.Namespace, console: Console) -> int:
    """Add standard configuration, optionally setting the C++ standard."""
    from qs.project import ProjectConfig, ProjectManager

    cxx_standard = parse_cxx_standard(args.cxx_std, console)

    try:
        manager = ProjectManager(ProjectConfig.load(), console)
        manager.add_standard_config(cxx_standard)
        return 0
    except OSError as e:
        console.error(str(e))
        return 1


def cmd_build(args: argparse.Namespace, console: Console) -> int:
    """Configure and compile the project."""
    from qs.project import BuildError, ProjectConfig, build_project

    try:
        config = ProjectConfig.load()
    except FileNotFoundError:
        console.error("CMakeLists.txt not found in the current directory.")
        console.info("Run 'qs init' to create a new CMake project.")
        return 1

    try:
        build_project(config, console)
        return 0
    except (BuildError, OSError) as e:
        console.error(str(e))
        return 1


def cmd_run(args: argparse.Namespace, console: Console) -> int:
    """Run a built executable."""
    from qs.project import BuildError, ProjectConfig, run_target

    try:
        config = ProjectConfig.load()
    except FileNotFoundError:
        # Running only needs the build tree
        config = ProjectConfig(project_root=os.getcwd())

    try:
        run_target(config, args.target, console)
        return 0
    except (BuildError, ValueError, OSError) as e:
        console.error(str(e))
        return 1


def cmd_list(args: argparse.Namespace, console: Console) -> int:
    """List declared and built targets."""
    from qs.project import ProjectConfig, list_targets

    try:
        config = ProjectConfig.load()
    except FileNotFoundError:
        console.error("CMakeLists.txt not found in the current directory.")
        console.info("Run 'qs init' to create a new CMake project.")
        return 1
    except OSError as e:
        console.error(f"Error reading CMakeLists.txt: {e}")
        return 1

    list_targets(config, console)
    return 0


def cmd_doc(args: argparse.Namespace, console: Console) -> int:
    """Open the CMake documentation in a browser."""
    from qs.project import open_documentation

    return 0 if open_documentation(console) else 1


def cmd_version(args: argparse.Namespace, console: Console) -> int:
    console.info(f"qs version {__version__}")
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="qs",
        description="qs - Quick Setup for CMake projects",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
examples:
  qs init                       Initialize a CMake project in this directory
  qs init sub core              Create the 'core' library sub-project
  qs add app src/*.cpp          Add an executable target from a glob
  qs std 17                     Add standard settings and use C++17
  qs build                      Configure and compile in build/
  qs run app                    Run build/bin/app
        """,
    )

    parser.add_argument(
        "--log",
        metavar="FILE",
        help="Append a trace of every operation to FILE",
    )

    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 when an error is reported",
    )

    subparsers = parser.add_subparsers(dest="subcommand", help="Available commands")

    # init subcommand
    init_parser = subparsers.add_parser(
        "init",
        help="Initialize a new CMake project (or 'init sub <name>' for a sub-project)",
    )
    init_parser.add_argument("kind", nargs="?", help="'sub' to create a sub-project")
    init_parser.add_argument("name", nargs="?", help="Sub-project directory name")

    # add subcommand
    add_parser = subparsers.add_parser("add", help="Add executable or library target")
    add_parser.add_argument("target", nargs="?", help="Target name")
    add_parser.add_argument(
        "files",
        nargs="*",
        help="Source files, directories or glob patterns like *.cpp",
    )

    # std subcommand
    std_parser = subparsers.add_parser(
        "std",
        help="Add standard CMake configuration with optional C++ standard (11/14/17/20)",
    )
    std_parser.add_argument("cxx_std", nargs="?", help="C++ standard")

    subparsers.add_parser("build", help="Create build directory, run cmake and make")

    run_parser = subparsers.add_parser(
        "run",
        help="Run the specified executable target (or the only one built)",
    )
    run_parser.add_argument("target", nargs="?", help="Executable name")

    subparsers.add_parser("list", help="List all available targets in the project")
    subparsers.add_parser("doc", help="Open CMake documentation in the default browser")
    subparsers.add_parser("version", help="Show version information")
    subparsers.add_parser("help", help="Show this help message")

    return parser


def _first_command(argv: list[str]) -> Optional[str]:
    """Return the first positional argument, skipping global options."""
    skip_next = False
    for arg in argv:
        if skip_next:
            skip_next = False
            continue
        if arg == "--log":
            skip_next = True
            continue
        if arg.startswith("-"):
            continue
        return arg
    return None


COMMANDS = {
    "init": cmd_init,
    "add": cmd_add,
    "std": cmd_std,
    "build": cmd_build,
    "run": cmd_run,
    "list": cmd_list,
    "doc": cmd_doc,
    "version": cmd_version,
}


def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point for the qs CLI. Calls sys.exit with return code."""
    sys.exit(_main(argv))


def _main(argv: Optional[list[str]] = None) -> int:
    """Internal main that returns exit code."""
    if argv is None:
        argv = sys.argv[1:]

    parser = create_parser()

    command = _first_command(argv)
    if command is not None and command not in SUBCOMMANDS:
        print(f"Unknown command: {command}")
        parser.print_help()
        return 0

    args = parser.parse_args(argv)

    if args.subcommand is None or args.subcommand == "help":
        parser.print_help()
        return 0

    log_file = None
    if args.log:
        try:
            log_file = open(args.log, "a", encoding="utf-8")
        except OSError as e:
            print(f"Error: cannot open log file: {e}", file=sys.stderr)
            return 1 if args.strict else 0

    try:
        console = Console(log_file=log_file)
        console.trace(f"qs {' '.join(argv)} (cwd: {os.getcwd()})")
        status = COMMANDS[args.subcommand](args, console)
        if console.errors and not status:
            status = 1
    finally:
        if log_file:
            log_file.close()

    if args.strict:
        return status
    return 0


if __name__ == "__main__":
    main()

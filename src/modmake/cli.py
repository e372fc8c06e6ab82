"""
Command-line interface for modmake.

This module provides the `modmake` CLI tool for building modular projects.
"""

import argparse
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from modmake import __version__
from modmake.build import BuildOrchestrator, Run
from modmake.cli_utils import ErrorFormatter, PathValidator
from modmake.config import ProjectConfig


@dataclass
class BuildArgs:
    """Arguments for the build command."""

    project_dir: Path
    debug: Optional[bool] = None
    dry_run: Optional[bool] = None
    offline: Optional[bool] = None
    name: Optional[str] = None
    version: Optional[str] = None


def build_command(args: BuildArgs, argv: Optional[List[str]] = None) -> None:
    """Build all realms of a project.

    Examples:
        modmake build                        # Build project in current directory
        modmake build path/to/project       # Build specific project
        modmake build --debug               # Debug output, dependency summary
        modmake build --dry-run             # Discover realms and stop
        modmake build --offline             # Use previously fetched modules only
    """
    try:
        config = ProjectConfig.load(
            args.project_dir,
            name=args.name,
            version=args.version,
            debug=args.debug,
            dry_run=args.dry_run,
            offline=args.offline,
        )
        orchestrator = BuildOrchestrator.of(config)
        run = Run.create(config.debug, sys.stdout, sys.stderr)
        code = orchestrator.run(run, argv or [])
        sys.exit(code)

    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, bool(args.debug))


def _flag(value: bool) -> Optional[bool]:
    """Map an unset store_true flag to None so lower config layers apply."""
    return True if value else None


def main() -> None:
    """modmake - build orchestrator for modular Java projects."""
    parser = argparse.ArgumentParser(
        prog="modmake",
        description="modmake - build orchestrator for modular Java projects",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"modmake {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    build_parser = subparsers.add_parser(
        "build",
        help="Compile, package, test and document all realms",
    )
    build_parser.add_argument(
        "project_dir",
        nargs="?",
        type=Path,
        default=Path.cwd(),
        help="Project directory (default: current directory)",
    )
    build_parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Show debug output and run the dependency summary",
    )
    build_parser.add_argument(
        "-n",
        "--dry-run",
        action="store_true",
        help="Discover realms and modules without building",
    )
    build_parser.add_argument(
        "--offline",
        action="store_true",
        help="Never download, use previously fetched modules only",
    )
    build_parser.add_argument(
        "--name",
        default=None,
        help="Project name (default: project directory name)",
    )
    build_parser.add_argument(
        "--project-version",
        default=None,
        help="Project version (default: 1.0.0-SNAPSHOT)",
    )

    argv = sys.argv[1:]
    parsed_args = parser.parse_args(argv)

    if not parsed_args.command:
        parser.print_help()
        sys.exit(0)

    PathValidator.validate_project_dir(parsed_args.project_dir)

    if parsed_args.command == "build":
        build_args = BuildArgs(
            project_dir=parsed_args.project_dir,
            debug=_flag(parsed_args.debug),
            dry_run=_flag(parsed_args.dry_run),
            offline=_flag(parsed_args.offline),
            name=parsed_args.name,
            version=parsed_args.project_version,
        )
        build_command(build_args, argv)


if __name__ == "__main__":
    main()

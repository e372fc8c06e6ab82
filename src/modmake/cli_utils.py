"""CLI utility functions for modmake.

This module provides common utilities used across CLI commands including:
- Error handling and formatting
- Project path validation
"""

import sys
import traceback
from pathlib import Path


class ErrorFormatter:
    """Formats and displays error messages with ANSI color codes."""

    # ANSI color codes
    RED = "\033[1;31m"
    YELLOW = "\033[1;33m"
    RESET = "\033[0m"

    @staticmethod
    def print_error(title: str, message: str) -> None:
        """Print formatted error message.

        Args:
            title: Error title (e.g., "Configuration error")
            message: Error message details
        """
        print(file=sys.stderr)
        print(f"{ErrorFormatter.RED}✗ {title}{ErrorFormatter.RESET}", file=sys.stderr)
        print(file=sys.stderr)
        print(message, file=sys.stderr)
        print(file=sys.stderr)

    @staticmethod
    def print_warning(message: str) -> None:
        """Print formatted warning message."""
        print(file=sys.stderr)
        print(f"{ErrorFormatter.YELLOW}✗ {message}{ErrorFormatter.RESET}", file=sys.stderr)

    @staticmethod
    def handle_keyboard_interrupt() -> None:
        """Handle KeyboardInterrupt with standard formatting."""
        ErrorFormatter.print_warning("Build interrupted")
        sys.exit(130)  # Standard exit code for SIGINT

    @staticmethod
    def handle_unexpected_error(error: Exception, verbose: bool = False) -> None:
        """Handle errors raised before the build starts.

        Args:
            error: The exception to handle
            verbose: Whether to print traceback
        """
        ErrorFormatter.print_error("Build failed", f"{type(error).__name__}: {error}")
        if verbose:
            print("Traceback:", file=sys.stderr)
            print(traceback.format_exc(), file=sys.stderr)
        sys.exit(1)


class PathValidator:
    """Validates project paths and directories."""

    @staticmethod
    def validate_project_dir(project_dir: Path) -> None:
        """Validate that project directory exists and is a directory.

        Raises:
            SystemExit: If path doesn't exist or isn't a directory
        """
        if not project_dir.exists():
            ErrorFormatter.print_error("Error: Path does not exist", str(project_dir))
            sys.exit(2)
        if not project_dir.is_dir():
            ErrorFormatter.print_error("Error: Path is not a directory", str(project_dir))
            sys.exit(2)

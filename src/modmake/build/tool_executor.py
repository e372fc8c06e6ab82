"""Tool Executor.

This module handles executing JDK tools via subprocess.

Design:
    - Tools are opaque executables: an argument list in, an exit code out
    - Invocations are synchronous; the build blocks until the tool exits
    - Tool output is captured and forwarded to the run's sinks
    - A non-zero exit code aborts the build with the tool name and code
    - Launched processes (test runs) inherit stdio and are awaited without
      a timeout
"""

import logging
import subprocess
from pathlib import Path
from typing import Sequence

from ..packages.jdk import JavaDevelopmentKit
from .run_context import Run


class ToolInvocationError(Exception):
    """Raised when an invoked tool returns a non-zero exit code."""

    def __init__(self, tool: str, code: int):
        super().__init__(f"Tool '{tool}' execution failed with error code: {code}")
        self.tool = tool
        self.code = code


class ToolExecutor:
    """Runs JDK tools and external processes for a build.

    Example usage:
        tools = ToolExecutor(run, JavaDevelopmentKit.detect())
        tools.run_tool("javac", ["-d", "out", "--module", "a"])
    """

    def __init__(self, run: Run, jdk: JavaDevelopmentKit):
        """Initialize tool executor.

        Args:
            run: Run context receiving logs and tool output
            jdk: JDK used to locate tool executables
        """
        self.run = run
        self.jdk = jdk

    @property
    def feature_version(self) -> int:
        """Feature version of the platform the tools belong to."""
        return self.jdk.feature_version

    def find_tool(self, name: str) -> Path:
        """Locate the executable of the named tool."""
        return self.jdk.find_tool(name)

    def run_tool(self, name: str, args: Sequence[str]) -> None:
        """Run the named tool with the given arguments.

        Args:
            name: Tool name (e.g., "javac", "jar", "javadoc", "jdeps")
            args: Tool arguments

        Raises:
            ToolNotFoundError: If the tool can't be located
            ToolInvocationError: If the tool exits with a non-zero code
        """
        args = [str(arg) for arg in args]
        self.run.log(logging.DEBUG, "Running tool '%s' with: %s", name, args)

        executable = self.jdk.find_tool(name)
        result = subprocess.run(
            [str(executable)] + args,
            capture_output=True,
            text=True,
        )

        if result.stdout:
            self.run.out.write(result.stdout)
        if result.stderr:
            self.run.err.write(result.stderr)

        if result.returncode != 0:
            raise ToolInvocationError(name, result.returncode)

        self.run.log(logging.DEBUG, "Tool '%s' successfully executed.", name)

    def launch(self, command: Sequence[str]) -> int:
        """Launch an external process that inherits stdio and wait for it.

        Args:
            command: Full command line, executable first

        Returns:
            Exit code of the process
        """
        self.run.flush()
        process = subprocess.Popen([str(part) for part in command])
        return process.wait()

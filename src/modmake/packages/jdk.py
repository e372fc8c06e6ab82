"""Java Development Kit discovery.

This module locates the tools of a JDK installation and determines the
feature version of the running platform.

Lookup order:
    1. JAVA_HOME/bin/{tool}
    2. {tool} on PATH
"""

import os
import platform
import re
import shutil
import subprocess
from pathlib import Path
from typing import Dict, Mapping, Optional


class ToolNotFoundError(Exception):
    """Raised when a required JDK tool is not found."""

    pass


class JdkVersionError(Exception):
    """Raised when the platform feature version cannot be determined."""

    pass


class JavaDevelopmentKit:
    """Finds JDK tools and reports the running platform's feature version."""

    VERSION_PATTERN = re.compile(r"(\d+)(?:\.(\d+))?")

    def __init__(self, home: Optional[Path] = None, feature_version: Optional[int] = None):
        """Initialize the JDK.

        Args:
            home: JDK installation directory, None to search PATH
            feature_version: Known feature version, None to detect lazily
        """
        self.home = Path(home) if home else None
        self._feature_version = feature_version
        self._tools: Dict[str, Path] = {}

    @classmethod
    def detect(cls, environ: Optional[Mapping[str, str]] = None) -> "JavaDevelopmentKit":
        """Create a JDK from JAVA_HOME and MODMAKE_JAVA_RELEASE.

        Args:
            environ: Environment mapping (defaults to os.environ)

        Raises:
            JdkVersionError: If MODMAKE_JAVA_RELEASE is not a number
        """
        environ = os.environ if environ is None else environ
        home = environ.get("JAVA_HOME") or None
        release = environ.get("MODMAKE_JAVA_RELEASE")
        feature_version = None
        if release:
            if not release.strip().isdigit():
                raise JdkVersionError(f"Invalid MODMAKE_JAVA_RELEASE: {release!r}")
            feature_version = int(release)
        return cls(Path(home) if home else None, feature_version)

    def find_tool(self, name: str) -> Path:
        """Find the executable of the named tool.

        Args:
            name: Tool name (e.g., "javac", "jar")

        Returns:
            Path to the executable

        Raises:
            ToolNotFoundError: If the tool can't be found
        """
        if name in self._tools:
            return self._tools[name]

        executable = name + ".exe" if platform.system() == "Windows" else name
        if self.home is not None:
            candidate = self.home / "bin" / executable
            if not candidate.is_file():
                raise ToolNotFoundError(f"Tool '{name}' not found in JAVA_HOME: {candidate}")
            tool = candidate
        else:
            found = shutil.which(name)
            if found is None:
                raise ToolNotFoundError(
                    f"Tool '{name}' not found on PATH. Install a JDK or set JAVA_HOME."
                )
            tool = Path(found)

        self._tools[name] = tool
        return tool

    @property
    def feature_version(self) -> int:
        """Feature version of the running platform (e.g., 11 or 17)."""
        if self._feature_version is None:
            javac = self.find_tool("javac")
            result = subprocess.run(
                [str(javac), "-version"],
                capture_output=True,
                text=True,
                timeout=60,
            )
            # JDK 8 prints the version to stderr, later releases to stdout
            self._feature_version = self.parse_feature_version(result.stdout + result.stderr)
        return self._feature_version

    @classmethod
    def parse_feature_version(cls, text: str) -> int:
        """Parse the feature version from `javac -version` output.

        Examples:
            "javac 17.0.2"  -> 17
            "javac 1.8.0_292" -> 8

        Raises:
            JdkVersionError: If no version number is present
        """
        match = cls.VERSION_PATTERN.search(text)
        if match is None:
            raise JdkVersionError(f"Cannot determine Java version from: {text.strip()!r}")
        major = int(match.group(1))
        if major == 1 and match.group(2):
            return int(match.group(2))
        return major

"""
Filesystem scanning for realm and module discovery.

This module handles:
- Probing conventional source roots (first existing directory wins)
- Enumerating module names (immediate subdirectories, sorted)
- Finding descriptor files, Java compilation units and packaged archives
"""

from pathlib import Path
from typing import Callable, Iterable, List, Optional


class SourceScanner:
    """
    Static helpers that enumerate directories and classify files.

    Every listing is sorted so that build order and logs are reproducible
    between invocations.
    """

    @staticmethod
    def find_first_directory(home: Path, *candidates: str) -> Optional[Path]:
        """
        Find the first existing subdirectory below the given home path.

        Args:
            home: Base directory the candidates are resolved against
            *candidates: Relative paths in probing order

        Returns:
            Resolved path of the first existing directory, or None
        """
        for candidate in candidates:
            path = Path(home) / candidate
            if path.is_dir():
                return path
        return None

    @staticmethod
    def list_directories(root: Path) -> List[Path]:
        """Return the child directories directly present in root."""
        root = Path(root)
        if not root.is_dir():
            return []
        return sorted(path for path in root.iterdir() if path.is_dir())

    @staticmethod
    def list_directory_names(root: Path) -> List[str]:
        """Return the sorted names of the child directories of root."""
        return sorted(path.name for path in SourceScanner.list_directories(root))

    @staticmethod
    def list_files(roots: Iterable[Path], predicate: Callable[[Path], bool]) -> List[Path]:
        """
        List all regular files below the given roots matching a predicate.

        Args:
            roots: Directories to walk recursively
            predicate: Filter applied to every regular file

        Returns:
            Matching files, per root in sorted order
        """
        files: List[Path] = []
        for root in roots:
            root = Path(root)
            if not root.is_dir():
                continue
            files.extend(
                path for path in sorted(root.rglob("*"))
                if path.is_file() and predicate(path)
            )
        return files

    @staticmethod
    def list_files_named(root: Path, name: str) -> List[Path]:
        """List all files with the given file name below root."""
        return SourceScanner.list_files([root], lambda path: path.name == name)

    @staticmethod
    def list_java_files(root: Path) -> List[Path]:
        """List all regular Java compilation units below root."""
        return SourceScanner.list_files([root], SourceScanner.is_java_file)

    @staticmethod
    def is_java_file(path: Path) -> bool:
        """
        Test whether path points to a Java compilation unit.

        Only names with a single dot qualify, so "Foo.java" matches while
        "package-info.tmp.java" does not.
        """
        path = Path(path)
        if not path.is_file():
            return False
        name = path.name
        return name.endswith(".java") and name.index(".") == len(name) - 5

    @staticmethod
    def is_jar_file(path: Path) -> bool:
        """Test whether path points to a regular Java archive."""
        path = Path(path)
        return path.is_file() and path.name.endswith(".jar")

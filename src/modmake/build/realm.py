"""
Realm model and module-path resolution.

A realm is a named source scope (`main`, `test`) whose modules are compiled,
packaged and tested together. Realms are constructed once per build from
the project's directory layout and are immutable afterwards.

Directory conventions:
    src/{realm}/java, src/{realm} or {realm}   source root (first existing)
    lib/{realm}                                libraries for all phases
    lib/{realm}-{phase}-only                   libraries for one phase
    work/{realm}/...                           compiled and packaged output
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Sequence, Tuple

from .source_scanner import SourceScanner

PHASES = ("compile", "runtime")


class RealmNotFoundError(Exception):
    """Raised when no source root exists for a realm."""

    pass


@dataclass(frozen=True)
class Realm:
    """Building block, source set, scope: `main`, `test`."""

    name: str
    source: Path  # relative to the project home
    modules: Tuple[str, ...]
    target: Path
    module_paths: Dict[str, List[Path]] = field(default_factory=dict, hash=False)
    libraries: Path = Path("lib")

    @classmethod
    def of(cls, name: str, home: Path, target: Path, *required_realms: "Realm") -> "Realm":
        """
        Create a realm by probing its conventional source roots.

        Args:
            name: Realm name
            home: Project root directory
            target: Target root directory (e.g., home/work)
            *required_realms: Realms this realm depends on

        Returns:
            Realm with modules discovered and module paths resolved

        Raises:
            RealmNotFoundError: If none of the source root candidates exist
        """
        home = Path(home)
        found = SourceScanner.find_first_directory(
            home, f"src/{name}/java", f"src/{name}", name
        )
        if found is None:
            raise RealmNotFoundError(f"Couldn't find module source path of {name} realm in {home}")

        source = found.relative_to(home)
        modules = tuple(SourceScanner.list_directory_names(found))
        module_paths = {
            phase: cls.module_path_of(name, home, phase, required_realms) for phase in PHASES
        }
        return cls(name, source, modules, Path(target), module_paths)

    @staticmethod
    def module_path_of(
        name: str, home: Path, phase: str, required_realms: Sequence["Realm"] = ()
    ) -> List[Path]:
        """
        Compute the module path of a realm for one phase.

        The realm's own library directories come first, followed by, for every
        required realm in order, its packaged modules directory and its own
        module path for the same phase. Duplicates are kept.

        Args:
            name: Realm name
            home: Project root directory
            phase: "compile" or "runtime"
            required_realms: Realms this realm depends on

        Returns:
            Ordered list of module path entries
        """
        result: List[Path] = []
        for candidate in (name, f"{name}-{phase}-only"):
            lib = Path(home) / "lib" / candidate
            if lib.is_dir():
                result.append(lib)
        for required in required_realms:
            result.append(required.packaged_modules)
            result.extend(required.module_path(phase))
        return result

    def module_path(self, phase: str) -> List[Path]:
        """Module path entries for the given phase."""
        return list(self.module_paths.get(phase, []))

    @property
    def work(self) -> Path:
        return self.target / self.name

    @property
    def compiled_base(self) -> Path:
        return self.work / "compiled"

    @property
    def compiled_javadoc(self) -> Path:
        return self.compiled_base / "javadoc"

    @property
    def compiled_modules(self) -> Path:
        return self.compiled_base / "modules"

    @property
    def compiled_multi(self) -> Path:
        return self.compiled_base / "multi-release"

    @property
    def packaged_javadoc(self) -> Path:
        return self.work / "javadoc"

    @property
    def packaged_modules(self) -> Path:
        return self.work / "modules"

    @property
    def packaged_sources(self) -> Path:
        return self.work / "sources"

    def library_candidates(self, home: Path) -> List[Path]:
        """Library directories that may declare external modules."""
        libraries = Path(home) / self.libraries
        return [
            libraries / self.name,
            libraries / f"{self.name}-compile-only",
            libraries / f"{self.name}-runtime-only",
        ]

    def compile_only(self) -> bool:
        """Realm is compiled and tested but never packaged."""
        return self.name == "test"

    def contains_tests(self) -> bool:
        """Realm contains tests to be launched after the build."""
        return self.name == "test"

    def __str__(self) -> str:
        return f"Realm{{name={self.name}, source={self.source}}}"

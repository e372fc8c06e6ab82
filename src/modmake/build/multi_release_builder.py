"""
Multi-release builder for modules layered by platform release.

A module is multi-release when every immediate subdirectory is named
`java-{N}`:

    src/main/java/foo/java-8/...     base layer, legacy (non-modular) compile
    src/main/java/foo/java-11/...    compiled with module semantics, patched
                                     over the base layer's output

Layers are compiled from the lowest declared release up to the running
platform's feature version into `work/{realm}/compiled/multi-release/java-{N}`.
The base layer becomes the default archive content; every higher layer is
embedded as a release-scoped section of the same archive.
"""

import logging
import os
import re
from pathlib import Path
from typing import List, Optional

from .args import Args
from .default_builder import DefaultBuilder
from .source_scanner import SourceScanner

# First release compiled with module semantics
MODULE_SYSTEM_RELEASE = 9


class UnsupportedReleaseError(Exception):
    """Raised when a module's base release is newer than the platform."""

    pass


class MultiReleaseBuilder(DefaultBuilder):
    """Build multi-release modules."""

    RELEASE_PATTERN = re.compile(r"java-(\d+)")

    def build(self, modules: List[str]) -> List[str]:
        return [module for module in modules if self.build_module(module)]

    def release_layers(self, module: str) -> Optional[List[int]]:
        """
        Return the sorted release numbers of a module's layers.

        Returns None if the module isn't strictly multi-release, i.e. it has
        no subdirectories or at least one subdirectory not named `java-{N}`.
        Mixed layouts are reported as a warning.
        """
        names = SourceScanner.list_directory_names(self.module_source_path / module)
        if not names:
            return None

        matches = {name: self.RELEASE_PATTERN.fullmatch(name) for name in names}
        others = [name for name, match in matches.items() if match is None]
        if others:
            if len(others) < len(names):
                self.run.log(
                    logging.WARNING,
                    "Module %s mixes release directories with other directories %s;"
                    " not building it as a multi-release module",
                    module,
                    others,
                )
            return None

        return sorted(int(match.group(1)) for match in matches.values() if match)

    def build_module(self, module: str) -> bool:
        """Build a single module if it is multi-release."""
        releases = self.release_layers(module)
        if releases is None:
            return False

        self.run.log(logging.DEBUG, "Building multi-release module: %s", module)
        base = releases[0]
        feature_version = self.tools.feature_version
        if base > feature_version:
            raise UnsupportedReleaseError(
                f"Module {module} declares base release {base},"
                f" the platform only supports up to {feature_version}"
            )
        for release in range(base, feature_version + 1):
            self.compile_release(module, base, release)
        if self.realm.compile_only():
            return True
        self.jar_release_module(module, base)
        self.jar_release_sources(module, base)
        return True

    def compile_release(self, module: str, base: int, release: int) -> None:
        """Compile one release layer of a module."""
        java_release = f"java-{release}"
        source = self.module_source_path / module / java_release
        if not source.exists():
            self.run.log(
                logging.DEBUG, "Skipping %s, no source path exists: %s", java_release, source
            )
            return

        destination = self.realm.compiled_multi / java_release
        javac = (
            Args()
            .with_pair("-encoding", "UTF-8")
            .with_("-Xlint")
            .with_pair("--release", release)
        )
        if release < MODULE_SYSTEM_RELEASE:
            javac.with_pair("-d", destination / module)
            javac.with_each(SourceScanner.list_java_files(source))
        else:
            javac.with_pair("-d", destination)
            javac.with_pair("--module-version", self.config.version)
            module_path = self.realm.module_path("compile")
            if module_path:
                javac.with_paths("--module-path", module_path)
            layer_pattern = os.path.join(str(self.module_source_path), "*", java_release)
            javac.with_pair(
                "--module-source-path",
                os.pathsep.join([layer_pattern, str(self.module_source_path)]),
            )
            if release > base:
                base_output = self.realm.compiled_multi / f"java-{base}" / module
                javac.with_pair("--patch-module", f"{module}={base_output}")
            javac.with_pair("--module", module)

        self.tools.run_tool("javac", javac)

    def jar_release_module(self, module: str, base: int) -> Path:
        """Package compiled layers into one multi-release archive."""
        self.realm.packaged_modules.mkdir(parents=True, exist_ok=True)
        file = self.realm.packaged_modules / f"{module}-{self.config.version}.jar"
        layers = [
            self.realm.compiled_multi / f"java-{release}" / module
            for release in range(base, self.tools.feature_version + 1)
        ]
        self.jar_layers(file, base, layers)
        return file

    def jar_release_sources(self, module: str, base: int) -> Path:
        """Package source layers into one multi-release sources archive."""
        self.realm.packaged_sources.mkdir(parents=True, exist_ok=True)
        file = self.realm.packaged_sources / f"{module}-{self.config.version}-sources.jar"
        layers = [
            self.module_source_path / module / f"java-{release}"
            for release in range(base, self.tools.feature_version + 1)
        ]
        self.jar_layers(file, base, layers)
        return file

    def jar_layers(self, file: Path, base: int, layers: List[Path]) -> None:
        """
        Create an archive from per-release layer directories.

        Args:
            file: Archive to create
            base: Release number of the first layer
            layers: Layer directories for releases base, base + 1, ...
        """
        jar = (
            Args()
            .with_if(self.config.debug, "--verbose")
            .with_("--create")
            .with_pair("--file", file)
            .with_pair("-C", layers[0])
            .with_(".")
        )
        for release, layer in enumerate(layers[1:], start=base + 1):
            if not layer.exists():
                continue
            jar.with_pair("--release", release)
            jar.with_pair("-C", layer)
            jar.with_(".")
        self.tools.run_tool("jar", jar)

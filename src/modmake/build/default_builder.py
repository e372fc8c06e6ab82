"""
Default builder for modules in the flat module source layout.

All pending modules are compiled in a single compiler invocation against the
realm's module source path. Unless the realm is compile-only, every module
is then packaged into a binary archive and a sources archive:

    work/{realm}/modules/{module}-{version}.jar
    work/{realm}/sources/{module}-{version}-sources.jar
"""

import logging
from pathlib import Path
from typing import List

from ..config.project_config import ProjectConfig
from .args import Args
from .module_builder import ModuleBuilder
from .realm import Realm
from .run_context import Run
from .tool_executor import ToolExecutor


class DefaultBuilder(ModuleBuilder):
    """Build modules using the default module source directory layout."""

    def __init__(self, run: Run, tools: ToolExecutor, config: ProjectConfig, realm: Realm):
        """
        Initialize default builder.

        Args:
            run: Run context
            tools: Tool executor invoking javac and jar
            config: Project configuration (version, debug flag)
            realm: Realm whose modules are built
        """
        self.run = run
        self.tools = tools
        self.config = config
        self.realm = realm
        self.module_source_path = config.home / realm.source

    def build(self, modules: List[str]) -> List[str]:
        if not modules:
            return []
        self.run.log(logging.DEBUG, "Building %d module(s): %s", len(modules), modules)
        self.compile(modules)
        if self.realm.compile_only():
            return list(modules)
        for module in modules:
            self.jar_module(module)
            self.jar_sources(module)
        return list(modules)

    def compile(self, modules: List[str]) -> None:
        """Compile all modules in one javac invocation."""
        javac = (
            Args()
            .with_pair("-encoding", "UTF-8")
            .with_("-Xlint")
            .with_pair("-d", self.realm.compiled_modules)
            .with_pair("--module-version", self.config.version)
            .with_pair("--module-source-path", self.module_source_path)
            .with_pair("--module", ",".join(modules))
        )

        module_path: List[Path] = []
        if self.realm.packaged_modules.exists():
            module_path.append(self.realm.packaged_modules)
        module_path.extend(self.realm.module_path("compile"))
        if module_path:
            javac.with_paths("--module-path", module_path)

        self.tools.run_tool("javac", javac)

    def jar_module(self, module: str) -> Path:
        """Package the compiled classes of a module."""
        self.realm.packaged_modules.mkdir(parents=True, exist_ok=True)
        modular_jar = self.realm.packaged_modules / f"{module}-{self.config.version}.jar"
        self.jar(modular_jar, self.realm.compiled_modules / module)
        return modular_jar

    def jar_sources(self, module: str) -> Path:
        """Package the source tree of a module."""
        self.realm.packaged_sources.mkdir(parents=True, exist_ok=True)
        sources_jar = self.realm.packaged_sources / f"{module}-{self.config.version}-sources.jar"
        self.jar(sources_jar, self.module_source_path / module)
        return sources_jar

    def jar(self, file: Path, directory: Path) -> None:
        """Create an archive with the contents of a directory."""
        jar = (
            Args()
            .with_if(self.config.debug, "--verbose")
            .with_("--create")
            .with_pair("--file", file)
            .with_pair("-C", directory)
            .with_(".")
        )
        self.tools.run_tool("jar", jar)

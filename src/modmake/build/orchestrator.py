"""
Build orchestration for modmake projects.

This module drives a complete build of a modular project. Realms are visited
in dependency order (a realm's required realms are constructed before it):

1. Assemble: fetch external modules declared in `module-uri.properties`
2. Build: compile and package modules with the builder chain
3. Test: launch the JUnit Platform for realms that contain tests
4. Document: generate and archive API documentation of the main realm
5. Summarize: list packaged archives, optionally analyze dependencies

Any failure aborts the whole invocation with exit code 1.
"""

import logging
import os
import traceback
from pathlib import Path
from typing import List, Optional, Sequence
from urllib.parse import urlparse

from .. import __version__
from ..config.project_config import ProjectConfig
from ..config.properties import PropertiesFile
from ..packages.downloader import ArtifactDownloader
from ..packages.jdk import JavaDevelopmentKit
from .args import Args
from .default_builder import DefaultBuilder
from .module_builder import ModuleBuilder
from .multi_release_builder import MultiReleaseBuilder
from .realm import Realm, RealmNotFoundError
from .run_context import Run
from .source_scanner import SourceScanner
from .tool_executor import ToolExecutor

DESCRIPTOR_FILE_NAME = "module-uri.properties"
JUNIT_CONSOLE_MODULE = "org.junit.platform.console"

# Lowest release whose layer directories are offered to javadoc
JAVADOC_FIRST_RELEASE = 7


class EmptyModuleSetError(Exception):
    """Raised when a realm's source root contains no module directories."""

    pass


class UnbuildableModulesError(Exception):
    """Raised when no builder claimed some of a realm's modules."""

    def __init__(self, modules: Sequence[str]):
        super().__init__(f"Pending module list is not empty! {list(modules)}")
        self.modules = list(modules)


class TestRunError(Exception):
    """Raised when the test run exits with a non-zero code."""

    __test__ = False

    def __init__(self, code: int):
        super().__init__(f"JUnit run exited with code {code}")
        self.code = code


class BuildOrchestrator:
    """
    Orchestrates the complete build of a modular project.

    Example usage:
        config = ProjectConfig.load(Path("."))
        orchestrator = BuildOrchestrator.of(config)
        code = orchestrator.run(Run.create(config.debug, sys.stdout, sys.stderr))
    """

    NAME = "modmake"

    def __init__(
        self,
        config: ProjectConfig,
        realms: List[Realm],
        skipped_realms: Sequence[str] = (),
        jdk: Optional[JavaDevelopmentKit] = None,
        downloader: Optional[ArtifactDownloader] = None,
    ):
        """
        Initialize build orchestrator.

        Args:
            config: Project configuration
            realms: Realms in dependency order, main realm first
            skipped_realms: Names of optional realms that were not found
            jdk: JDK providing the tools (detected from the environment if None)
            downloader: Artifact downloader (created if None)
        """
        self.config = config
        self.home = config.home
        self.realms = list(realms)
        self.skipped_realms = list(skipped_realms)
        self.jdk = jdk if jdk is not None else JavaDevelopmentKit.detect()
        self.downloader = downloader if downloader is not None else ArtifactDownloader()

    @classmethod
    def of(
        cls,
        config: ProjectConfig,
        jdk: Optional[JavaDevelopmentKit] = None,
        downloader: Optional[ArtifactDownloader] = None,
    ) -> "BuildOrchestrator":
        """
        Create an orchestrator by discovering the realms of a project.

        The main realm is mandatory; the test realm is optional.

        Raises:
            RealmNotFoundError: If the main realm's source root is missing
        """
        main = Realm.of("main", config.home, config.work)
        realms = [main]
        skipped = []
        try:
            realms.append(Realm.of("test", config.home, config.work, main))
        except RealmNotFoundError:
            skipped.append("test")
        return cls(config, realms, skipped, jdk, downloader)

    def run(self, run: Run, args: Sequence[str] = (), tools: Optional[ToolExecutor] = None) -> int:
        """
        Run the build.

        Args:
            run: Run context
            args: Command-line arguments, logged for diagnostics
            tools: Tool executor (created from the JDK if None)

        Returns:
            0 on success or dry-run, 1 on any failure
        """
        run.log(logging.DEBUG, "%s - %s", self.NAME, __version__)
        run.log(logging.DEBUG, "  args = %s", list(args))
        run.log(logging.DEBUG, "  jdk = %s", self.jdk.home or "<PATH>")
        run.log(
            logging.DEBUG,
            "Building project '%s', version %s...",
            self.config.name,
            self.config.version,
        )
        run.log(logging.DEBUG, "  home = %s", self.home.as_uri())
        for index, realm in enumerate(self.realms):
            run.log(logging.DEBUG, "  realms[%d] = %s", index, realm)
        for name in self.skipped_realms:
            run.log(logging.DEBUG, "  %s realm not found, skipping it", name)

        if self.config.dry_run:
            run.log(logging.INFO, "Dry-run ends here.")
            return 0

        try:
            if tools is None:
                tools = ToolExecutor(run, self.jdk)
            self.build(run, tools)
            self.junit(run, tools)
            main = self.realms[0]
            self.document(run, tools, main)
            self.summary(run, tools, main)
            run.log(logging.INFO, "Build successful after %d ms.", run.duration_millis())
            return 0
        except Exception as e:
            run.log(logging.ERROR, "Build failed: %s", e)
            traceback.print_exc(file=run.err)
            return 1

    def build(self, run: Run, tools: ToolExecutor) -> None:
        """Sequentially assemble and build all realms."""
        for realm in self.realms:
            module_source_path = self.home / realm.source
            if not module_source_path.exists():
                run.log(
                    logging.WARNING,
                    "Source path of %s realm not found: %s",
                    realm.name,
                    module_source_path,
                )
                return
            if not realm.modules:
                raise EmptyModuleSetError(f"No modules found in source path: {module_source_path}")
            self.assemble(run, realm)
            self.build_realm(run, tools, realm)

    def assemble(self, run: Run, realm: Realm) -> List[Path]:
        """
        Fetch the external modules declared in the realm's library directories.

        Returns:
            Paths of all resolved artifacts
        """
        run.log(logging.DEBUG, "Assembling assets for %s realm...", realm.name)
        downloaded: List[Path] = []
        for candidate in realm.library_candidates(self.home):
            if not candidate.is_dir():
                continue
            for path in SourceScanner.list_files_named(candidate, DESCRIPTOR_FILE_NAME):
                directory = path.parent
                properties = PropertiesFile(path)
                run.log(
                    logging.DEBUG,
                    "Resolving %d modules in %s",
                    len(properties),
                    directory.as_uri(),
                )
                for value in properties.values():
                    uri = self.resolve_uri(value)
                    run.log(logging.DEBUG, " o %s", uri)
                    downloaded.append(self.downloader.download(self.config.offline, directory, uri))
        run.log(logging.DEBUG, "Downloaded %d modules.", len(downloaded))
        run.log(logging.DEBUG, "Assembled assets for %s realm.", realm.name)
        return downloaded

    def resolve_uri(self, value: str) -> str:
        """Resolve a descriptor value against the project home unless absolute."""
        scheme = urlparse(value).scheme
        # single letter schemes are Windows drive letters
        if len(scheme) > 1:
            return value
        return (self.home / value).resolve().as_uri()

    def create_builders(self, run: Run, tools: ToolExecutor, realm: Realm) -> List[ModuleBuilder]:
        """Builders in priority order: multi-release first, default last."""
        return [
            MultiReleaseBuilder(run, tools, self.config, realm),
            DefaultBuilder(run, tools, self.config, realm),
        ]

    def build_realm(self, run: Run, tools: ToolExecutor, realm: Realm) -> None:
        """
        Build all modules of a realm with the builder chain.

        Raises:
            UnbuildableModulesError: If modules remain after all builders ran
        """
        pending = list(realm.modules)
        for builder in self.create_builders(run, tools, realm):
            _, pending = builder.attempt_build(pending)
            if not pending:
                return
        raise UnbuildableModulesError(pending)

    def junit(self, run: Run, tools: ToolExecutor) -> None:
        """Launch the JUnit Platform for all realms that contain tests."""
        for realm in self.realms:
            if realm.contains_tests():
                self.junit_realm(run, tools, realm)

    def junit_realm(self, run: Run, tools: ToolExecutor, realm: Realm) -> None:
        """
        Launch the JUnit Platform console for a realm in an external process.

        Raises:
            TestRunError: If the process exits with a non-zero code
        """
        module_path = [realm.compiled_modules] + realm.module_path("runtime")
        java = (
            Args()
            .with_paths("--module-path", module_path)
            .with_("-Dsun.reflect.debugModuleAccessChecks")
            .with_pair(
                "--add-opens",
                "org.junit.jupiter.api/org.junit.jupiter.api.condition=org.junit.platform.commons",
            )
            .with_pair("--add-modules", ",".join(realm.modules))
        )
        junit = (
            Args()
            .with_("--fail-if-no-tests")
            .with_pair("--reports-dir", realm.target / "junit-reports")
            .with_("--scan-modules")
        )
        command = (
            Args()
            .with_(tools.find_tool("java"))
            .with_each(java)
            .with_pair("--module", JUNIT_CONSOLE_MODULE)
            .with_each(junit)
        )
        run.log(logging.INFO, "JUnit: %s", command)
        code = tools.launch(command)
        if code != 0:
            raise TestRunError(code)

    def document(self, run: Run, tools: ToolExecutor, realm: Realm) -> Path:
        """
        Generate API documentation for a realm and archive it.

        Returns:
            Path to the documentation archive
        """
        module_source_path = self.home / realm.source
        java_sources = [str(module_source_path)]
        for release in range(JAVADOC_FIRST_RELEASE, tools.feature_version + 1):
            java_sources.append(os.path.join(str(module_source_path), "*", f"java-{release}"))

        realm.compiled_javadoc.mkdir(parents=True, exist_ok=True)
        javadoc = (
            Args()
            .with_pair("-encoding", "UTF-8")
            .with_("-quiet")
            .with_pair("-windowtitle", f"{self.config.name} {self.config.version}")
            .with_pair("-d", realm.compiled_javadoc)
            .with_pair("--module-source-path", os.pathsep.join(java_sources))
            .with_pair("--module", ",".join(realm.modules))
        )
        module_path = realm.module_path("compile")
        if module_path:
            javadoc.with_paths("--module-path", module_path)
        tools.run_tool("javadoc", javadoc)

        realm.packaged_javadoc.mkdir(parents=True, exist_ok=True)
        javadoc_jar = (
            realm.packaged_javadoc / f"{self.config.name}-{self.config.version}-javadoc.jar"
        )
        jar = (
            Args()
            .with_if(self.config.debug, "--verbose")
            .with_("--create")
            .with_pair("--file", javadoc_jar)
            .with_pair("-C", realm.compiled_javadoc)
            .with_(".")
        )
        tools.run_tool("jar", jar)
        return javadoc_jar

    def summary(self, run: Run, tools: ToolExecutor, realm: Realm) -> List[Path]:
        """
        Log the packaged archives of a realm.

        In debug mode the dependencies of the packaged modules are analyzed.

        Returns:
            Paths of the packaged module archives
        """
        jars = SourceScanner.list_files([realm.packaged_modules], SourceScanner.is_jar_file)
        for jar in jars:
            run.log(logging.INFO, "  -> %s", jar.name)
        if self.config.debug:
            module_path = [realm.packaged_modules] + realm.module_path("runtime")
            jdeps = (
                Args()
                .with_paths("--module-path", module_path)
                .with_pair("--add-modules", ",".join(realm.modules))
                .with_pair("--multi-release", "base")
                .with_("-summary")
            )
            tools.run_tool("jdeps", jdeps)
        return jars

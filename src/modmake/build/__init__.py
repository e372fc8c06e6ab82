"""
Build system components for modmake.

This module provides the build system implementation including:
- Realm and module discovery
- Compilation and packaging (javac, jar)
- Multi-release module layering
- Build orchestration (assemble, build, test, document, summarize)
"""

from .args import Args
from .default_builder import DefaultBuilder
from .module_builder import ModuleBuilder
from .multi_release_builder import MultiReleaseBuilder, UnsupportedReleaseError
from .orchestrator import (
    BuildOrchestrator,
    EmptyModuleSetError,
    TestRunError,
    UnbuildableModulesError,
)
from .realm import Realm, RealmNotFoundError
from .run_context import Run
from .source_scanner import SourceScanner
from .tool_executor import ToolExecutor, ToolInvocationError

__all__ = [
    "Args",
    "BuildOrchestrator",
    "DefaultBuilder",
    "EmptyModuleSetError",
    "ModuleBuilder",
    "MultiReleaseBuilder",
    "Realm",
    "RealmNotFoundError",
    "Run",
    "SourceScanner",
    "TestRunError",
    "ToolExecutor",
    "ToolInvocationError",
    "UnbuildableModulesError",
    "UnsupportedReleaseError",
]

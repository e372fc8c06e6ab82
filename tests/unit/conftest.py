"""Shared fixtures for modmake unit tests."""

import io
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

import pytest

from modmake.build import Run, ToolInvocationError
from modmake.config import ProjectConfig


class RecordingTools:
    """Stand-in for ToolExecutor that records invocations instead of running tools.

    Archives requested with `--file` are created as empty files so that the
    packaged layout can be inspected.
    """

    def __init__(self, feature_version: int = 11, launch_code: int = 0,
                 failing_tool: Optional[str] = None):
        self.feature_version = feature_version
        self.launch_code = launch_code
        self.failing_tool = failing_tool
        self.calls: List[Tuple[str, List[str]]] = []
        self.launched: List[List[str]] = []

    def find_tool(self, name: str) -> Path:
        return Path("/opt/jdk/bin") / name

    def run_tool(self, name: str, args: Iterable[str]) -> None:
        args = [str(arg) for arg in args]
        self.calls.append((name, args))
        if name == self.failing_tool:
            raise ToolInvocationError(name, 2)
        if name == "jar":
            archive = Path(args[args.index("--file") + 1])
            archive.parent.mkdir(parents=True, exist_ok=True)
            archive.touch()

    def launch(self, command: Iterable[str]) -> int:
        self.launched.append([str(part) for part in command])
        return self.launch_code

    def calls_of(self, name: str) -> List[List[str]]:
        return [args for tool, args in self.calls if tool == name]


def make_modules(root: Path, *modules: str) -> Path:
    """Create flat module directories, each with a module descriptor."""
    root.mkdir(parents=True, exist_ok=True)
    for module in modules:
        module_dir = root / module
        module_dir.mkdir()
        (module_dir / "module-info.java").write_text(f"module {module} {{}}\n")
    return root


@pytest.fixture(name="make_modules")
def make_modules_fixture():
    """Factory creating flat module directories."""
    return make_modules


@pytest.fixture
def tools_factory():
    """Factory for recording tool executors with custom behaviour."""
    return RecordingTools


@pytest.fixture
def tools():
    """Recording tool executor with feature version 11."""
    return RecordingTools()


@pytest.fixture
def sinks():
    """Normal and diagnostic output sinks."""
    return io.StringIO(), io.StringIO()


@pytest.fixture
def run(sinks):
    """Run context logging at DEBUG into string sinks."""
    out, err = sinks
    return Run(logging.DEBUG, out, err)


@pytest.fixture
def project(tmp_path):
    """Project with a main realm {a, b} and a test realm {check}."""
    home = tmp_path / "demo"
    make_modules(home / "src" / "main" / "java", "a", "b")
    make_modules(home / "src" / "test" / "java", "check")
    return home


@pytest.fixture
def config(project):
    """Configuration of the demo project."""
    return ProjectConfig(home=project, name="demo")

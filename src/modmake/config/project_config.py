"""
Project configuration for modmake builds.

Settings are merged from, lowest to highest priority:
- built-in defaults (project name = directory name)
- the optional `modmake.ini` file, `[project]` section
- MODMAKE_* environment variables
- explicit overrides passed by the command line
"""

import configparser
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional


DEFAULT_VERSION = "1.0.0-SNAPSHOT"
CONFIG_FILE_NAME = "modmake.ini"

ENV_VARIABLES = {
    "name": "MODMAKE_PROJECT_NAME",
    "version": "MODMAKE_PROJECT_VERSION",
    "debug": "MODMAKE_DEBUG",
    "dry_run": "MODMAKE_DRY_RUN",
    "offline": "MODMAKE_OFFLINE",
}

BOOLEAN_KEYS = ("debug", "dry_run", "offline")

_TRUE_STRINGS = {"1", "true", "yes", "on"}
_FALSE_STRINGS = {"0", "false", "no", "off", ""}


class ProjectConfigError(Exception):
    """Exception raised for invalid project configuration."""

    pass


def parse_bool(value: str, source: str) -> bool:
    """
    Parse a boolean configuration string.

    Args:
        value: Raw string value
        source: Where the value came from, used in error messages

    Returns:
        Parsed boolean

    Raises:
        ProjectConfigError: If the value is not a recognized boolean
    """
    normalized = value.strip().lower()
    if normalized in _TRUE_STRINGS:
        return True
    if normalized in _FALSE_STRINGS:
        return False
    raise ProjectConfigError(f"Invalid boolean value for {source}: {value!r}")


@dataclass(frozen=True)
class ProjectConfig:
    """Tunable inputs of a single build invocation."""

    home: Path
    name: str
    version: str = DEFAULT_VERSION
    debug: bool = False
    dry_run: bool = False
    offline: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "home", Path(self.home).resolve())

    @property
    def work(self) -> Path:
        """Target root of all realms."""
        return self.home / "work"

    @classmethod
    def load(
        cls,
        home: Path,
        name: Optional[str] = None,
        version: Optional[str] = None,
        debug: Optional[bool] = None,
        dry_run: Optional[bool] = None,
        offline: Optional[bool] = None,
        environ: Optional[Dict[str, str]] = None,
    ) -> "ProjectConfig":
        """
        Load the configuration of the project rooted at home.

        Args:
            home: Project root directory
            name: Project name override
            version: Project version override
            debug: Debug flag override
            dry_run: Dry-run flag override
            offline: Offline flag override
            environ: Environment mapping (defaults to os.environ)

        Returns:
            Merged ProjectConfig

        Raises:
            ProjectConfigError: If the config file or a value is invalid
        """
        home = Path(home).resolve()
        environ = os.environ if environ is None else environ

        settings: Dict[str, Any] = {
            "name": home.name,
            "version": DEFAULT_VERSION,
            "debug": False,
            "dry_run": False,
            "offline": False,
        }
        settings.update(cls._read_config_file(home / CONFIG_FILE_NAME))

        for key, variable in ENV_VARIABLES.items():
            if variable in environ:
                raw = environ[variable]
                settings[key] = parse_bool(raw, variable) if key in BOOLEAN_KEYS else raw

        overrides = {
            "name": name,
            "version": version,
            "debug": debug,
            "dry_run": dry_run,
            "offline": offline,
        }
        settings.update({key: value for key, value in overrides.items() if value is not None})

        return cls(home=home, **settings)

    @staticmethod
    def _read_config_file(path: Path) -> Dict[str, Any]:
        """Read the `[project]` section of the optional config file."""
        if not path.is_file():
            return {}

        parser = configparser.ConfigParser(interpolation=None)
        try:
            parser.read(path, encoding="utf-8")
        except configparser.Error as e:
            raise ProjectConfigError(f"Failed to parse {path}: {e}") from e

        if "project" not in parser:
            return {}

        section = parser["project"]
        settings: Dict[str, Any] = {}
        for key in ("name", "version"):
            if key in section:
                settings[key] = section[key].strip()
        for key in ("debug", "offline"):
            if key in section:
                settings[key] = parse_bool(section[key], f"{path.name} [project] {key}")
        return settings

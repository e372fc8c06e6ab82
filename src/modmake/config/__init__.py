"""Configuration parsing modules for modmake."""

from .project_config import ProjectConfig, ProjectConfigError
from .properties import PropertiesFile, PropertiesFileError

__all__ = [
    "ProjectConfig",
    "ProjectConfigError",
    "PropertiesFile",
    "PropertiesFileError",
]

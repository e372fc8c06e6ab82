"""Package management for modmake.

This module handles fetching external dependency artifacts and locating
the tools of the Java Development Kit.
"""

from .downloader import ArtifactDownloader, DownloadError, OfflineMissingArtifactError
from .jdk import JavaDevelopmentKit, JdkVersionError, ToolNotFoundError

__all__ = [
    "ArtifactDownloader",
    "DownloadError",
    "OfflineMissingArtifactError",
    "JavaDevelopmentKit",
    "JdkVersionError",
    "ToolNotFoundError",
]

"""Artifact downloader with offline mode and timestamp-based freshness.

This module resolves external dependency descriptors to local files.

Design:
    - The local file name is the last path segment of the artifact URI
    - Offline mode never touches the network: an existing file is returned,
      a missing one is an error
    - A local file whose modification time equals the remote "last modified"
      timestamp is considered up to date
    - After a transfer the local modification time is set to the remote
      timestamp (current time if the remote doesn't report one)
    - A Content-Disposition file name hint renames the downloaded file
    - `file:` URIs are copied from the local filesystem
"""

import os
import shutil
import time
from email.utils import parsedate_to_datetime
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse
from urllib.request import url2pathname

import requests
from tqdm import tqdm


class DownloadError(Exception):
    """Raised when an artifact cannot be transferred."""

    pass


class OfflineMissingArtifactError(Exception):
    """Raised when offline mode is active and the artifact is not present."""

    pass


class ArtifactDownloader:
    """Downloads artifacts into library directories with progress tracking."""

    def __init__(self, chunk_size: int = 8192, timeout: int = 30, show_progress: bool = True):
        """Initialize downloader.

        Args:
            chunk_size: Size of chunks for streaming transfers
            timeout: Network timeout in seconds
            show_progress: Whether to show a progress bar
        """
        self.chunk_size = chunk_size
        self.timeout = timeout
        self.show_progress = show_progress

    @staticmethod
    def extract_file_name(uri: str) -> str:
        """Extract the last path element from the supplied URI.

        Query and fragment parts are ignored.
        """
        path = urlparse(uri).path
        return path[path.rfind("/") + 1:]

    def download(self, offline: bool, destination_dir: Path, uri: str) -> Path:
        """Download an artifact into the destination directory.

        Args:
            offline: Whether network access is forbidden
            destination_dir: Directory receiving the artifact
            uri: Absolute URI of the artifact

        Returns:
            Path to the local artifact

        Raises:
            DownloadError: If the URI is not absolute or the transfer fails
            OfflineMissingArtifactError: If offline and the artifact is missing
        """
        parsed = urlparse(uri)
        if not parsed.scheme:
            raise DownloadError(f"URI is not absolute: {uri}")

        file_name = self.extract_file_name(uri)
        destination_dir = Path(destination_dir)
        destination_dir.mkdir(parents=True, exist_ok=True)
        target = destination_dir / file_name

        if offline:
            if target.exists():
                return target
            raise OfflineMissingArtifactError(f"Target is missing and being offline: {target}")

        if parsed.scheme == "file":
            return self._copy_local(Path(url2pathname(parsed.path)), target)
        return self._fetch_remote(uri, target)

    def _copy_local(self, source: Path, target: Path) -> Path:
        """Copy a local artifact, using its mtime as the remote timestamp."""
        if not source.is_file():
            raise DownloadError(f"Local artifact not found: {source}")

        last_modified = source.stat().st_mtime
        if target.exists() and self.is_up_to_date(target, last_modified):
            return target

        shutil.copyfile(source, target)
        os.utime(target, (last_modified, last_modified))
        return target

    def _fetch_remote(self, uri: str, target: Path) -> Path:
        """Fetch a remote artifact unless the local copy is up to date."""
        try:
            with requests.get(uri, stream=True, timeout=self.timeout) as response:
                response.raise_for_status()
                last_modified = self.parse_last_modified(response.headers.get("Last-Modified"))

                if target.exists() and self.is_up_to_date(target, last_modified):
                    return target

                self._transfer(response, target)
                target = self._apply_content_disposition(
                    target, response.headers.get("Content-Disposition")
                )
        except requests.RequestException as e:
            raise DownloadError(f"Failed to download {uri}: {e}") from e

        os.utime(target, (last_modified, last_modified))
        return target

    def _transfer(self, response: requests.Response, target: Path) -> None:
        """Stream the response body into target via a temporary file."""
        temp_file = target.with_name(target.name + ".tmp")
        total_size = int(response.headers.get("content-length", 0))

        progress_bar = None
        if self.show_progress and total_size > 0:
            progress_bar = tqdm(
                total=total_size,
                unit="B",
                unit_scale=True,
                unit_divisor=1024,
                desc=f"Downloading {target.name}",
            )

        try:
            with open(temp_file, "wb") as f:
                for chunk in response.iter_content(chunk_size=self.chunk_size):
                    if chunk:
                        f.write(chunk)
                        if progress_bar:
                            progress_bar.update(len(chunk))
            temp_file.replace(target)
        finally:
            if progress_bar:
                progress_bar.close()
            if temp_file.exists():
                temp_file.unlink()

    @staticmethod
    def _apply_content_disposition(target: Path, header: Optional[str]) -> Path:
        """Rename target according to a Content-Disposition file name hint."""
        if not header or header.find("=") <= 0:
            return target

        hint = header.split("=", 1)[1].split(";", 1)[0].strip().strip('"')
        name = Path(hint).name
        if not name or name == target.name:
            return target

        new_target = target.with_name(name)
        target.replace(new_target)
        return new_target

    @staticmethod
    def parse_last_modified(header: Optional[str]) -> float:
        """Parse an HTTP Last-Modified header into a POSIX timestamp.

        Falls back to the current time if the header is missing or invalid.
        """
        if header:
            try:
                return parsedate_to_datetime(header).timestamp()
            except (TypeError, ValueError):
                pass
        return time.time()

    @staticmethod
    def is_up_to_date(target: Path, last_modified: float) -> bool:
        """Compare the local modification time with a remote timestamp.

        Timestamps are compared at millisecond resolution.
        """
        local_millis = round(target.stat().st_mtime * 1000)
        return local_millis == round(last_modified * 1000)

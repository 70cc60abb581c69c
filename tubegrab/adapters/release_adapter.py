import logging
import os
import platform
import shutil
import subprocess
import sys
import tarfile
import zipfile
from pathlib import Path
from typing import List, Optional

import requests
from packaging.version import InvalidVersion, Version
from pymonad.either import Either, Left, Right

from tubegrab.domain.errors import InstallerError
from tubegrab.domain.models import Settings, UpdateStatus
from tubegrab.settings import executable_name

logger = logging.getLogger(__name__)

PACKAGE_NAME = "tubegrab"

YT_DLP_RELEASE = "https://github.com/yt-dlp/yt-dlp/releases/latest/download/"
YT_DLP_ASSETS = {
    "Windows": "yt-dlp.exe",
    "Darwin": "yt-dlp_macos",
    "Linux": "yt-dlp_linux",
}

FFMPEG_BUILDS = "https://github.com/BtbN/FFmpeg-Builds/releases/latest/download/"
FFMPEG_ASSETS = {
    "Windows": FFMPEG_BUILDS + "ffmpeg-master-latest-win64-gpl.zip",
    "Linux": FFMPEG_BUILDS + "ffmpeg-master-latest-linux64-gpl.tar.xz",
    "Darwin": "https://evermeet.cx/ffmpeg/getrelease/zip",
}
TRANSCODER_BINARIES = ("ffmpeg", "ffprobe")

CHUNK_SIZE = 8192
VERSION_TIMEOUT = 15


class ReleaseInstaller:
    """
    Fetches downloader and transcoder release builds into the bin folder and
    compares the running version with the published one.

    Downloads are not checksummed or signature checked.
    """

    def __init__(
        self,
        settings: Settings,
        session: Optional[requests.Session] = None,
        system: Optional[str] = None,
    ):
        self._settings = settings
        self._session = session or requests.Session()
        self._system = system or platform.system()

    def _download(self, url: str, destination: Path) -> Either[InstallerError, Path]:
        logger.info(f"Downloading '{url}' to '{destination}'")
        destination.parent.mkdir(parents=True, exist_ok=True)
        try:
            with self._session.get(url, stream=True) as response:
                response.raise_for_status()
                with open(destination, "wb") as file:
                    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                        if chunk:
                            file.write(chunk)
        except (requests.RequestException, OSError) as e:
            logger.error(f"Download of '{url}' failed: {e}")
            return Left(InstallerError(f"Could not download '{url}': {e}"))
        return Right(destination)

    @staticmethod
    def _make_executable(path: Path) -> None:
        if os.name != "nt":
            path.chmod(0o755)

    def install_downloader(self) -> Either[InstallerError, Path]:
        """Downloads the yt-dlp release binary for this platform."""
        asset = YT_DLP_ASSETS.get(self._system)
        if asset is None:
            return Left(InstallerError(f"No downloader build for platform '{self._system}'."))

        target = self._settings.bin_path / executable_name("yt-dlp")

        def finish(path: Path) -> Path:
            self._make_executable(path)
            logger.info(f"Downloader installed at '{path}'.")
            return path

        return self._download(YT_DLP_RELEASE + asset, target).map(finish)

    def _extract(self, archive: Path) -> Either[InstallerError, List[Path]]:
        bin_path = self._settings.bin_path
        wanted = {executable_name(name) for name in TRANSCODER_BINARIES}
        installed: List[Path] = []

        try:
            if archive.name.endswith(".zip"):
                with zipfile.ZipFile(archive) as bundle:
                    for member in bundle.namelist():
                        name = Path(member).name
                        if name in wanted:
                            target = bin_path / name
                            with bundle.open(member) as src, open(target, "wb") as dst:
                                shutil.copyfileobj(src, dst)
                            installed.append(target)
            else:
                with tarfile.open(archive, "r:*") as bundle:
                    for member in bundle.getmembers():
                        name = Path(member.name).name
                        if member.isfile() and name in wanted:
                            target = bin_path / name
                            src = bundle.extractfile(member)
                            with src, open(target, "wb") as dst:
                                shutil.copyfileobj(src, dst)
                            installed.append(target)
        except (zipfile.BadZipFile, tarfile.TarError, OSError) as e:
            logger.error(f"Could not extract '{archive}': {e}")
            return Left(InstallerError(f"Could not extract '{archive.name}': {e}"))
        finally:
            archive.unlink(missing_ok=True)

        if executable_name("ffmpeg") not in {path.name for path in installed}:
            return Left(InstallerError(f"ffmpeg was not found in '{archive.name}'."))

        for path in installed:
            self._make_executable(path)
        logger.info(f"Transcoder installed: {', '.join(p.name for p in installed)}")
        return Right(installed)

    def install_transcoder(self) -> Either[InstallerError, List[Path]]:
        """Downloads an ffmpeg build and extracts ffmpeg and ffprobe."""
        url = FFMPEG_ASSETS.get(self._system)
        if url is None:
            return Left(InstallerError(f"No transcoder build for platform '{self._system}'."))

        suffix = ".tar.xz" if url.endswith(".tar.xz") else ".zip"
        archive = self._settings.bin_path / f"ffmpeg-download{suffix}"
        return self._download(url, archive).bind(self._extract)

    def install(self) -> Either[InstallerError, str]:
        """Installs both the downloader and the transcoder into the bin folder."""
        return (
            self.install_downloader()
            .bind(lambda _: self.install_transcoder())
            .map(lambda _: f"Downloader and transcoder installed in '{self._settings.bin_path}'.")
        )

    def fetch_remote_version(self) -> Either[InstallerError, str]:
        url = self._settings.version_url
        try:
            response = self._session.get(url, timeout=VERSION_TIMEOUT)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Could not fetch version file '{url}': {e}")
            return Left(InstallerError(f"Could not check for updates: {e}"))
        return Right(response.text.strip())

    def check_for_update(self, current_version: str) -> Either[InstallerError, UpdateStatus]:
        """Compares current_version with the published version file."""

        def compare(remote: str) -> Either[InstallerError, UpdateStatus]:
            try:
                local, published = Version(current_version), Version(remote)
            except InvalidVersion as e:
                return Left(InstallerError(f"Unreadable version number: {e}"))
            logger.info(f"Local version {local}, published version {published}")
            if published > local:
                return Right(UpdateStatus.AVAILABLE)
            if published < local:
                logger.warning(
                    f"Published version {published} is older than local {local}."
                )
                return Right(UpdateStatus.LOCAL_NEWER)
            return Right(UpdateStatus.UP_TO_DATE)

        return self.fetch_remote_version().bind(compare)

    def _upgrade_package(self) -> Either[InstallerError, UpdateStatus]:
        command = [sys.executable, "-m", "pip", "install", "--upgrade", PACKAGE_NAME]
        logger.info(f"Upgrading {PACKAGE_NAME}")
        try:
            completed = subprocess.run(command, check=False)
        except OSError as e:
            return Left(InstallerError(f"Could not run pip: {e}"))
        if completed.returncode != 0:
            return Left(InstallerError(f"pip exited with code {completed.returncode}."))
        return Right(UpdateStatus.AVAILABLE)

    def update(self, current_version: str) -> Either[InstallerError, UpdateStatus]:
        """
        Refreshes an installed downloader binary, then upgrades this package
        when a newer version is published. A published version older than the
        local one is reported, never acted on.
        """
        if (self._settings.bin_path / executable_name("yt-dlp")).is_file():
            refreshed = self.install_downloader()
            if refreshed.is_left():
                return refreshed

        def apply(status: UpdateStatus) -> Either[InstallerError, UpdateStatus]:
            if status is UpdateStatus.AVAILABLE:
                return self._upgrade_package()
            return Right(status)

        return self.check_for_update(current_version).bind(apply)

import logging
from pathlib import Path
from typing import List

from pymonad.either import Either, Left, Right

from .domain.errors import ConfigError
from .domain.models import Mode, Settings
from .playlist_file import write_template

logger = logging.getLogger(__name__)


def ensure_layout(settings: Settings) -> Either[ConfigError, List[Path]]:
    """
    Creates the output, archive and bin folders, empty archive files and the
    playlist file template when they are missing.

    Returns:
        Either a ConfigError when a path cannot be created (for instance a
        regular file sits where a folder is expected), or the paths that were
        created by this call.
    """
    created: List[Path] = []
    current = settings.home

    try:
        for folder in (settings.video_path, settings.audio_path, settings.archive_path, settings.bin_path):
            if not folder.is_dir():
                current = folder
                folder.mkdir(parents=True, exist_ok=True)
                created.append(folder)

        for mode in Mode:
            archive = settings.archive_for(mode)
            if not archive.exists():
                current = archive
                archive.touch()
                created.append(archive)

        current = settings.playlist_file
        if write_template(settings.playlist_file):
            created.append(settings.playlist_file)
    except OSError as e:
        logger.error(f"Could not create '{current}': {e}")
        return Left(ConfigError(f"Could not create '{current}': {e}"))

    for path in created:
        logger.info(f"Created '{path}'.")
    return Right(created)

import logging
from pathlib import Path
from typing import Iterable, List

from pymonad.either import Either, Left, Right

from .domain.errors import PlaylistFileError
from .domain.models import PlaylistBatch

logger = logging.getLogger(__name__)

VIDEO_HEADER = "[Video Playlists]"
AUDIO_HEADER = "[Audio Playlists]"
COMMENT_MARKER = "#"

TEMPLATE = f"""# tubegrab playlist file
# Put one URL per line under the matching section.
# Lines starting with '{COMMENT_MARKER}' and blank lines are ignored.

{VIDEO_HEADER}

{AUDIO_HEADER}
"""


def _is_skipped(line: str) -> bool:
    return not line or line.startswith(COMMENT_MARKER)


def _header_index(lines: List[str], header: str) -> Either[PlaylistFileError, int]:
    positions = [i for i, line in enumerate(lines) if line == header]
    if not positions:
        return Left(PlaylistFileError(f"Section header '{header}' is missing."))
    if len(positions) > 1:
        return Left(PlaylistFileError(f"Section header '{header}' appears more than once."))
    return Right(positions[0])


def parse_playlist_lines(lines: Iterable[str]) -> Either[PlaylistFileError, PlaylistBatch]:
    """
    Splits playlist file lines into video and audio URLs.

    Both headers must be present, once each, video first. URLs between the
    headers are video URLs; URLs after the audio header are audio URLs.
    """
    stripped = [line.strip() for line in lines]

    def split(video_at: int, audio_at: int) -> Either[PlaylistFileError, PlaylistBatch]:
        if audio_at < video_at:
            return Left(PlaylistFileError(
                f"'{AUDIO_HEADER}' must come after '{VIDEO_HEADER}'."
            ))
        ignored = [line for line in stripped[:video_at] if not _is_skipped(line)]
        if ignored:
            logger.warning(f"Ignoring {len(ignored)} line(s) before '{VIDEO_HEADER}'.")
        video = tuple(line for line in stripped[video_at + 1:audio_at] if not _is_skipped(line))
        audio = tuple(line for line in stripped[audio_at + 1:] if not _is_skipped(line))
        return Right(PlaylistBatch(video=video, audio=audio))

    return _header_index(stripped, VIDEO_HEADER).bind(
        lambda video_at: _header_index(stripped, AUDIO_HEADER).bind(
            lambda audio_at: split(video_at, audio_at)
        )
    )


def read_playlist_file(path: Path) -> Either[PlaylistFileError, PlaylistBatch]:
    """Reads and parses the playlist file at path."""
    try:
        with open(path, "r", encoding="utf-8") as file:
            lines = file.read().splitlines()
    except OSError as e:
        logger.error(f"Could not read playlist file '{path}': {e}")
        return Left(PlaylistFileError(f"Could not read playlist file '{path}': {e}"))

    result = parse_playlist_lines(lines)
    if result.is_right():
        batch = result.value
        logger.info(
            f"Playlist file '{path}': {len(batch.video)} video, {len(batch.audio)} audio URL(s)."
        )
    return result


def write_template(path: Path) -> bool:
    """Creates the playlist file from the template. Returns False if it exists."""
    if path.exists():
        return False
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(TEMPLATE, encoding="utf-8")
    logger.info(f"Created playlist file template at '{path}'.")
    return True

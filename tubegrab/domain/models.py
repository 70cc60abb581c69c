from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple


class Mode(str, Enum):
    """What the downloader should produce."""
    VIDEO = "video"
    AUDIO = "audio"


class UpdateStatus(str, Enum):
    """Outcome of comparing the local version with the published one."""
    UP_TO_DATE = "up_to_date"
    AVAILABLE = "available"
    LOCAL_NEWER = "local_newer"


@dataclass(frozen=True)
class ConversionOptions:
    """ffmpeg parameters applied to video downloads when conversion is on."""
    container: str = "mp4"
    video_bitrate: Optional[str] = None
    audio_bitrate: Optional[str] = None
    resolution: Optional[int] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    strip_audio: bool = False
    strip_subtitles: bool = False


@dataclass(frozen=True)
class Settings:
    """Effective options for one invocation. Built once, never mutated."""
    home: Path
    video_path: Path
    audio_path: Path
    archive_path: Path
    bin_path: Path
    playlist_file: Path
    downloader: Tuple[str, ...]
    version_url: str
    transcoder_dir: Optional[Path] = None
    use_archive: bool = True
    whole_playlist: bool = False
    verbose: bool = False
    convert: bool = False
    conversion: ConversionOptions = field(default_factory=ConversionOptions)
    extra_options: Tuple[str, ...] = ()

    def root_for(self, mode: Mode) -> Path:
        return self.video_path if mode is Mode.VIDEO else self.audio_path

    def archive_for(self, mode: Mode) -> Path:
        return self.archive_path / f"{mode.value}_archive.txt"


@dataclass(frozen=True)
class PlaylistBatch:
    """URLs read from the playlist file, in file order."""
    video: Tuple[str, ...] = ()
    audio: Tuple[str, ...] = ()

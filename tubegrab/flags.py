from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from pymonad.either import Either, Left, Right

from .domain.errors import FlagConflictError
from .domain.models import Mode
from .i18n import get_message


@dataclass(frozen=True)
class CliFlags:
    """Flags given on the command line. Action flags select non-interactive mode."""
    video: bool = False
    audio: bool = False
    playlists: bool = False
    convert: bool = False
    url: Optional[str] = None
    output_path: Optional[Path] = None
    options: Optional[str] = None
    install: bool = False
    update: bool = False
    verbose: bool = False
    no_archive: bool = False
    whole_playlist: bool = False

    def has_action(self) -> bool:
        return any((
            self.video, self.audio, self.playlists, self.convert,
            self.url is not None, self.output_path is not None,
            self.options is not None, self.install, self.update,
        ))

    @property
    def mode(self) -> Optional[Mode]:
        if self.video:
            return Mode.VIDEO
        if self.audio:
            return Mode.AUDIO
        return None


def validate_flags(flags: CliFlags) -> Either[FlagConflictError, CliFlags]:
    """Rejects flag combinations that cannot be acted on."""

    def conflict(key: str) -> Either[FlagConflictError, CliFlags]:
        return Left(FlagConflictError(get_message(key)))

    downloads = flags.video or flags.audio or flags.playlists
    if flags.video and flags.audio:
        return conflict("conflict_video_audio")
    if flags.playlists and (flags.video or flags.audio):
        return conflict("conflict_playlists_mode")
    if flags.install and flags.update:
        return conflict("conflict_install_update")
    if (flags.install or flags.update) and (downloads or flags.convert or flags.url):
        return conflict("conflict_maintenance_download")
    if flags.convert and flags.audio:
        return conflict("conflict_convert_audio")
    if flags.convert and not (flags.video or flags.playlists):
        return conflict("conflict_convert_alone")
    if (flags.video or flags.audio) and not flags.url:
        return conflict("missing_url")
    if flags.url and not (flags.video or flags.audio):
        return conflict("url_without_mode")
    if not (downloads or flags.install or flags.update):
        return conflict("no_action")
    return Right(flags)


def settings_overrides(flags: CliFlags) -> Dict[str, Any]:
    """Maps command-line flags onto settings keys. None leaves a setting alone."""
    overrides: Dict[str, Any] = {
        "verbose": True if flags.verbose else None,
        "use_archive": False if flags.no_archive else None,
        "whole_playlist": True if flags.whole_playlist else None,
        "convert": True if flags.convert else None,
        "extra_options": flags.options,
    }
    if flags.output_path is not None:
        if flags.video or flags.playlists:
            overrides["video_path"] = flags.output_path
        if flags.audio or flags.playlists:
            overrides["audio_path"] = flags.output_path
    return overrides

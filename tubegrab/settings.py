import dataclasses
import logging
import os
import shlex
import shutil
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml
from pymonad.either import Either, Left, Right

from .domain.errors import ConfigError
from .domain.models import ConversionOptions, Settings

logger = logging.getLogger(__name__)

HOME_ENV_VAR = "TUBEGRAB_HOME"
SETTINGS_FILE_NAME = "settings.yml"
VERSION_URL = "https://raw.githubusercontent.com/tubegrab/tubegrab/main/VERSION"

PATH_KEYS = {"video_path", "audio_path", "archive_path", "bin_path", "playlist_file"}
BOOL_KEYS = {"use_archive", "whole_playlist", "verbose", "convert"}
CONVERSION_KEYS = {f.name for f in dataclasses.fields(ConversionOptions)}
CONVERSION_TEXT_KEYS = {"container", "video_bitrate", "audio_bitrate", "start_time", "end_time"}
CONVERSION_BOOL_KEYS = {"strip_audio", "strip_subtitles"}


def executable_name(name: str) -> str:
    return f"{name}.exe" if os.name == "nt" else name


def default_home() -> Path:
    """The root folder, ~/tubegrab unless TUBEGRAB_HOME says otherwise."""
    env_home = os.environ.get(HOME_ENV_VAR)
    if env_home:
        return Path(env_home).expanduser()
    return Path.home() / "tubegrab"


def resolve_downloader(bin_path: Path) -> Tuple[str, ...]:
    """
    Finds how to invoke yt-dlp: an installed binary in bin_path, then one on
    PATH, then the yt_dlp package through the current interpreter.
    """
    installed = bin_path / executable_name("yt-dlp")
    if installed.is_file():
        return (str(installed),)
    on_path = shutil.which("yt-dlp")
    if on_path:
        return (on_path,)
    return (sys.executable, "-m", "yt_dlp")


def resolve_transcoder_dir(bin_path: Path) -> Optional[Path]:
    """bin_path when an installed ffmpeg lives there, otherwise None."""
    if (bin_path / executable_name("ffmpeg")).is_file():
        return bin_path
    return None


def default_settings(home: Optional[Path] = None) -> Settings:
    """The fixed defaults block, rooted at home."""
    home = home or default_home()
    bin_path = home / "bin"
    return Settings(
        home=home,
        video_path=home / "Video",
        audio_path=home / "Audio",
        archive_path=home / "Archive",
        bin_path=bin_path,
        playlist_file=home / "playlists.txt",
        downloader=resolve_downloader(bin_path),
        transcoder_dir=resolve_transcoder_dir(bin_path),
        version_url=VERSION_URL,
    )


def _as_tuple(value: Any) -> Tuple[str, ...]:
    if isinstance(value, str):
        return tuple(shlex.split(value))
    return tuple(str(item) for item in value)


def load_settings_file(path: Path) -> Either[ConfigError, Dict[str, Any]]:
    """
    Reads the YAML settings file. A missing file is not an error and yields
    an empty mapping.
    """
    if not path.is_file():
        logger.info(f"No settings file at '{path}', using defaults.")
        return Right({})

    try:
        with open(path, "r", encoding="utf-8") as file:
            data = yaml.safe_load(file)
    except (yaml.YAMLError, OSError) as e:
        logger.error(f"Could not read settings file '{path}': {e}")
        return Left(ConfigError(f"Could not read settings file '{path}': {e}"))

    if data is None:
        return Right({})
    if not isinstance(data, dict):
        return Left(ConfigError(f"Settings file '{path}' must contain a mapping."))

    logger.info(f"Loaded settings file '{path}'.")
    return Right(data)


def _coerce_conversion(values: Dict[str, Any]) -> Either[ConfigError, Dict[str, Any]]:
    """
    Converts YAML scalars to the types ConversionOptions expects. Numbers
    become text for bitrates and times, so `1:30` (read by YAML as 90) is 90
    seconds.
    """
    converted: Dict[str, Any] = {}
    for name, value in values.items():
        if value is None:
            continue
        if name in CONVERSION_TEXT_KEYS:
            converted[name] = str(value)
        elif name in CONVERSION_BOOL_KEYS:
            if not isinstance(value, bool):
                return Left(ConfigError(f"Conversion option '{name}' must be true or false."))
            converted[name] = value
        elif name == "resolution":
            invalid = ConfigError(f"Conversion option 'resolution' must be a number, got '{value}'.")
            if isinstance(value, bool):
                return Left(invalid)
            try:
                converted[name] = int(value)
            except (TypeError, ValueError):
                return Left(invalid)
    return Right(converted)


def apply_overrides(settings: Settings, overrides: Dict[str, Any]) -> Either[ConfigError, Settings]:
    """
    Returns a copy of settings with the given values applied. Keys whose
    value is None are skipped, unknown keys are logged and ignored.
    """
    changes: Dict[str, Any] = {}
    for key, value in overrides.items():
        if value is None:
            continue
        if key in PATH_KEYS:
            changes[key] = Path(value).expanduser()
        elif key in BOOL_KEYS:
            if not isinstance(value, bool):
                return Left(ConfigError(f"Setting '{key}' must be true or false."))
            changes[key] = value
        elif key in ("extra_options", "downloader"):
            changes[key] = _as_tuple(value)
        elif key == "version_url":
            changes[key] = str(value)
        elif key == "conversion":
            if isinstance(value, ConversionOptions):
                changes[key] = value
                continue
            if not isinstance(value, dict):
                return Left(ConfigError("'conversion' must be a mapping."))
            unknown = set(value) - CONVERSION_KEYS
            for name in sorted(unknown):
                logger.warning(f"Ignoring unknown conversion option '{name}'.")
            known = _coerce_conversion({k: v for k, v in value.items() if k in CONVERSION_KEYS})
            if known.is_left():
                return known
            changes[key] = dataclasses.replace(settings.conversion, **known.value)
        else:
            logger.warning(f"Ignoring unknown setting '{key}'.")

    if "bin_path" in changes:
        if "downloader" not in changes:
            changes["downloader"] = resolve_downloader(changes["bin_path"])
        changes["transcoder_dir"] = resolve_transcoder_dir(changes["bin_path"])

    return Right(dataclasses.replace(settings, **changes))


def resolve_settings(
    overrides: Optional[Dict[str, Any]] = None,
    config_file: Optional[Path] = None,
    home: Optional[Path] = None,
) -> Either[ConfigError, Settings]:
    """
    Merges defaults, the settings file and command-line overrides, in that
    order of precedence.
    """
    base = default_settings(home)
    config_file = config_file or base.home / SETTINGS_FILE_NAME

    return (
        load_settings_file(config_file)
        .bind(lambda data: apply_overrides(base, data))
        .bind(lambda settings: apply_overrides(settings, overrides or {}))
    )

import logging
from typing import List

from .models import ConversionOptions, Mode, Settings

logger = logging.getLogger(__name__)

PLAYLIST_URL_PATTERN = "list="

SINGLE_TEMPLATE = "%(title)s.%(ext)s"
PLAYLIST_TEMPLATE = "%(playlist)s/%(playlist_index)s - %(title)s.%(ext)s"

AUDIO_FORMAT = "mp3"
AUDIO_QUALITY = "0"
# Splits "Artist - Title" video titles into tags. Titles without the
# separator, or with more than one, are tagged incorrectly.
TITLE_METADATA_PATTERN = "title:%(artist)s - %(title)s"

# Files already in the target container are remuxed here first, otherwise the
# recode step skips them and drops the ffmpeg arguments.
REMUX_POSTPROCESSOR = "FFmpegVideoRemuxer"
INTERMEDIATE_CONTAINER = "mkv"
FALLBACK_INTERMEDIATE_CONTAINER = "mp4"


def is_playlist_url(url: str) -> bool:
    """Returns True when the URL carries a playlist id."""
    return PLAYLIST_URL_PATTERN in url


def conversion_args(options: ConversionOptions) -> List[str]:
    """ffmpeg arguments for the downloader's VideoConvertor post-processor."""
    args: List[str] = []
    if options.video_bitrate:
        args += ["-b:v", options.video_bitrate]
    if options.audio_bitrate:
        args += ["-b:a", options.audio_bitrate]
    if options.resolution:
        args += ["-vf", f"scale=-2:{options.resolution}"]
    if options.start_time:
        args += ["-ss", options.start_time]
    if options.end_time:
        args += ["-to", options.end_time]
    if options.strip_audio:
        args.append("-an")
    if options.strip_subtitles:
        args.append("-sn")
    return args


def intermediate_container(container: str) -> str:
    """A container different from the target, used to force the recode."""
    if container == INTERMEDIATE_CONTAINER:
        return FALLBACK_INTERMEDIATE_CONTAINER
    return INTERMEDIATE_CONTAINER


def build_command(url: str, mode: Mode, settings: Settings) -> List[str]:
    """
    Builds the downloader command line for a single URL.

    Args:
        url: The page or playlist URL, passed through unvalidated.
        mode: Mode.VIDEO or Mode.AUDIO.
        settings: The effective settings for this invocation.

    Returns:
        The full argv list, downloader invocation first and URL last.
    """
    command = list(settings.downloader)

    if settings.verbose:
        command.append("--verbose")
    if settings.transcoder_dir is not None:
        command += ["--ffmpeg-location", str(settings.transcoder_dir)]
    if settings.use_archive:
        command += ["--download-archive", str(settings.archive_for(mode))]

    root = settings.root_for(mode)
    if is_playlist_url(url) or settings.whole_playlist:
        command += ["-o", str(root / PLAYLIST_TEMPLATE), "--yes-playlist"]
    else:
        command += ["-o", str(root / SINGLE_TEMPLATE), "--no-playlist"]

    if mode is Mode.AUDIO:
        command += [
            "-x",
            "--audio-format", AUDIO_FORMAT,
            "--audio-quality", AUDIO_QUALITY,
            "--embed-metadata",
            "--parse-metadata", TITLE_METADATA_PATTERN,
        ]
    elif settings.convert:
        container = settings.conversion.container
        ffmpeg_args = conversion_args(settings.conversion)
        command += ["--recode-video", container]
        if ffmpeg_args:
            mapping = f"{container}>{intermediate_container(container)}"
            command += [
                "--use-postprocessor", f"{REMUX_POSTPROCESSOR}:preferedformat={mapping}",
                "--postprocessor-args", "VideoConvertor:" + " ".join(ffmpeg_args),
            ]

    command += list(settings.extra_options)
    command.append(url)

    logger.info(f"Built {mode.value} command for {url}")
    return command

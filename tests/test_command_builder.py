import dataclasses

from tubegrab.domain.commands import (
    PLAYLIST_TEMPLATE,
    SINGLE_TEMPLATE,
    TITLE_METADATA_PATTERN,
    build_command,
    conversion_args,
    intermediate_container,
    is_playlist_url,
)
from tubegrab.domain.models import ConversionOptions, Mode

VIDEO_URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
PLAYLIST_URL = "https://www.youtube.com/playlist?list=PL12345"


def _value_after(command, flag):
    return command[command.index(flag) + 1]


def test_plain_video_has_no_grouping_or_transcoding(settings):
    """
    Given a non-playlist URL in video mode without conversion,
    When the command is built,
    Then it has no playlist segment and no transcoding flags.
    """
    command = build_command(VIDEO_URL, Mode.VIDEO, settings)

    assert command[0] == "yt-dlp"
    assert command[-1] == VIDEO_URL
    assert _value_after(command, "-o") == str(settings.video_path / SINGLE_TEMPLATE)
    assert "%(playlist)s" not in " ".join(command)
    assert "--no-playlist" in command
    assert "--recode-video" not in command
    assert "--postprocessor-args" not in command
    assert "-x" not in command


def test_playlist_url_is_grouped_without_whole_playlist_flag(settings):
    """
    Given a URL matching the playlist pattern and whole_playlist off,
    When the command is built,
    Then the output template groups by playlist name.
    """
    assert settings.whole_playlist is False

    command = build_command(PLAYLIST_URL, Mode.VIDEO, settings)

    assert _value_after(command, "-o") == str(settings.video_path / PLAYLIST_TEMPLATE)
    assert "--yes-playlist" in command
    assert "--no-playlist" not in command


def test_playlist_url_is_grouped_with_whole_playlist_flag(settings):
    settings = dataclasses.replace(settings, whole_playlist=True)

    command = build_command(PLAYLIST_URL, Mode.VIDEO, settings)

    assert _value_after(command, "-o") == str(settings.video_path / PLAYLIST_TEMPLATE)


def test_whole_playlist_flag_groups_plain_urls(settings):
    settings = dataclasses.replace(settings, whole_playlist=True)

    command = build_command(VIDEO_URL, Mode.AUDIO, settings)

    assert _value_after(command, "-o") == str(settings.audio_path / PLAYLIST_TEMPLATE)
    assert "--yes-playlist" in command


def test_audio_mode_always_extracts_mp3_with_title_metadata(settings):
    """
    Given audio mode,
    When the command is built,
    Then the fixed format, best quality and artist/title pattern are present.
    """
    command = build_command(VIDEO_URL, Mode.AUDIO, settings)

    assert "-x" in command
    assert _value_after(command, "--audio-format") == "mp3"
    assert _value_after(command, "--audio-quality") == "0"
    assert _value_after(command, "--parse-metadata") == TITLE_METADATA_PATTERN
    assert _value_after(command, "-o") == str(settings.audio_path / SINGLE_TEMPLATE)


def test_audio_mode_ignores_conversion(settings):
    settings = dataclasses.replace(
        settings, convert=True, conversion=ConversionOptions(container="mkv", resolution=720)
    )

    command = build_command(VIDEO_URL, Mode.AUDIO, settings)

    assert "--recode-video" not in command
    assert "--postprocessor-args" not in command


def test_convert_appends_container_and_ffmpeg_args(settings):
    conversion = ConversionOptions(
        container="mkv",
        video_bitrate="2M",
        audio_bitrate="128k",
        resolution=720,
        start_time="00:00:10",
        end_time="00:01:00",
        strip_audio=True,
        strip_subtitles=True,
    )
    settings = dataclasses.replace(settings, convert=True, conversion=conversion)

    command = build_command(VIDEO_URL, Mode.VIDEO, settings)

    assert _value_after(command, "--recode-video") == "mkv"
    assert _value_after(command, "--use-postprocessor") == "FFmpegVideoRemuxer:preferedformat=mkv>mp4"
    assert _value_after(command, "--postprocessor-args") == (
        "VideoConvertor:-b:v 2M -b:a 128k -vf scale=-2:720 -ss 00:00:10 -to 00:01:00 -an -sn"
    )
    assert command[-1] == VIDEO_URL


def test_convert_with_defaults_only_recodes(settings):
    settings = dataclasses.replace(settings, convert=True)

    command = build_command(VIDEO_URL, Mode.VIDEO, settings)

    assert _value_after(command, "--recode-video") == "mp4"
    assert "--postprocessor-args" not in command
    assert "--use-postprocessor" not in command


def test_convert_to_the_same_container_still_transcodes(settings):
    """
    Given an mp4 target and a bitrate,
    When the command is built,
    Then mp4 downloads are remuxed to mkv first so the recode to mp4 runs with the ffmpeg arguments.
    """
    conversion = ConversionOptions(container="mp4", video_bitrate="2M")
    settings = dataclasses.replace(settings, convert=True, conversion=conversion)

    command = build_command(VIDEO_URL, Mode.VIDEO, settings)

    assert _value_after(command, "--use-postprocessor") == "FFmpegVideoRemuxer:preferedformat=mp4>mkv"
    assert _value_after(command, "--recode-video") == "mp4"
    assert _value_after(command, "--postprocessor-args") == "VideoConvertor:-b:v 2M"


def test_archive_file_is_per_mode(settings):
    video = build_command(VIDEO_URL, Mode.VIDEO, settings)
    audio = build_command(VIDEO_URL, Mode.AUDIO, settings)

    assert _value_after(video, "--download-archive") == str(settings.archive_path / "video_archive.txt")
    assert _value_after(audio, "--download-archive") == str(settings.archive_path / "audio_archive.txt")


def test_archive_is_skipped_when_disabled(settings):
    settings = dataclasses.replace(settings, use_archive=False)

    command = build_command(VIDEO_URL, Mode.VIDEO, settings)

    assert "--download-archive" not in command


def test_verbose_transcoder_and_extra_options(settings, tmp_path):
    settings = dataclasses.replace(
        settings,
        verbose=True,
        transcoder_dir=tmp_path / "bin",
        extra_options=("--embed-subs", "--limit-rate", "1M"),
        downloader=("python", "-m", "yt_dlp"),
    )

    command = build_command(VIDEO_URL, Mode.VIDEO, settings)

    assert command[:3] == ["python", "-m", "yt_dlp"]
    assert "--verbose" in command
    assert _value_after(command, "--ffmpeg-location") == str(tmp_path / "bin")
    assert command[-4:] == ["--embed-subs", "--limit-rate", "1M", VIDEO_URL]


def test_titles_and_paths_stay_single_arguments(settings, tmp_path):
    """Paths with spaces are discrete list items, never split or quoted."""
    settings = dataclasses.replace(settings, video_path=tmp_path / "My Videos & Clips")

    command = build_command(VIDEO_URL, Mode.VIDEO, settings)

    assert _value_after(command, "-o") == str(tmp_path / "My Videos & Clips" / SINGLE_TEMPLATE)


def test_is_playlist_url():
    assert is_playlist_url(PLAYLIST_URL)
    assert is_playlist_url("https://www.youtube.com/watch?v=abc&list=PL1")
    assert not is_playlist_url(VIDEO_URL)


def test_conversion_args_empty_by_default():
    assert conversion_args(ConversionOptions()) == []


def test_intermediate_container_differs_from_target():
    assert intermediate_container("mp4") == "mkv"
    assert intermediate_container("webm") == "mkv"
    assert intermediate_container("mkv") == "mp4"

import io
import tarfile
import zipfile
from unittest.mock import MagicMock, patch

import pytest
import requests
from pymonad.either import Left, Right

from tubegrab.adapters.release_adapter import (
    FFMPEG_ASSETS,
    PACKAGE_NAME,
    YT_DLP_RELEASE,
    ReleaseInstaller,
)
from tubegrab.domain.errors import InstallerError
from tubegrab.domain.models import UpdateStatus


def _response(content=b"", text=""):
    response = MagicMock()
    response.__enter__.return_value = response
    response.iter_content.return_value = [content]
    response.text = text
    return response


def _zip_bytes(names):
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as bundle:
        for name in names:
            bundle.writestr(name, f"binary {name}")
    return buffer.getvalue()


def _tar_bytes(names):
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:xz") as bundle:
        for name in names:
            data = f"binary {name}".encode()
            info = tarfile.TarInfo(name)
            info.size = len(data)
            bundle.addfile(info, io.BytesIO(data))
    return buffer.getvalue()


@pytest.fixture
def session():
    return MagicMock()


def test_install_downloader(settings, session):
    """
    Given a reachable release URL,
    When install_downloader runs on Linux,
    Then the binary lands in the bin folder.
    """
    session.get.return_value = _response(b"yt-dlp binary")
    installer = ReleaseInstaller(settings, session=session, system="Linux")

    result = installer.install_downloader()

    assert result.is_right()
    assert result.value.read_bytes() == b"yt-dlp binary"
    assert result.value.parent == settings.bin_path
    session.get.assert_called_once_with(YT_DLP_RELEASE + "yt-dlp_linux", stream=True)


def test_install_downloader_http_error(settings, session):
    response = _response()
    response.raise_for_status.side_effect = requests.HTTPError("404 Not Found")
    session.get.return_value = response
    installer = ReleaseInstaller(settings, session=session, system="Linux")

    result = installer.install_downloader()

    assert result.is_left()
    error, _ = result.monoid
    assert isinstance(error, InstallerError)
    assert "404 Not Found" in error.message


def test_unsupported_platform(settings, session):
    installer = ReleaseInstaller(settings, session=session, system="Plan9")

    assert installer.install_downloader().is_left()
    assert installer.install_transcoder().is_left()
    session.get.assert_not_called()


def test_install_transcoder_from_tar(settings, session):
    session.get.return_value = _response(
        _tar_bytes(["ffmpeg-master/bin/ffmpeg", "ffmpeg-master/bin/ffprobe", "ffmpeg-master/LICENSE.txt"])
    )
    installer = ReleaseInstaller(settings, session=session, system="Linux")

    result = installer.install_transcoder()

    assert result.is_right()
    assert sorted(p.name for p in result.value) == ["ffmpeg", "ffprobe"]
    assert (settings.bin_path / "ffmpeg").read_text() == "binary ffmpeg-master/bin/ffmpeg"
    assert not (settings.bin_path / "LICENSE.txt").exists()
    assert not (settings.bin_path / "ffmpeg-download.tar.xz").exists()
    session.get.assert_called_once_with(FFMPEG_ASSETS["Linux"], stream=True)


def test_install_transcoder_from_zip(settings, session):
    session.get.return_value = _response(_zip_bytes(["ffmpeg", "readme.txt"]))
    installer = ReleaseInstaller(settings, session=session, system="Darwin")

    result = installer.install_transcoder()

    assert result.is_right()
    assert [p.name for p in result.value] == ["ffmpeg"]
    assert not (settings.bin_path / "ffmpeg-download.zip").exists()


def test_install_transcoder_without_ffmpeg(settings, session):
    session.get.return_value = _response(_zip_bytes(["readme.txt"]))
    installer = ReleaseInstaller(settings, session=session, system="Darwin")

    result = installer.install_transcoder()

    assert result.is_left()
    error, _ = result.monoid
    assert "ffmpeg was not found" in error.message


def test_install_transcoder_corrupt_archive(settings, session):
    session.get.return_value = _response(b"not a zip")
    installer = ReleaseInstaller(settings, session=session, system="Darwin")

    result = installer.install_transcoder()

    assert result.is_left()
    error, _ = result.monoid
    assert "Could not extract" in error.message


def test_install_stops_after_downloader_failure(settings):
    installer = ReleaseInstaller(settings, session=MagicMock(), system="Linux")
    with patch.object(installer, "install_downloader", return_value=Left(InstallerError("boom"))), \
            patch.object(installer, "install_transcoder") as transcoder:
        result = installer.install()

    assert result.is_left()
    transcoder.assert_not_called()


@pytest.mark.parametrize(
    "remote, expected",
    [
        ("0.1.0\n", UpdateStatus.UP_TO_DATE),
        ("0.2.0", UpdateStatus.AVAILABLE),
        ("0.0.9", UpdateStatus.LOCAL_NEWER),
    ],
)
def test_check_for_update(settings, session, remote, expected):
    session.get.return_value = _response(text=remote)
    installer = ReleaseInstaller(settings, session=session, system="Linux")

    result = installer.check_for_update("0.1.0")

    assert result.value is expected
    session.get.assert_called_once_with(settings.version_url, timeout=15)


def test_check_for_update_unreadable_version(settings, session):
    session.get.return_value = _response(text="<html>not found</html>")
    installer = ReleaseInstaller(settings, session=session, system="Linux")

    result = installer.check_for_update("0.1.0")

    assert result.is_left()


def test_check_for_update_network_error(settings, session):
    session.get.side_effect = requests.ConnectionError("offline")
    installer = ReleaseInstaller(settings, session=session, system="Linux")

    result = installer.check_for_update("0.1.0")

    assert result.is_left()
    error, _ = result.monoid
    assert "offline" in error.message


@patch("tubegrab.adapters.release_adapter.subprocess.run")
def test_update_upgrades_package_when_newer(mock_run, settings, session):
    mock_run.return_value = MagicMock(returncode=0)
    session.get.return_value = _response(text="1.0.0")
    installer = ReleaseInstaller(settings, session=session, system="Linux")

    result = installer.update("0.1.0")

    assert result.value is UpdateStatus.AVAILABLE
    command = mock_run.call_args[0][0]
    assert command[-3:] == ["install", "--upgrade", PACKAGE_NAME]


@patch("tubegrab.adapters.release_adapter.subprocess.run")
def test_update_reports_pip_failure(mock_run, settings, session):
    mock_run.return_value = MagicMock(returncode=2)
    session.get.return_value = _response(text="1.0.0")
    installer = ReleaseInstaller(settings, session=session, system="Linux")

    result = installer.update("0.1.0")

    assert result.is_left()


@patch("tubegrab.adapters.release_adapter.subprocess.run")
def test_update_never_downgrades(mock_run, settings, session, caplog):
    session.get.return_value = _response(text="0.0.1")
    installer = ReleaseInstaller(settings, session=session, system="Linux")

    result = installer.update("0.1.0")

    assert result.value is UpdateStatus.LOCAL_NEWER
    mock_run.assert_not_called()
    assert "older than local" in caplog.text


def test_update_refreshes_installed_downloader(settings, session):
    settings.bin_path.mkdir(parents=True)
    (settings.bin_path / "yt-dlp").write_text("old")
    installer = ReleaseInstaller(settings, session=session, system="Linux")
    with patch.object(installer, "install_downloader") as refresh, \
            patch.object(installer, "check_for_update") as check:
        refresh.return_value = Right(settings.bin_path / "yt-dlp")
        check.return_value = Right(UpdateStatus.UP_TO_DATE)

        result = installer.update("0.1.0")

    refresh.assert_called_once()
    assert result.value is UpdateStatus.UP_TO_DATE

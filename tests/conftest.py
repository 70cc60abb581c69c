import pytest

from tubegrab.domain.models import Settings
from tubegrab.i18n import set_lang


@pytest.fixture(autouse=True)
def english_messages():
    """All assertions on user-facing text expect the English catalogue."""
    set_lang("en")
    yield
    set_lang("en")


@pytest.fixture
def settings(tmp_path):
    """Settings rooted in a temporary folder with a plain downloader command."""
    home = tmp_path / "home"
    return Settings(
        home=home,
        video_path=home / "Video",
        audio_path=home / "Audio",
        archive_path=home / "Archive",
        bin_path=home / "bin",
        playlist_file=home / "playlists.txt",
        downloader=("yt-dlp",),
        version_url="https://example.test/VERSION",
    )

import logging
from dataclasses import asdict
from typing import Optional

from pymonad.either import Either, Left, Right
from rich.console import Console
from rich.table import Table

from .adapters.release_adapter import ReleaseInstaller
from .domain.commands import build_command
from .domain.errors import AppError, DownloaderError
from .domain.models import Mode, PlaylistBatch, Settings, UpdateStatus
from .domain.ports import CommandRunner
from .i18n import get_message
from .playlist_file import read_playlist_file

logger = logging.getLogger(__name__)


def report(console: Console, result: Either[AppError, Optional[str]]) -> None:
    """Prints a result: green for success messages, red for errors."""
    def on_error(error: AppError) -> None:
        console.print(f"[bold red]✗[/bold red] {error.message}")

    def on_success(message: Optional[str]) -> None:
        if message:
            console.print(f"[bold green]✓ {message}[/bold green]")

    result.either(on_error, on_success)


def download_url(
    url: str, mode: Mode, settings: Settings, runner: CommandRunner, console: Console
) -> Either[DownloaderError, str]:
    console.print(f"📥 {get_message('downloading', mode=mode.value, url=url)}")
    return runner.run(build_command(url, mode, settings))


def download_batch(
    batch: PlaylistBatch, settings: Settings, runner: CommandRunner, console: Console
) -> Either[AppError, str]:
    """
    Downloads every URL of the batch, video section first, one at a time.
    A failing URL does not stop the batch.
    """
    if not batch.video and not batch.audio:
        return Right(get_message("playlist_empty", path=settings.playlist_file))

    outcomes = []
    for mode, urls in ((Mode.VIDEO, batch.video), (Mode.AUDIO, batch.audio)):
        if not urls:
            continue
        console.print(f"\n[bold]{get_message('playlist_section', count=len(urls), mode=mode.value)}[/bold]")
        for url in urls:
            result = download_url(url, mode, settings, runner, console)
            report(console, result)
            outcomes.append(result.is_right())

    ok = sum(outcomes)
    failed = len(outcomes) - ok
    summary = get_message("batch_summary", ok=ok, failed=failed)
    logger.info(f"Playlist file batch done: {ok} ok, {failed} failed")
    if failed:
        return Left(DownloaderError(summary))
    return Right(summary)


def download_playlists(
    settings: Settings, runner: CommandRunner, console: Console
) -> Either[AppError, str]:
    return read_playlist_file(settings.playlist_file).bind(
        lambda batch: download_batch(batch, settings, runner, console)
    )


def install(installer: ReleaseInstaller, settings: Settings, console: Console) -> Either[AppError, str]:
    console.print(f"🔧 {get_message('installing', path=settings.bin_path)}")
    return installer.install()


def run_update(
    installer: ReleaseInstaller, current_version: str, console: Console
) -> Either[AppError, Optional[str]]:
    """
    Runs the updater. A published version older than the local one is shown
    as a warning and counts as success.
    """
    console.print(f"🔄 {get_message('checking_updates')}")

    def describe(status: UpdateStatus) -> Optional[str]:
        if status is UpdateStatus.AVAILABLE:
            return get_message("update_installed")
        if status is UpdateStatus.LOCAL_NEWER:
            console.print(
                f"[bold yellow]⚠ {get_message('update_local_newer', version=current_version)}[/bold yellow]"
            )
            return None
        return get_message("update_up_to_date", version=current_version)

    return installer.update(current_version).map(describe)


def show_settings(settings: Settings, console: Console) -> None:
    table = Table(title=get_message("settings_title"))
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    rows = [
        ("home", settings.home),
        ("video_path", settings.video_path),
        ("audio_path", settings.audio_path),
        ("archive_path", settings.archive_path),
        ("playlist_file", settings.playlist_file),
        ("bin_path", settings.bin_path),
        ("downloader", " ".join(settings.downloader)),
        ("transcoder_dir", settings.transcoder_dir or "-"),
        ("use_archive", settings.use_archive),
        ("whole_playlist", settings.whole_playlist),
        ("verbose", settings.verbose),
        ("convert", settings.convert),
        ("extra_options", " ".join(settings.extra_options) or "-"),
    ]
    for name, value in rows:
        table.add_row(name, str(value))
    for name, value in asdict(settings.conversion).items():
        table.add_row(f"conversion.{name}", "-" if value is None else str(value))

    console.print(table)

import typer
import logging
from pathlib import Path
from typing import Optional, Any
from rich.console import Console
from toolz import pipe
from pymonad.either import Either, Right

from . import __version__
from .adapters.process_adapter import ProcessRunner
from .adapters.release_adapter import ReleaseInstaller
from .bootstrap import ensure_layout
from .dispatch import download_playlists, download_url, install, report, run_update
from .domain.errors import AppError
from .domain.models import Settings
from .flags import CliFlags, settings_overrides, validate_flags
from .i18n import get_message, set_lang
from .logger_config import setup_logger
from .menu import Menu
from .settings import resolve_settings

# Initialization
console = Console()
logger = logging.getLogger(__name__)
runner = ProcessRunner()

app = typer.Typer(
    name="tubegrab",
    help="Download video and audio with yt-dlp, from the command line or a menu.",
    add_completion=False,
)


# --- Helper Functions ---


def _handle_error(error: AppError) -> None:
    """Displays a formatted error message and exits the application."""
    console.print(f"[bold red]Error:[/bold red] {error.message}")
    raise typer.Exit(code=1)


def _prepare(settings: Settings) -> Either[AppError, Settings]:
    """Creates missing folders and files before anything runs."""

    def announce(created) -> Settings:
        if created:
            console.print(
                f"📁 {get_message('created_paths', count=len(created), home=settings.home)}"
            )
        return settings

    return ensure_layout(settings).map(announce)


def _dispatch(flags: CliFlags, settings: Settings) -> Either[AppError, Any]:
    if flags.install:
        return install(ReleaseInstaller(settings), settings, console)
    if flags.update:
        return run_update(ReleaseInstaller(settings), __version__, console)
    if flags.playlists:
        return download_playlists(settings, runner, console)
    return download_url(flags.url, flags.mode, settings, runner, console)


def _run_once(flags: CliFlags, config: Optional[Path]) -> None:
    logger.info("Non-interactive run initiated.")

    def on_success(message: Optional[str]) -> None:
        report(console, Right(message))

    pipe(
        validate_flags(flags),
        lambda e: e.bind(lambda f: resolve_settings(settings_overrides(f), config)),
        lambda e: e.bind(_prepare),
        lambda e: e.bind(lambda settings: _dispatch(flags, settings)),
        lambda e: e.either(_handle_error, on_success),
    )


def _run_menu(flags: CliFlags, config: Optional[Path]) -> None:
    logger.info("Interactive menu initiated.")

    def start(settings: Settings) -> None:
        Menu(settings, runner, ReleaseInstaller(settings), console).run()

    pipe(
        resolve_settings(settings_overrides(flags), config),
        lambda e: e.bind(_prepare),
        lambda e: e.either(_handle_error, start),
    )


# --- CLI Command ---


@app.command()
def main(
    video: bool = typer.Option(False, "--video", help=get_message("help_video")),
    audio: bool = typer.Option(False, "--audio", help=get_message("help_audio")),
    playlists: bool = typer.Option(False, "--playlists", help=get_message("help_playlists")),
    convert: bool = typer.Option(False, "--convert", help=get_message("help_convert")),
    url: Optional[str] = typer.Option(None, "--url", "-u", help=get_message("help_url")),
    output_path: Optional[Path] = typer.Option(
        None,
        "--output-path",
        "-o",
        help=get_message("help_output_path"),
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
    ),
    options: Optional[str] = typer.Option(None, "--options", help=get_message("help_options")),
    install_tools: bool = typer.Option(False, "--install", help=get_message("help_install")),
    update: bool = typer.Option(False, "--update", help=get_message("help_update")),
    verbose: bool = typer.Option(False, "--verbose", help=get_message("help_verbose")),
    no_archive: bool = typer.Option(False, "--no-archive", help=get_message("help_no_archive")),
    whole_playlist: bool = typer.Option(
        False, "--whole-playlist", help=get_message("help_whole_playlist")
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        help=get_message("help_config"),
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
    ),
    lang: Optional[str] = typer.Option(
        None, "--lang", help=get_message("help_lang"), show_default=False
    ),
):
    """Downloads video or audio, or opens the menu when no action flag is given."""
    if lang:
        set_lang(lang)
    setup_logger(verbose)

    flags = CliFlags(
        video=video,
        audio=audio,
        playlists=playlists,
        convert=convert,
        url=url,
        output_path=output_path,
        options=options,
        install=install_tools,
        update=update,
        verbose=verbose,
        no_archive=no_archive,
        whole_playlist=whole_playlist,
    )

    if flags.has_action():
        _run_once(flags, config)
    else:
        _run_menu(flags, config)


if __name__ == "__main__":
    app()

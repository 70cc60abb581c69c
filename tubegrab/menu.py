import dataclasses
import logging
from enum import Enum
from typing import Callable, Dict, Optional

from rich.console import Console

from . import __version__
from .adapters.release_adapter import ReleaseInstaller
from .dispatch import download_playlists, download_url, install, report, run_update, show_settings
from .domain.models import Mode, Settings
from .domain.ports import CommandRunner
from .i18n import get_message

logger = logging.getLogger(__name__)


class MenuState(Enum):
    PROMPTING = "prompting"
    DISPATCHING = "dispatching"
    EXITING = "exiting"


MENU_ENTRIES = (
    ("1", "menu_video"),
    ("2", "menu_audio"),
    ("3", "menu_convert"),
    ("4", "menu_playlists"),
    ("5", "menu_install"),
    ("6", "menu_update"),
    ("7", "menu_settings"),
    ("0", "menu_exit"),
)


class Menu:
    """
    Interactive numbered menu. Loops until the exit entry is chosen or input
    ends; invalid selections re-prompt.
    """

    def __init__(
        self,
        settings: Settings,
        runner: CommandRunner,
        installer: ReleaseInstaller,
        console: Console,
        read_input: Optional[Callable[[str], str]] = None,
    ):
        self._settings = settings
        self._runner = runner
        self._installer = installer
        self._console = console
        self._read_input = read_input or console.input
        self._actions: Dict[str, Callable[[], MenuState]] = {
            "1": lambda: self._download(Mode.VIDEO),
            "2": lambda: self._download(Mode.AUDIO),
            "3": lambda: self._download(Mode.VIDEO, convert=True),
            "4": self._playlists,
            "5": self._install,
            "6": self._update,
            "7": self._show_settings,
            "0": lambda: MenuState.EXITING,
        }

    def render(self) -> None:
        self._console.print(f"\n[bold cyan]{get_message('menu_title', version=__version__)}[/bold cyan]")
        for key, message_key in MENU_ENTRIES:
            self._console.print(f"  {key}) {get_message(message_key)}")

    def _ask(self, prompt: str) -> str:
        return self._read_input(f"{prompt}: ").strip()

    def run(self) -> None:
        state = MenuState.PROMPTING
        choice = ""

        while state is not MenuState.EXITING:
            if state is MenuState.PROMPTING:
                self.render()
                try:
                    choice = self._ask(get_message("menu_prompt"))
                except (EOFError, KeyboardInterrupt):
                    state = MenuState.EXITING
                    continue
                if choice in self._actions:
                    state = MenuState.DISPATCHING
                else:
                    self._console.print(f"[yellow]{get_message('menu_invalid', choice=choice)}[/yellow]")
            elif state is MenuState.DISPATCHING:
                logger.info(f"Menu selection {choice}")
                state = self._actions[choice]()

        self._console.print(get_message("goodbye"))

    def _download(self, mode: Mode, convert: bool = False) -> MenuState:
        try:
            url = self._ask(get_message("url_prompt"))
        except (EOFError, KeyboardInterrupt):
            return MenuState.EXITING
        if not url:
            return MenuState.PROMPTING

        settings = self._settings
        if convert:
            settings = dataclasses.replace(settings, convert=True)
        report(self._console, download_url(url, mode, settings, self._runner, self._console))
        return MenuState.PROMPTING

    def _playlists(self) -> MenuState:
        report(self._console, download_playlists(self._settings, self._runner, self._console))
        return MenuState.PROMPTING

    def _install(self) -> MenuState:
        report(self._console, install(self._installer, self._settings, self._console))
        return MenuState.PROMPTING

    def _update(self) -> MenuState:
        report(self._console, run_update(self._installer, __version__, self._console))
        return MenuState.PROMPTING

    def _show_settings(self) -> MenuState:
        show_settings(self._settings, self._console)
        return MenuState.PROMPTING

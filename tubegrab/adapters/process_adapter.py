import logging
import subprocess
from typing import Sequence

from pymonad.either import Either, Left, Right
from yt_dlp.utils import shell_quote

from tubegrab.domain.errors import DownloaderError
from tubegrab.domain.ports import CommandRunner

logger = logging.getLogger(__name__)


class ProcessRunner(CommandRunner):
    """
    Runs downloader command lines as child processes. Output is inherited so
    whatever the downloader prints reaches the terminal unchanged.
    """

    def run(self, command: Sequence[str]) -> Either[DownloaderError, str]:
        url = command[-1]
        logger.info(f"Running: {shell_quote(list(command))}")

        try:
            completed = subprocess.run(list(command), check=False)
        except FileNotFoundError:
            error_message = f"Downloader executable '{command[0]}' was not found."
            logger.error(error_message)
            return Left(DownloaderError(error_message))
        except OSError as e:
            error_message = f"Could not start the downloader: {e}"
            logger.critical(f"Critical error starting downloader: {e}", exc_info=True)
            return Left(DownloaderError(error_message))

        if completed.returncode == 0:
            success_message = f"Finished '{url}'."
            logger.info(success_message)
            return Right(success_message)

        error_message = f"Downloader failed for '{url}' (exit code {completed.returncode})."
        logger.error(f"Download of '{url}' failed with exit code {completed.returncode}")
        return Left(DownloaderError(error_message))

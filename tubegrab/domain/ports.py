from abc import ABC, abstractmethod
from typing import Sequence

from pymonad.either import Either

from .errors import DownloaderError


class CommandRunner(ABC):
    """
    Port defining the contract for running the external downloader.
    """

    @abstractmethod
    def run(self, command: Sequence[str]) -> Either[DownloaderError, str]:
        """
        Runs a fully built downloader command line.

        Returns:
            Either: A Right(success_message) or a Left(DownloaderError).
        """
        pass

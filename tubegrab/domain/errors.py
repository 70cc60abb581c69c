from dataclasses import dataclass


@dataclass(frozen=True)
class AppError:
    """Base class for application errors."""
    message: str


@dataclass(frozen=True)
class ConfigError(AppError):
    """The settings file could not be read or is malformed."""
    pass


@dataclass(frozen=True)
class FlagConflictError(AppError):
    """Mutually exclusive command-line flags were combined."""
    pass


@dataclass(frozen=True)
class PlaylistFileError(AppError):
    """The playlist file is missing a section header or is out of order."""
    pass


@dataclass(frozen=True)
class DownloaderError(AppError):
    """The downloader process could not be run or exited with an error."""
    pass


@dataclass(frozen=True)
class InstallerError(AppError):
    """A release asset could not be fetched, extracted or installed."""
    pass

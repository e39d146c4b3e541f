from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Proj2TreeError(Exception):
    """Base exception for errors in the proj2tree module."""


@dataclass(frozen=True)
class TargetDirectoryError(Proj2TreeError):
    """Raised when the scan target does not exist or is not a directory."""

    directory: Path
    message: str = "The specified path is not an existing directory."


@dataclass(frozen=True)
class IgnoreFileNotFoundError(Proj2TreeError):
    """Raised when no `.gitignore` exists at the scan root."""

    folder: Path
    message: str = "No .gitignore file found at the scan root."


@dataclass(frozen=True)
class ConfigParseError(Proj2TreeError):
    """Raised when an exclusion configuration payload cannot be parsed."""

    source: str
    reason: str

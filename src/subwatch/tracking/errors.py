"""Error taxonomy for the tracking engine.

Storage failures abort one poll; decode, presentation and transport failures
are isolated to the file, notification or bridge call that raised them.
"""

from pathlib import Path


class SubwatchError(Exception):
    """Base class for tracking errors."""


class StorageError(SubwatchError):
    """The backing store is unreachable or could not be queried."""


class DecodeError(SubwatchError):
    """A snapshot file could not be decoded."""

    def __init__(self, message: str, path: Path | None = None):
        super().__init__(message)
        self.path = path


class PresentationError(SubwatchError):
    """A desktop notification could not be shown."""


class TransportError(SubwatchError):
    """The outbound bridge call failed."""


class InputFormatError(SubwatchError):
    """Operator input could not be parsed."""

    def __init__(self, message: str, example: str | None = None):
        if example:
            message = f"{message}\n\nExample: {example}"
        super().__init__(message)
        self.example = example

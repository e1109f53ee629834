"""mizreader exceptions."""


class MizReaderError(Exception):
    """Base exception for all mizreader errors."""


class ArchiveError(MizReaderError):
    """Raised when a mission archive cannot be opened or read."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class MissionEntryNotFoundError(ArchiveError):
    """Raised when an archive has no ``mission`` entry."""

    def __init__(self, path: str):
        super().__init__(path, "'mission' file not found in archive")


class TableSyntaxError(MizReaderError):
    """Raised when serialized-table text cannot be tokenized or read."""

    def __init__(self, message: str, offset: int):
        self.offset = offset
        super().__init__(f"{message} at offset {offset}")


class ParseCancelledError(MizReaderError):
    """Raised when a caller-supplied cancellation signal is set mid-parse."""


class BriefingUpdateError(MizReaderError):
    """Raised when a briefing field cannot be rewritten."""

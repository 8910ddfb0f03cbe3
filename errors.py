from typing import Optional


class ReplayError(Exception):
    """Base class for errors that abort a replay run."""


class SourceUnavailableError(ReplayError):
    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Couldn't open transaction source {path}: {reason}")


class RecordParseError(ReplayError):
    def __init__(self, path: str, line_number: int, detail: str, row: Optional[dict] = None):
        self.path = path
        self.line_number = line_number
        self.detail = detail
        self.row = row
        super().__init__(f"Couldn't parse transaction at {path}:{line_number}: {detail}")

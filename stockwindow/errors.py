# stockwindow/errors.py


class DegenerateRangeError(ValueError):
    """Raised when a scaler is fitted on a sequence whose min equals its max."""


class DataParseError(ValueError):
    """Raised when a price file contains a line that is not a finite number."""

    def __init__(self, line_no: int, raw: str, reason: str = "cannot parse"):
        self.line_no = line_no
        self.raw = raw
        super().__init__(f"line {line_no}: {reason} {raw!r} as a price")

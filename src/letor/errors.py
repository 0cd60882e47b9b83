from __future__ import annotations

from typing import Optional


class LetorError(Exception):
    """Base class for every error raised by the toolkit."""


class FormatError(LetorError, ValueError):
    """
    A record line (or a CSV row) could not be parsed.

    `line`, `line_number` and `source` are filled in when known so the message
    points straight at the offending input.
    """

    def __init__(
        self,
        reason: str,
        *,
        line: Optional[str] = None,
        line_number: Optional[int] = None,
        source: Optional[str] = None,
    ):
        self.reason = reason
        self.line = line
        self.line_number = line_number
        self.source = source
        super().__init__(self._render())

    def _render(self) -> str:
        where = ""
        if self.source is not None and self.line_number is not None:
            where = f"{self.source}:{self.line_number}: "
        elif self.line_number is not None:
            where = f"line {self.line_number}: "
        elif self.source is not None:
            where = f"{self.source}: "
        msg = f"{where}{self.reason}"
        if self.line is not None:
            msg += f": '{self.line.rstrip()}'"
        return msg

    def with_location(self, *, line_number: int, source: Optional[str]) -> "FormatError":
        return FormatError(self.reason, line=self.line, line_number=line_number, source=source)


class EmptyInputError(LetorError, ValueError):
    """The source yielded no usable records."""


class ConfigurationError(LetorError, ValueError):
    """Out-of-range or contradictory options. Raised before any data is read."""


class OperationCancelled(LetorError):
    pass

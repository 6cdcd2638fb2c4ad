"""Error types and error payload helpers."""

from __future__ import annotations

from typing import Dict, Optional


class GroconfError(Exception):
    """Base exception type for groconf.

    Attributes
    ----------
    code
        Stable error identifier.
    message
        Human-readable error message.
    details
        Optional detail payload for debugging.
    """

    def __init__(self, code: str, message: str, details: Optional[object] = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details

    def to_result(self) -> Dict[str, object]:
        """Return a JSON-ready error payload.

        Returns
        -------
        dict
            JSON-ready error payload.
        """
        return error_result(self.code, self.message, self.details)


class StreamError(GroconfError):
    """An underlying read or write failed.

    Attributes
    ----------
    line
        1-based line number being read when the failure happened, if known.
    """

    def __init__(
        self, message: str, line: Optional[int] = None, details: Optional[object] = None
    ) -> None:
        super().__init__("stream_error", message, details)
        self.line = line


class FormatError(GroconfError):
    """A line of a GROMOS87 file is missing, could not be parsed or could not
    be written in the fixed layout.

    Attributes
    ----------
    line
        1-based number of the offending line.
    """

    def __init__(self, message: str, line: int, details: Optional[object] = None) -> None:
        super().__init__("format_error", f"{message} at line {line}", details)
        self.line = line


class GroupingError(GroconfError):
    """Atoms do not form a complete residue matching its declared template.

    Attributes
    ----------
    index
        Atom index where the failed residue attempt started, or the 1-based
        residue ordinal when raised while writing a configuration.
    """

    def __init__(self, message: str, index: int, details: Optional[object] = None) -> None:
        super().__init__("grouping_error", message, details)
        self.index = index

    def __repr__(self) -> str:
        return f"GroupingError(index={self.index})"


class VectorParseError(ValueError):
    """Text could not be parsed into a vector.

    Attributes
    ----------
    missing
        True if the text ran out of values, False if a value was not a number.
    """

    def __init__(self, message: str, missing: bool) -> None:
        super().__init__(message)
        self.missing = missing


def error_result(code: str, message: str, details: Optional[object] = None) -> Dict[str, object]:
    """Build an error payload.

    Parameters
    ----------
    code
        Stable error identifier.
    message
        Human-readable summary.
    details
        Optional detail payload for logging or debugging.

    Returns
    -------
    dict
        JSON-ready error payload.
    """

    return {"ok": False, "error": {"code": code, "message": message, "details": details}}

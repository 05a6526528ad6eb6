"""
AdScope Exceptions
===================

The decode core has no error class of its own: malformed advertisement
data always produces a best-effort record. Exceptions here belong to
the collectors that feed it.
"""

from __future__ import annotations

from typing import Optional


class AdScopeError(Exception):
    """Base class for AdScope errors."""


class CollectorError(AdScopeError):
    """The radio backend is unavailable or failed during a scan."""


class ReplayError(AdScopeError):
    """A recorded discovery-event file could not be read.

    Attributes:
        line_number: 1-based line of the offending record, if known.
    """

    def __init__(self, message: str, line_number: Optional[int] = None) -> None:
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)

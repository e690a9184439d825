"""Error taxonomy for ``statement_scanner``.

Every error carries a human-readable ``message`` suitable for display. The
scan session converts :class:`ReadError` and :class:`ExtractionError` into the
store's error state; edit errors are raised to the caller that drove the edit.
"""

from __future__ import annotations

DEFAULT_EXTRACTION_HINT = "Please check your image clarity and try again."


class ScannerError(Exception):
    """Base class for all package errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ReadError(ScannerError):
    """The statement file could not be read into bytes."""


class ExtractionError(ScannerError):
    """The inference call failed, returned nothing, or returned an invalid document.

    ``hint`` is a corrective suggestion appended to :attr:`display_message`.
    """

    def __init__(self, message: str, *, hint: str | None = DEFAULT_EXTRACTION_HINT) -> None:
        super().__init__(message)
        self.hint = hint

    @property
    def display_message(self) -> str:
        if not self.hint:
            return self.message
        return f"{self.message} {self.hint}"


class InvalidEditError(ScannerError):
    """An edit was attempted without a session, on a missing result, or out of range."""


class StoreBusyError(ScannerError):
    """A mutation was attempted while an extraction is in flight."""


__all__ = [
    "DEFAULT_EXTRACTION_HINT",
    "ExtractionError",
    "InvalidEditError",
    "ReadError",
    "ScannerError",
    "StoreBusyError",
]

"""Read a statement file from disk into bytes plus a MIME type.

The MIME type is guessed from the file extension. Only images and PDFs are
accepted; anything else, a missing file, or an empty file raises
:class:`~statement_scanner.errors.ReadError`.
"""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass
from os import PathLike
from pathlib import Path

from .errors import ReadError
from .prompting import is_supported_mime_type


@dataclass(frozen=True, slots=True)
class StatementFile:
    data: bytes
    mime_type: str
    name: str


def guess_mime_type(path: str | PathLike[str]) -> str | None:
    mime_type, _ = mimetypes.guess_type(Path(path).name)
    return mime_type


def read_statement_file(path: str | PathLike[str]) -> StatementFile:
    """Load ``path`` for extraction."""

    p = Path(path)
    mime_type = guess_mime_type(p)
    if mime_type is None or not is_supported_mime_type(mime_type):
        raise ReadError(
            f"Unsupported file type for '{p.name}'. Upload an image (PNG, JPEG, ...) or a PDF."
        )
    try:
        data = p.read_bytes()
    except FileNotFoundError as e:
        raise ReadError(f"File not found: {p}") from e
    except PermissionError as e:
        raise ReadError(f"Permission denied: {p}") from e
    except OSError as e:
        raise ReadError(f"File reading failed: {p} ({e.strerror or e})") from e
    if not data:
        raise ReadError(f"File is empty: {p}")
    return StatementFile(data=data, mime_type=mime_type, name=p.name)


__all__ = ["StatementFile", "guess_mime_type", "read_statement_file"]

'''CSV export for extracted transactions.

Output layout:

    Date,Description,Amount,Notes
    "01/02/24","Coffee ""Shop""",-4.5,""

Text columns are always double-quoted with internal quotes doubled; the amount
column is written unquoted (numbers in their shortest form, unparsed strings
as stored). Rows are joined with ``\\n`` and keep transaction order.
'''

from __future__ import annotations

import math
import re
from collections.abc import Iterable
from datetime import UTC, date, datetime
from os import PathLike
from pathlib import Path

from .models import Amount, ExtractionResult, Transaction

CSV_HEADER: tuple[str, ...] = ("Date", "Description", "Amount", "Notes")
CSV_MIME_TYPE = "text/csv;charset=utf-8"

_WHITESPACE_RE = re.compile(r"\s+")


def _quote(value: str | None) -> str:
    return '"' + (value or "").replace('"', '""') + '"'


def format_amount(amount: Amount) -> str:
    """Render an amount for the unquoted CSV column.

    Integral floats drop the trailing ``.0`` (``12.0`` -> ``12``).
    """

    if isinstance(amount, float):
        if math.isfinite(amount) and amount.is_integer() and abs(amount) < 1e16:
            return str(int(amount))
        return repr(amount)
    return str(amount)


def to_csv_text(transactions: Iterable[Transaction]) -> str:
    lines = [",".join(CSV_HEADER)]
    for t in transactions:
        lines.append(
            ",".join(
                (
                    _quote(t.date),
                    _quote(t.description),
                    format_amount(t.amount),
                    _quote(t.notes),
                )
            )
        )
    return "\n".join(lines)


def to_csv(transactions: Iterable[Transaction]) -> bytes:
    """Serialize ``transactions`` to UTF-8 CSV bytes. Pure function of its input."""

    return to_csv_text(transactions).encode("utf-8")


def suggest_filename(result: ExtractionResult | None, *, today: date | None = None) -> str:
    """Return ``statement_<bank>_<YYYY-MM-DD>.csv``.

    Whitespace runs in the bank name become ``_``; an unknown bank is
    ``export``. ``today`` defaults to the current UTC date.
    """

    bank = result.bank_name if result is not None else None
    slug = _WHITESPACE_RE.sub("_", bank) if bank else "export"
    day = today or datetime.now(UTC).date()
    return f"statement_{slug}_{day.isoformat()}.csv"


def write_csv(path: str | PathLike[str], transactions: Iterable[Transaction]) -> Path:
    """Write the CSV bytes to ``path`` and return the resolved path."""

    p = Path(path)
    p.write_bytes(to_csv(transactions))
    return p


__all__ = [
    "CSV_HEADER",
    "CSV_MIME_TYPE",
    "format_amount",
    "suggest_filename",
    "to_csv",
    "to_csv_text",
    "write_csv",
]

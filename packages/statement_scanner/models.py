"""Data models for ``statement_scanner``.

The model output is noisy OCR, so free-form text fields are accepted as-is.
The only normalizations applied are:

- ``amount`` is numeric when the value parses as a decimal number, otherwise
  the original string is kept (never dropped, never defaulted to zero).
- ``notes`` missing or ``null`` becomes the empty string.
- Optional statement metadata (``bank_name``, ``period``, ``currency``) is
  ``None`` when unknown, never the empty string.

Wire names follow the service schema (``bankName``); Python attributes are
snake_case.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ---------------------------------------------------------------------------
# Amount coercion
# ---------------------------------------------------------------------------

_DECIMAL_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")

type Amount = float | str
"""A parsed numeric amount, or the raw text when it could not be parsed."""

EDITABLE_FIELDS: tuple[str, ...] = ("date", "description", "amount", "notes")


def coerce_amount(raw: Any) -> Amount:
    """Return ``raw`` as a float when it is numeric, else the raw string unchanged.

    Text must be a plain decimal literal after trimming (``"-4.5"``, ``"12"``,
    ``"1e3"``). Anything else, including ``"1,234.00"`` or ``"nan"``, is kept
    verbatim so the user can see and fix it. Never raises.
    """

    if isinstance(raw, bool):
        return str(raw)
    if isinstance(raw, int | float):
        try:
            value = float(raw)
        except (OverflowError, ValueError):
            return str(raw)
        return value if math.isfinite(value) else str(raw)
    text = raw if isinstance(raw, str) else str(raw)
    candidate = text.strip()
    if _DECIMAL_RE.fullmatch(candidate):
        value = float(candidate)
        if math.isfinite(value):
            return value
    return text


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


class Transaction(BaseModel):
    """One statement line. Immutable: edits produce a new instance."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    date: str
    description: str
    amount: Amount
    notes: str = ""

    @field_validator("amount", mode="before")
    @classmethod
    def _coerce_amount(cls, v: Any) -> Any:
        # ``None`` is left for pydantic to reject: a row without an amount is
        # structurally wrong, not an unparseable value.
        if v is None:
            return v
        return coerce_amount(v)

    @field_validator("notes", mode="before")
    @classmethod
    def _notes_default(cls, v: Any) -> Any:
        return "" if v is None else v

    def with_field(self, field: str, raw_value: Any) -> Transaction:
        """Return a copy with ``field`` replaced, applying amount coercion."""

        if field not in EDITABLE_FIELDS:
            raise ValueError(f"unknown transaction field: {field!r}")
        if field == "amount":
            value: Any = coerce_amount(raw_value)
        elif raw_value is None:
            value = ""
        else:
            value = str(raw_value)
        return self.model_copy(update={field: value})


class ExtractionResult(BaseModel):
    """The statement-level extraction output.

    ``transactions`` is required (possibly empty) and keeps the order returned
    by the model.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    bank_name: str | None = Field(default=None, alias="bankName")
    period: str | None = None
    currency: str | None = None
    transactions: tuple[Transaction, ...]

    @field_validator("bank_name", "period", "currency", mode="before")
    @classmethod
    def _blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def replace_transaction(self, index: int, transaction: Transaction) -> ExtractionResult:
        """Return a copy with the row at ``index`` replaced; length is unchanged."""

        if not 0 <= index < len(self.transactions):
            raise IndexError(f"transaction index out of range: {index}")
        rows = list(self.transactions)
        rows[index] = transaction
        return self.model_copy(update={"transactions": tuple(rows)})

    def to_wire(self) -> dict[str, Any]:
        """Dump using service field names, omitting unknown metadata."""

        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


# ---------------------------------------------------------------------------
# Session state
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class EditSession:
    """The single row currently being edited and its uncommitted working copy."""

    index: int
    working_copy: Transaction


class AppStatus(StrEnum):
    IDLE = "IDLE"
    PROCESSING = "PROCESSING"
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"


__all__ = [
    "EDITABLE_FIELDS",
    "Amount",
    "AppStatus",
    "EditSession",
    "ExtractionResult",
    "Transaction",
    "coerce_amount",
]

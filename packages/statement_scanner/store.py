"""Edit/reconciliation store for one scanning session.

The store owns the current :class:`~statement_scanner.models.ExtractionResult`
and the single active edit session. All mutation goes through the methods
below; rows are only ever replaced in place, never inserted or removed.

Extraction outcomes arrive through tickets. :meth:`StatementStore.begin_extraction`
issues a new ticket and supersedes any earlier one; an outcome delivered for a
superseded ticket is dropped, so a slow response for an older file can never
overwrite the state produced for a newer one.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any

from .errors import InvalidEditError, StoreBusyError
from .logging_setup import get_logger
from .models import EDITABLE_FIELDS, AppStatus, EditSession, ExtractionResult, Transaction

_logger = get_logger("statement_scanner.store")


@dataclass(frozen=True, slots=True)
class ExtractionTicket:
    """Identifies one in-flight extraction; ``seq`` increases per submission."""

    seq: int
    source: str


class StatementStore:
    """Holds the extraction result, the edit session, and the app status."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._result: ExtractionResult | None = None
        self._edit: EditSession | None = None
        self._status = AppStatus.IDLE
        self._error: str | None = None
        self._seq = 0
        self._pending: ExtractionTicket | None = None

    # ---- Read-only views -------------------------------------------------

    @property
    def current_result(self) -> ExtractionResult | None:
        return self._result

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        result = self._result
        return result.transactions if result is not None else ()

    @property
    def status(self) -> AppStatus:
        return self._status

    @property
    def error_message(self) -> str | None:
        return self._error

    @property
    def is_processing(self) -> bool:
        return self._pending is not None

    @property
    def active_edit_index(self) -> int | None:
        edit = self._edit
        return edit.index if edit is not None else None

    @property
    def working_copy(self) -> Transaction | None:
        edit = self._edit
        return edit.working_copy if edit is not None else None

    # ---- Result lifecycle ------------------------------------------------

    def load(self, result: ExtractionResult) -> None:
        """Replace the current result wholesale and clear any edit session."""

        with self._lock:
            self._ensure_idle("load a result")
            self._apply_result(result)

    def begin_extraction(self, source: str) -> ExtractionTicket:
        """Start a new extraction for ``source``, superseding any pending one.

        The previous result and any edit session are discarded.
        """

        with self._lock:
            self._seq += 1
            ticket = ExtractionTicket(seq=self._seq, source=source)
            if self._pending is not None:
                _logger.info(
                    "store:extraction_superseded ticket=%d by=%d",
                    self._pending.seq,
                    ticket.seq,
                )
            self._pending = ticket
            self._result = None
            self._edit = None
            self._error = None
            self._status = AppStatus.PROCESSING
            return ticket

    def complete_extraction(self, ticket: ExtractionTicket, result: ExtractionResult) -> bool:
        """Apply ``result`` if ``ticket`` is still the latest; return whether it was applied."""

        with self._lock:
            if not self._is_latest(ticket, outcome="result"):
                return False
            self._pending = None
            self._apply_result(result)
            return True

    def fail_extraction(self, ticket: ExtractionTicket, message: str) -> bool:
        """Record a failure if ``ticket`` is still the latest; return whether it was applied."""

        with self._lock:
            if not self._is_latest(ticket, outcome="failure"):
                return False
            self._pending = None
            self._result = None
            self._edit = None
            self._error = message
            self._status = AppStatus.ERROR
            return True

    # ---- Edit session ----------------------------------------------------

    def begin_edit(self, index: int) -> Transaction:
        """Open an edit session on row ``index`` and return its working copy.

        Any previous working copy is discarded.
        """

        with self._lock:
            self._ensure_idle("edit a transaction")
            if self._result is None:
                raise InvalidEditError("There is no extraction result to edit.")
            count = len(self._result.transactions)
            if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < count:
                raise InvalidEditError(f"Row index out of range: {index!r} (rows: {count}).")
            self._edit = EditSession(index=index, working_copy=self._result.transactions[index])
            return self._edit.working_copy

    def update_working_field(self, field: str, raw_value: Any) -> Transaction:
        """Set one field on the working copy; ``amount`` is coerced."""

        with self._lock:
            if self._edit is None:
                raise InvalidEditError("No transaction is being edited.")
            if field not in EDITABLE_FIELDS:
                raise InvalidEditError(f"Unknown transaction field: {field!r}.")
            updated = self._edit.working_copy.with_field(field, raw_value)
            self._edit = EditSession(index=self._edit.index, working_copy=updated)
            return updated

    def commit_edit(self) -> Transaction:
        """Replace the row at the active index with the working copy."""

        with self._lock:
            self._ensure_idle("save an edit")
            if self._edit is None or self._result is None:
                raise InvalidEditError("No transaction is being edited.")
            edit = self._edit
            self._result = self._result.replace_transaction(edit.index, edit.working_copy)
            self._edit = None
            _logger.debug("store:edit_committed index=%d", edit.index)
            return edit.working_copy

    def cancel_edit(self) -> bool:
        """Discard the working copy; return whether a session was active."""

        with self._lock:
            was_active = self._edit is not None
            self._edit = None
            return was_active

    # ---- Internal helpers ------------------------------------------------

    def _apply_result(self, result: ExtractionResult) -> None:
        self._result = result
        self._edit = None
        self._error = None
        self._status = AppStatus.SUCCESS

    def _ensure_idle(self, action: str) -> None:
        if self._pending is not None:
            raise StoreBusyError(f"Cannot {action} while an extraction is in progress.")

    def _is_latest(self, ticket: ExtractionTicket, *, outcome: str) -> bool:
        if ticket == self._pending:
            return True
        _logger.info(
            "store:stale_%s_dropped ticket=%d source=%s",
            outcome,
            ticket.seq,
            ticket.source,
        )
        return False


__all__ = ["ExtractionTicket", "StatementStore"]

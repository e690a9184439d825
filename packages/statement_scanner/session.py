"""Scan session: file -> extraction -> store.

:class:`ScanSession` is the boundary between the extraction adapter and the
store. Read and extraction failures are converted into the store's error
state here and never propagate to the caller.

Each submission takes a store ticket before any work starts, so overlapping
submissions resolve in submission order: only the latest one may change the
store.
"""

from __future__ import annotations

from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from os import PathLike
from pathlib import Path
from typing import Any

from .errors import DEFAULT_EXTRACTION_HINT, ExtractionError, ReadError
from .extraction import extract_statement
from .ingest import read_statement_file
from .logging_setup import get_logger
from .models import ExtractionResult
from .store import ExtractionTicket, StatementStore

type Extractor = Callable[..., ExtractionResult]
"""Callable compatible with :func:`~statement_scanner.extraction.extract_statement`."""

_logger = get_logger("statement_scanner.session")


class ScanSession:
    """Drives extractions into a :class:`StatementStore`.

    Parameters
    ----------
    store:
        The store to populate. A fresh one is created when omitted.
    extractor:
        Called as ``extractor(data, mime_type, model=..., filename=...)``.
    model:
        Model name forwarded to the extractor.
    max_workers:
        Worker threads for :meth:`submit_async`.
    """

    def __init__(
        self,
        store: StatementStore | None = None,
        *,
        extractor: Extractor = extract_statement,
        model: str | None = None,
        max_workers: int = 2,
    ) -> None:
        self.store = store if store is not None else StatementStore()
        self._extractor = extractor
        self._model = model
        self._max_workers = max_workers
        self._executor: ThreadPoolExecutor | None = None

    def submit(self, data: bytes, mime_type: str, source: str = "upload") -> bool:
        """Extract ``data`` and apply the outcome; return whether it was applied."""

        ticket = self.store.begin_extraction(source)
        return self._run(ticket, data, mime_type)

    def submit_file(self, path: str | PathLike[str]) -> bool:
        """Read ``path`` and extract it. A read failure is recorded like any other."""

        ticket = self.store.begin_extraction(Path(path).name)
        try:
            statement = read_statement_file(path)
        except ReadError as e:
            _logger.warning("session:read_failed ticket=%d error=%s", ticket.seq, e.message)
            return self.store.fail_extraction(ticket, e.message)
        return self._run(ticket, statement.data, statement.mime_type)

    def submit_async(self, data: bytes, mime_type: str, source: str = "upload") -> Future[bool]:
        """Like :meth:`submit` but runs the extraction on a worker thread.

        The ticket is taken before returning, so a later call always
        supersedes an earlier one regardless of completion order.
        """

        ticket = self.store.begin_extraction(source)
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self._max_workers, thread_name_prefix="statement-scan"
            )
        return self._executor.submit(self._run, ticket, data, mime_type)

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self) -> ScanSession:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def _run(self, ticket: ExtractionTicket, data: bytes, mime_type: str) -> bool:
        try:
            result = self._extractor(data, mime_type, model=self._model, filename=ticket.source)
        except ExtractionError as e:
            return self.store.fail_extraction(ticket, e.display_message)
        except Exception as e:  # noqa: BLE001 - nothing escapes the session boundary
            _logger.exception("session:extractor_crashed ticket=%d", ticket.seq)
            return self.store.fail_extraction(
                ticket, f"Failed to extract data ({e.__class__.__name__}). {DEFAULT_EXTRACTION_HINT}"
            )
        return self.store.complete_extraction(ticket, result)


__all__ = ["Extractor", "ScanSession"]

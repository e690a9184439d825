"""Public interface for the ``statement_scanner`` package.

This module re-exports the package's API functions and public models/types as
the stable import surface. There is no runtime logic here.
"""

from .csv_export import suggest_filename, to_csv, write_csv
from .errors import (
    ExtractionError,
    InvalidEditError,
    ReadError,
    ScannerError,
    StoreBusyError,
)
from .extraction import extract_statement
from .ingest import StatementFile, read_statement_file
from .models import (
    AppStatus,
    EditSession,
    ExtractionResult,
    Transaction,
    coerce_amount,
)
from .session import ScanSession
from .store import ExtractionTicket, StatementStore

__all__ = [
    # API
    "extract_statement",
    "read_statement_file",
    "suggest_filename",
    "to_csv",
    "write_csv",
    "ScanSession",
    "StatementStore",
    # Models / types
    "AppStatus",
    "EditSession",
    "ExtractionResult",
    "ExtractionTicket",
    "StatementFile",
    "Transaction",
    "coerce_amount",
    # Errors
    "ExtractionError",
    "InvalidEditError",
    "ReadError",
    "ScannerError",
    "StoreBusyError",
]

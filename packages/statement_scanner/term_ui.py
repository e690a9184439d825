"""Terminal UI helpers: rich tables for display, prompt_toolkit for edits.

Kept apart from the store and CLI so the prompts can be driven headlessly in
tests with a pipe input and ``DummyOutput``.
"""

from __future__ import annotations

from prompt_toolkit import PromptSession
from prompt_toolkit.validation import Validator
from rich.console import Console
from rich.table import Table
from rich.text import Text

from .csv_export import format_amount
from .models import EDITABLE_FIELDS, ExtractionResult, Transaction
from .store import StatementStore

_FIELD_LABELS: dict[str, str] = {
    "date": "Date",
    "description": "Description",
    "amount": "Amount",
    "notes": "Notes",
}


def _amount_text(amount: float | str) -> Text:
    if isinstance(amount, float):
        style = "red" if amount < 0 else "green"
        return Text(f"{amount:,.2f}", style=f"bold {style}")
    # Unparsed amounts are shown verbatim so the user can spot and fix them.
    return Text(amount, style="bold yellow")


def render_transactions(
    result: ExtractionResult, *, editing: tuple[int, Transaction] | None = None
) -> Table:
    """Build a table of ``result``'s rows; ``editing`` overlays a working copy."""

    title_bits = [b for b in (result.bank_name, result.period, result.currency) if b]
    table = Table(
        title=Text(" · ".join(title_bits) or "Extracted Transactions"),
        caption=f"{len(result.transactions)} items found",
        show_lines=False,
    )
    table.add_column("#", justify="right", style="dim")
    table.add_column("Date", no_wrap=True)
    table.add_column("Description")
    table.add_column("Amount", justify="right")
    table.add_column("Notes", style="italic")

    for i, t in enumerate(result.transactions):
        row_style = None
        if editing is not None and editing[0] == i:
            t = editing[1]
            row_style = "on grey23"
        table.add_row(
            str(i + 1),
            Text(t.date),
            Text(t.description),
            _amount_text(t.amount),
            Text(t.notes),
            style=row_style,
        )
    return table


def _session(session: PromptSession | None) -> PromptSession:
    return session if session is not None else PromptSession()


def field_display_value(transaction: Transaction, field: str) -> str:
    if field == "amount":
        return format_amount(transaction.amount)
    return str(getattr(transaction, field))


def prompt_field(label: str, default: str, *, session: PromptSession | None = None) -> str:
    """Prompt for one field, pre-filled with its current value."""

    return _session(session).prompt(f"{label}: ", default=default)


def choose_row(
    count: int,
    *,
    session: PromptSession | None = None,
    message: str = "Row to edit (Enter to finish): ",
) -> int | None:
    """Return the 0-based row the user picked (typed 1-based), or ``None`` on blank."""

    def _valid(text: str) -> bool:
        s = text.strip()
        return not s or (s.isdigit() and 1 <= int(s) <= count)

    validator = Validator.from_callable(
        _valid, error_message=f"Enter a row number between 1 and {count}, or nothing to finish."
    )
    text = _session(session).prompt(message, validator=validator, validate_while_typing=False)
    s = text.strip()
    return int(s) - 1 if s else None


def confirm(message: str, *, default: bool = True, session: PromptSession | None = None) -> bool:
    suffix = " [Y/n]: " if default else " [y/N]: "
    text = _session(session).prompt(message + suffix).strip().lower()
    if not text:
        return default
    return text in {"y", "yes"}


def edit_loop(
    store: StatementStore,
    *,
    session: PromptSession | None = None,
    console: Console | None = None,
) -> int:
    """Interactively edit rows until the user submits a blank row number.

    Each row edit walks every field with its current value pre-filled, then
    asks to save (commit) or discard (cancel). Returns the number of saved
    edits.
    """

    con = console if console is not None else Console()
    saved = 0
    while True:
        result = store.current_result
        if result is None or not result.transactions:
            return saved
        con.print(render_transactions(result))
        index = choose_row(len(result.transactions), session=session)
        if index is None:
            return saved

        working = store.begin_edit(index)
        for field in EDITABLE_FIELDS:
            raw = prompt_field(
                _FIELD_LABELS[field], field_display_value(working, field), session=session
            )
            working = store.update_working_field(field, raw)

        con.print(render_transactions(result, editing=(index, working)))
        if confirm("Save changes?", session=session):
            store.commit_edit()
            saved += 1
        else:
            store.cancel_edit()


__all__ = [
    "choose_row",
    "confirm",
    "edit_loop",
    "field_display_value",
    "prompt_field",
    "render_transactions",
]

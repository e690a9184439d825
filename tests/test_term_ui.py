import contextlib
import io

from rich.console import Console

from statement_scanner.models import ExtractionResult, Transaction
from statement_scanner.store import StatementStore
from statement_scanner.term_ui import (
    choose_row,
    confirm,
    edit_loop,
    prompt_field,
    render_transactions,
)

# Compatibility import across prompt_toolkit versions
try:  # pragma: no cover - fallback path depends on library version
    from prompt_toolkit.input import create_pipe_input
except Exception:  # pragma: no cover - defensive
    from prompt_toolkit.input.defaults import create_pipe_input

from prompt_toolkit import PromptSession
from prompt_toolkit.output import DummyOutput


@contextlib.contextmanager
def pipe_session():
    with create_pipe_input() as pipe:
        sess = PromptSession(input=pipe, output=DummyOutput())
        yield pipe, sess


def _result() -> ExtractionResult:
    return ExtractionResult(
        bankName="Demo Bank",
        period="Jan 2024",
        transactions=(
            Transaction(date="01/01/24", description="Salary", amount=2500.0),
            Transaction(date="02/01/24", description="Coffee", amount=-4.5, notes="card"),
            Transaction(date="03/01/24", description="Transfer", amount="12,00"),
        ),
    )


def test_prompt_field_accepts_prefilled_value_with_enter():
    with pipe_session() as (pipe, sess):
        pipe.send_text("\r")
        assert prompt_field("Date", "01/01/24", session=sess) == "01/01/24"


def test_prompt_field_replaces_value():
    with pipe_session() as (pipe, sess):
        # Ctrl-A (home), Ctrl-K (kill to end), type new value, Enter
        pipe.send_text("\x01\x0b-10.25\r")
        assert prompt_field("Amount", "-4.5", session=sess) == "-10.25"


def test_choose_row_returns_zero_based_index_or_none():
    with pipe_session() as (pipe, sess):
        pipe.send_text("2\r")
        assert choose_row(3, session=sess) == 1
    with pipe_session() as (pipe, sess):
        pipe.send_text("\r")
        assert choose_row(3, session=sess) is None


def test_choose_row_rejects_out_of_range_until_corrected():
    with pipe_session() as (pipe, sess):
        pipe.send_text("9\r\x01\x0b3\r")
        assert choose_row(3, session=sess) == 2


def test_confirm_default_and_explicit_no():
    with pipe_session() as (pipe, sess):
        pipe.send_text("\r")
        assert confirm("Save changes?", session=sess) is True
    with pipe_session() as (pipe, sess):
        pipe.send_text("n\r")
        assert confirm("Save changes?", session=sess) is False


def test_render_transactions_shows_rows_and_metadata():
    console = Console(record=True, width=120, file=io.StringIO())
    console.print(render_transactions(_result()))
    text = console.export_text()

    assert "Demo Bank" in text
    assert "Jan 2024" in text
    assert "2,500.00" in text
    assert "-4.50" in text
    assert "12,00" in text
    assert "3 items found" in text


def test_edit_loop_commits_saved_edit_and_discards_cancelled_one():
    store = StatementStore()
    store.load(_result())
    before = store.transactions
    console = Console(file=io.StringIO(), width=120)

    keys = (
        # Edit row 2: keep date and description, change amount and notes, save.
        "2\r" "\r" "\r" "\x01\x0b-10.25\r" "\x01\x0bfixed\r" "y\r"
        # Edit row 1: change description, then discard.
        "1\r" "\r" "\x01\x0bNope\r" "\r" "\r" "n\r"
        # Finish.
        "\r"
    )
    with pipe_session() as (pipe, sess):
        pipe.send_text(keys)
        saved = edit_loop(store, session=sess, console=console)

    assert saved == 1
    after = store.transactions
    assert len(after) == 3
    assert after[1] == Transaction(
        date="02/01/24", description="Coffee", amount=-10.25, notes="fixed"
    )
    assert after[0] is before[0]
    assert after[2] is before[2]
    assert store.active_edit_index is None

"""Typer-based console interface for ``statement_scanner``.

The root callback loads ``.env`` from the current working directory via
``python-dotenv`` (without overriding variables already set) and configures
logging. Business logic lives in the session, store and export modules; the
commands here only wire them together and report errors.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from typer.models import ArgumentInfo

from .csv_export import suggest_filename, write_csv
from .logging_setup import configure_logging
from .models import AppStatus
from .session import ScanSession
from .term_ui import edit_loop, render_transactions

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Extract transactions from a bank statement image or PDF using OpenAI "
        "(Responses API), review and edit them, and export them as CSV. "
        "Loads OPENAI_API_KEY from a local .env before running."
    ),
)

# Module-level argument object to satisfy ruff B008 (no calls in parameter
# defaults).
STATEMENT_PATH_ARGUMENT: ArgumentInfo = typer.Argument(
    ...,
    help="Statement image (PNG, JPEG, ...) or PDF to extract.",
    dir_okay=False,
    file_okay=True,
    exists=False,  # the session reports a friendly read error instead
)


@app.command("scan")
def scan_cmd(
    ctx: typer.Context,
    statement_path: Annotated[Path, STATEMENT_PATH_ARGUMENT],
    *,
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="CSV destination. Defaults to statement_<bank>_<date>.csv in the current directory.",
    ),
    edit: bool = typer.Option(
        False, "--edit/--no-edit", help="Review and correct rows interactively before export."
    ),
    model: str | None = typer.Option(
        None, help="Override the model (falls back to STATEMENT_SCANNER_MODEL, then gpt-5)."
    ),
) -> None:
    """Extract a statement, optionally edit rows, and export them to CSV."""

    if not os.getenv("OPENAI_API_KEY"):
        typer.echo("Error: OPENAI_API_KEY is not set in the environment.", err=True)
        raise typer.Exit(1)

    console: Console = ctx.obj if isinstance(ctx.obj, Console) else Console()
    with ScanSession(model=model) as session:
        with console.status("Processing statement..."):
            session.submit_file(statement_path)
    store = session.store

    if store.status is AppStatus.ERROR or store.current_result is None:
        typer.echo(f"Error: {store.error_message or 'Extraction failed.'}", err=True)
        raise typer.Exit(1)

    result = store.current_result
    if edit:
        saved = edit_loop(store, console=console)
        if saved:
            typer.echo(f"Saved {saved} edit(s).")
    else:
        console.print(render_transactions(result))

    transactions = store.transactions
    if not transactions:
        typer.echo("No transactions found; nothing to export.")
        return

    target = output if output is not None else Path.cwd() / suggest_filename(store.current_result)
    try:
        written = write_csv(target, transactions)
    except OSError as e:
        typer.echo(f"Error: failed to write CSV '{target}': {e}", err=True)
        raise typer.Exit(1) from e
    typer.echo(f"Exported {len(transactions)} transactions to {written}")


@app.callback()
def _root(
    ctx: typer.Context,
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="Logging level (falls back to STATEMENT_SCANNER_LOG_LEVEL, then WARNING).",
    ),
) -> None:
    """Load ``.env`` from the current directory and configure logging.

    Log records share the command's console so they interleave cleanly with
    the progress spinner and the transaction table.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    console = Console()
    configure_logging(log_level, console=console)
    ctx.obj = console


def main() -> None:
    """Console-script entry point."""

    app()


if __name__ == "__main__":  # pragma: no cover
    # Running as a module: `python -m statement_scanner.cli`
    main()

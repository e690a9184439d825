# ruff: noqa: I001
from __future__ import annotations

import json
from typing import Any

import pytest
from typer.testing import CliRunner

import statement_scanner.extraction as extraction_mod
from statement_scanner.cli import app

from tests.helpers.openai_stub import make_client_factory, statement_json

runner = CliRunner()


@pytest.fixture
def workdir(tmp_path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.chdir(tmp_path)
    statement = tmp_path / "statement.png"
    statement.write_bytes(b"\x89PNG fake")
    return tmp_path


def _stub(monkeypatch: pytest.MonkeyPatch, respond) -> list[dict[str, Any]]:
    calls: list[dict[str, Any]] = []
    monkeypatch.setattr(extraction_mod, "OpenAI", make_client_factory(respond, calls))
    return calls


def test_scan_exports_csv_to_output(workdir, monkeypatch):
    rows = [
        {"date": "01/02/24", "description": 'Coffee "Shop"', "amount": -4.5, "notes": None},
        {"date": "02/02/24", "description": "Salary", "amount": 2500, "notes": "ACME"},
    ]
    calls = _stub(monkeypatch, lambda kw: statement_json(rows))
    out = workdir / "out.csv"

    result = runner.invoke(app, ["scan", str(workdir / "statement.png"), "--output", str(out)])

    assert result.exit_code == 0, result.output
    assert "Exported 2 transactions" in result.output
    assert out.read_text(encoding="utf-8") == (
        "Date,Description,Amount,Notes\n"
        '"01/02/24","Coffee ""Shop""",-4.5,""\n'
        '"02/02/24","Salary",2500,"ACME"'
    )
    assert len(calls) == 1


def test_scan_uses_suggested_filename_by_default(workdir, monkeypatch):
    _stub(
        monkeypatch,
        lambda kw: statement_json(
            [{"date": "d", "description": "x", "amount": 1, "notes": None}],
            bank_name="First Demo Bank",
        ),
    )

    result = runner.invoke(app, ["scan", "statement.png"])

    assert result.exit_code == 0, result.output
    written = list(workdir.glob("statement_First_Demo_Bank_*.csv"))
    assert len(written) == 1


def test_scan_reports_extraction_error(workdir, monkeypatch):
    _stub(monkeypatch, lambda kw: json.dumps({"bankName": "Demo"}))

    result = runner.invoke(app, ["scan", "statement.png"])

    assert result.exit_code == 1
    assert "Error:" in result.output
    assert "transactions" in result.output
    assert list(workdir.glob("*.csv")) == []


def test_scan_reports_read_error(workdir, monkeypatch):
    calls = _stub(monkeypatch, lambda kw: statement_json([]))

    result = runner.invoke(app, ["scan", "missing.pdf"])

    assert result.exit_code == 1
    assert "File not found" in result.output
    assert calls == []


def test_scan_requires_api_key(workdir, monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    calls = _stub(monkeypatch, lambda kw: statement_json([]))

    result = runner.invoke(app, ["scan", "statement.png"])

    assert result.exit_code == 1
    assert "OPENAI_API_KEY" in result.output
    assert calls == []


def test_scan_with_no_transactions_skips_export(workdir, monkeypatch):
    _stub(monkeypatch, lambda kw: statement_json([]))

    result = runner.invoke(app, ["scan", "statement.png"])

    assert result.exit_code == 0, result.output
    assert "nothing to export" in result.output
    assert list(workdir.glob("*.csv")) == []


def test_log_level_option_routes_package_logs_to_the_console(workdir, monkeypatch):
    _stub(monkeypatch, lambda kw: statement_json([]))

    quiet = runner.invoke(app, ["scan", "statement.png"])
    verbose = runner.invoke(app, ["--log-level", "INFO", "scan", "statement.png"])

    assert quiet.exit_code == 0, quiet.output
    assert verbose.exit_code == 0, verbose.output
    assert "extract_statement:done" not in quiet.output
    assert "extract_statement:done" in verbose.output

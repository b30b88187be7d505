"""Tests for the Typer CLI."""
from typer.testing import CliRunner
from aiusage.cli import app
from conftest import HEADER

runner = CliRunner()


def test_ingest_run_prints_final_status(use_test_engine, write_csv):
    path = write_csv(HEADER, "a@x.com,5,BU1,AcctA,Digital", "b@x.com,x,BU1,AcctB,Digital")
    result = runner.invoke(app, ["ingest", "run", path, "--user", "cli"])
    assert result.exit_code == 0, result.output
    assert "PARTIAL" in result.output
    assert "2 total, 1 ok, 1 failed" in result.output


def test_ingest_run_failed_exits_nonzero(use_test_engine, tmp_path):
    result = runner.invoke(app, ["ingest", "run", str(tmp_path / "missing.csv")])
    assert result.exit_code == 1
    assert "FAILED" in result.output


def test_ingest_status_unknown(use_test_engine):
    result = runner.invoke(app, ["ingest", "status", "nope"])
    assert result.exit_code == 1
    assert "No upload status found" in result.output

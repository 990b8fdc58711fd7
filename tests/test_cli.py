"""Tests for the command line interface."""

import fitz
import pytest
from typer.testing import CliRunner

from pdf_insight.cli import cli

runner = CliRunner()


@pytest.fixture
def report_pdf(tmp_path):
    doc = fitz.open()
    page = doc.new_page()
    page.insert_text((72, 72), "ANNUAL REPORT")
    for i in range(12):
        page.insert_text((72, 100 + 16 * i), f"Section {i} describes revenue, costs and outlook.")
    path = tmp_path / "report.pdf"
    doc.save(str(path))
    doc.close()
    return path


def test_extract_json(report_pdf):
    result = runner.invoke(cli, ["extract", str(report_pdf), "--json"])

    assert result.exit_code == 0
    assert '"method": "pymupdf"' in result.stdout
    assert "ANNUAL REPORT" in result.stdout


def test_analyze(report_pdf):
    result = runner.invoke(cli, ["analyze", str(report_pdf)])

    assert result.exit_code == 0
    assert "Report/Analysis" in result.stdout


def test_chunk_invalid_overlap(report_pdf):
    result = runner.invoke(cli, ["chunk", str(report_pdf), "--size", "10", "--overlap", "10"])

    assert result.exit_code == 1
    assert "InvalidConfiguration" in result.stdout


def test_missing_file(tmp_path):
    result = runner.invoke(cli, ["extract", str(tmp_path / "missing.pdf")])

    assert result.exit_code == 1
    assert "File not found" in result.stdout


def test_not_a_pdf(tmp_path):
    path = tmp_path / "notes.pdf"
    path.write_bytes(b"plain text, not a pdf")
    result = runner.invoke(cli, ["extract", str(path)])

    assert result.exit_code == 1
    assert "InvalidFormat" in result.stdout

from decimal import Decimal

import pytest

from extractors.sms_rules import TransactionMode
from output.writer import PDFReportWriter, generate_pdf_report


def test_report_with_both_directions(tmp_path, memory_store):
    memory_store.record("debit", "XX1234", "merchant@bank", Decimal("500"), TransactionMode.UPI, "merchant@bank")
    memory_store.record("credit", "", "Unknown", Decimal("1250.50"), TransactionMode.NEFT, "")
    output = tmp_path / "reports" / "report.pdf"

    generate_pdf_report(str(output), memory_store.all_transactions())

    assert output.read_bytes().startswith(b"%PDF")


def test_empty_report_is_still_written(tmp_path):
    output = tmp_path / "empty.pdf"

    generate_pdf_report(str(output), [])

    assert output.exists()


def test_transactions_must_be_a_list(tmp_path):
    with pytest.raises(ValueError):
        PDFReportWriter(str(tmp_path / "bad.pdf")).generate_report(None)


def test_truncate():
    assert PDFReportWriter._truncate("x" * 40, max_length=10) == "xxxxxxx..."
    assert PDFReportWriter._truncate("short") == "short"

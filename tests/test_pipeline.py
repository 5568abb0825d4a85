from datetime import datetime
from decimal import Decimal

import pytest

from extractors.sms_rules import TransactionMode
from main import (
    STATUS_FAILED,
    STATUS_NOT_FINANCIAL,
    STATUS_STORED,
    SmsPipeline,
    TransactionFilter,
    TransactionGrouper,
    main,
)

from conftest import BASE_MILLIS


MESSAGES = [
    "Rs.500 debited from A/c XX1234 via UPI to merchant@bank using UPI",
    "INR 1,250.50 credited to your account via NEFT",
    "Your OTP is 482913",
    "Rs., debited from A/c XX1234",
    "Rs.250 paid to Coffee House via UPI ref coffee.house@okaxis",
]


@pytest.fixture
def pipeline(memory_store):
    return SmsPipeline(memory_store)


def test_routes_each_message(pipeline, memory_store):
    results = pipeline.process_messages(MESSAGES)

    assert [r.status for r in results] == [
        STATUS_STORED, STATUS_STORED, STATUS_NOT_FINANCIAL, STATUS_FAILED, STATUS_STORED
    ]
    assert pipeline.get_stats() == {
        "received": 5,
        "stored": 3,
        "not_financial": 1,
        "failed": 1,
        "invalid": 0,
    }
    assert len(memory_store.get_transactions("debit")) == 2
    assert len(memory_store.get_transactions("credit")) == 1


def test_stored_result_carries_key(pipeline):
    result = pipeline.process_message(MESSAGES[0])

    assert result.stored.key == f"debit_{BASE_MILLIS}"
    assert result.to_dict()["transaction"]["accountNumber"] == "XX1234"


def test_failed_message_stores_nothing(pipeline, memory_store):
    result = pipeline.process_message("Rs., debited")

    assert result.status == STATUS_FAILED
    assert result.record is None
    assert memory_store.count() == 0


def test_balance_only_message_is_stored_as_zero_credit(pipeline, memory_store):
    result = pipeline.process_message("your balance is low")

    assert result.status == STATUS_STORED
    [txn] = memory_store.get_transactions("credit")
    assert txn.amount == 0
    assert txn.merchant_name == "Unknown"


def test_summarize_totals(pipeline, memory_store):
    pipeline.process_messages(MESSAGES)

    summary = TransactionGrouper.summarize(memory_store)

    assert summary["debit"]["count"] == 2
    assert summary["debit"]["total"] == Decimal("750")
    assert summary["debit"]["by_mode"] == {"UPI": Decimal("750")}
    assert summary["credit"]["total"] == Decimal("1250.50")
    assert summary["net"] == Decimal("500.50")


def test_filters(pipeline, memory_store):
    pipeline.process_messages(MESSAGES)
    transactions = memory_store.all_transactions()

    assert len(TransactionFilter.filter_by_mode(transactions, TransactionMode.NEFT)) == 1
    assert [t.merchant_name for t in TransactionFilter.filter_by_keyword(transactions, "coffee")] == ["Coffee House"]

    day = datetime.fromtimestamp(BASE_MILLIS / 1000).strftime("%Y-%m-%d")
    assert len(TransactionFilter.filter_by_date_range(transactions, day, day)) == 3
    assert TransactionFilter.filter_by_date_range(transactions, "2000-01-01", "2000-01-02") == []
    assert list(TransactionGrouper.group_by_day(transactions)) == [day]


def test_cli_processes_file_and_writes_store(tmp_path, monkeypatch):
    monkeypatch.setattr("logging_config.setup_logging", lambda **kwargs: None)
    inbox = tmp_path / "inbox.txt"
    inbox.write_text("\n".join(MESSAGES), encoding="utf-8")
    store_path = tmp_path / "store.json"
    report_path = tmp_path / "report.pdf"

    exit_code = main([str(inbox), "--store", str(store_path), "--report", str(report_path)])

    assert exit_code == 0
    assert store_path.exists()
    assert report_path.read_bytes().startswith(b"%PDF")


def test_cli_malformed_store_exits_with_error(tmp_path, monkeypatch):
    monkeypatch.setattr("logging_config.setup_logging", lambda **kwargs: None)
    inbox = tmp_path / "inbox.txt"
    inbox.write_text(MESSAGES[0], encoding="utf-8")
    store_path = tmp_path / "store.json"
    store_path.write_text("[]", encoding="utf-8")

    assert main([str(inbox), "--store", str(store_path)]) == 1


def test_cli_missing_file_exits_with_error(tmp_path, monkeypatch):
    monkeypatch.setattr("logging_config.setup_logging", lambda **kwargs: None)

    assert main([str(tmp_path / "missing.txt")]) == 1

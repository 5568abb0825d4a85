import json
import threading
from decimal import Decimal

import pytest

from extractors.sms_extractor import extract_transaction
from extractors.sms_rules import TransactionDirection, TransactionMode
from storage.transaction_store import (
    InMemoryTransactionStore,
    JsonFileTransactionStore,
    TransactionStoreError,
    make_transaction_key,
    open_store,
)

from conftest import BASE_MILLIS


def test_record_uses_direction_bucket_and_timestamp_key(memory_store):
    stored = memory_store.record(
        "debit", "XX1234", "merchant@bank", Decimal("500"), TransactionMode.UPI, "merchant@bank"
    )

    assert stored.key == f"debit_{BASE_MILLIS}"
    assert stored.timestamp == BASE_MILLIS
    assert stored.is_debit is True
    assert memory_store.get_transactions(TransactionDirection.DEBIT) == [stored]
    assert memory_store.get_transactions("credit") == []


def test_record_transaction_routes_by_direction(memory_store):
    memory_store.record_transaction(extract_transaction("INR 1,250.50 credited to your account via NEFT"))

    credits = memory_store.get_transactions("credit")
    assert len(credits) == 1
    assert credits[0].amount == Decimal("1250.50")
    assert credits[0].to_dict() == {
        "accountNumber": "",
        "amount": 1250.5,
        "merchantName": "Unknown",
        "timestamp": BASE_MILLIS,
        "transactionMode": "NEFT",
        "upiId": "",
    }


def test_same_millisecond_keys_do_not_collide():
    store = InMemoryTransactionStore(clock=lambda: BASE_MILLIS)

    first = store.record("credit", "", "Unknown", Decimal("1"), TransactionMode.OTHER, "")
    second = store.record("credit", "", "Unknown", Decimal("2"), TransactionMode.OTHER, "")

    assert first.key == f"credit_{BASE_MILLIS}"
    assert second.key == f"credit_{BASE_MILLIS}_1"
    assert store.count() == 2


def test_unknown_direction_is_rejected(memory_store):
    with pytest.raises(ValueError):
        memory_store.record("refund", "", "Unknown", Decimal("1"), TransactionMode.OTHER, "")


def test_make_transaction_key():
    assert make_transaction_key(TransactionDirection.CREDIT, 42) == "credit_42"


def test_concurrent_writes_are_all_kept():
    store = InMemoryTransactionStore(clock=lambda: BASE_MILLIS)

    def worker():
        for _ in range(50):
            store.record("debit", "", "Unknown", Decimal("1"), TransactionMode.OTHER, "")

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert store.count() == 200
    assert len({txn.key for txn in store.get_transactions("debit")}) == 200


def test_json_store_persists_and_reloads(tmp_path, clock):
    path = tmp_path / "store.json"
    store = JsonFileTransactionStore(path, clock=clock)
    store.record_transaction(extract_transaction("Rs.500 debited from A/c XX1234 via UPI to merchant@bank using UPI"))

    data = json.loads(path.read_text(encoding="utf-8"))
    assert set(data) == {"debit", "credit"}
    assert data["debit"][f"debit_{BASE_MILLIS}"]["upiId"] == "merchant@bank"

    reloaded = JsonFileTransactionStore(path)
    [txn] = reloaded.get_transactions("debit")
    assert txn.amount == Decimal("500")
    assert txn.account_number == "XX1234"
    assert txn.transaction_mode == TransactionMode.UPI


def test_json_store_rejects_corrupt_file(tmp_path):
    path = tmp_path / "store.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(TransactionStoreError):
        JsonFileTransactionStore(path)


@pytest.mark.parametrize("content", ["[]", '{"debit": []}', '{"credit": "x"}'])
def test_json_store_rejects_non_object_documents(tmp_path, content):
    path = tmp_path / "store.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(TransactionStoreError):
        JsonFileTransactionStore(path)


def test_json_store_reloads_exact_amount(tmp_path, clock):
    path = tmp_path / "store.json"
    store = JsonFileTransactionStore(path, clock=clock)
    store.record_transaction(extract_transaction("Rs.12345678901234567.89 credited"))

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["credit"][f"credit_{BASE_MILLIS}"]["amount"] == "12345678901234567.89"

    [txn] = JsonFileTransactionStore(path).get_transactions("credit")
    assert txn.amount == Decimal("12345678901234567.89")


def test_failed_write_is_rolled_back(tmp_path, clock):
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    store = JsonFileTransactionStore(blocker / "store.json", clock=clock)

    with pytest.raises(TransactionStoreError):
        store.record("debit", "XX1234", "Unknown", Decimal("5"), TransactionMode.OTHER, "")

    assert store.count() == 0
    assert store.get_transactions("debit") == []


def test_clear_empties_both_buckets(tmp_path, clock):
    store = open_store(tmp_path / "store.json", clock=clock)
    store.record("credit", "", "Unknown", Decimal("1"), TransactionMode.OTHER, "")
    store.clear()

    assert store.count() == 0
    assert json.loads((tmp_path / "store.json").read_text()) == {"debit": {}, "credit": {}}


def test_open_store_without_path_is_in_memory():
    assert isinstance(open_store(None), InMemoryTransactionStore)

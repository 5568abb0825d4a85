from decimal import Decimal

import pytest

from extractors.sms_extractor import TransactionRecord, extract_transaction
from extractors.sms_rules import TransactionMode
from validators.record_validator import TransactionValidator, ValidationError, validate_record


def test_extracted_record_is_valid():
    text = "Rs.500 debited from A/c XX1234 via UPI to merchant@bank using UPI"
    assert validate_record(extract_transaction(text), text) is True


def test_default_record_is_valid_for_any_text():
    assert validate_record(TransactionRecord(), "your balance is low") is True


def test_negative_amount_is_rejected():
    validator = TransactionValidator()
    record = TransactionRecord(amount=Decimal("-5"))

    assert validator.validate_record(record, "Rs -5 credited") is False
    assert validator.get_stats()["invalid_amount"] == 1


def test_untraceable_field_is_rejected():
    validator = TransactionValidator()
    record = TransactionRecord(upi_id="someone@else")

    assert validator.validate_record(record, "INR 10 credited") is False
    assert validator.get_stats()["untraceable_field"] == 1


def test_mode_not_in_text_is_rejected():
    record = TransactionRecord(transaction_mode=TransactionMode.IMPS)
    assert validate_record(record, "INR 10 credited via NEFT") is False


def test_amount_not_in_text_is_rejected():
    record = TransactionRecord(amount=Decimal("999"))
    assert validate_record(record, "INR 10 credited") is False


def test_strict_mode_raises():
    with pytest.raises(ValidationError):
        validate_record(TransactionRecord(account_number="XX0000"), "credited", strict_mode=True)


def test_reset_stats():
    validator = TransactionValidator()
    validator.validate_record(TransactionRecord(), "credited")
    validator.reset_stats()

    assert all(value == 0 for value in validator.get_stats().values())

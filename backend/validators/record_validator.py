"""
Record Validator Module
Validates extracted transaction records against their source message.
"""

import logging
from decimal import Decimal

from extractors.sms_extractor import TransactionRecord
from extractors.sms_rules import TransactionMode, UNKNOWN_MERCHANT

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """Custom exception for validation errors."""
    pass


class TransactionValidator:
    """Validates transaction records."""

    def __init__(self, strict_mode: bool = False):
        """
        Initialize validator.

        Args:
            strict_mode: If True, raise exceptions on invalid data.
                        If False, log warnings and reject the record.
        """
        self.strict_mode = strict_mode

        self.validation_stats = {
            "total_validated": 0,
            "valid": 0,
            "invalid": 0,
            "invalid_amount": 0,
            "invalid_mode": 0,
            "untraceable_field": 0
        }

    def validate_record(self, record: TransactionRecord, text: str) -> bool:
        """
        Validate a single record.

        Args:
            record: Record extracted from text
            text: Original message text

        Returns:
            True if valid, False if invalid

        Raises:
            ValidationError: If strict_mode is True and validation fails
        """
        self.validation_stats["total_validated"] += 1

        if not self._validate_amount(record.amount):
            return self._reject("invalid_amount", f"Invalid amount: {record.amount}", record)

        if not isinstance(record.transaction_mode, TransactionMode):
            return self._reject("invalid_mode", f"Invalid mode: {record.transaction_mode}", record)

        field = self._find_untraceable_field(record, text)
        if field is not None:
            return self._reject("untraceable_field", f"Field '{field}' not found in message", record)

        self.validation_stats["valid"] += 1
        return True

    def _reject(self, reason: str, msg: str, record: TransactionRecord) -> bool:
        self.validation_stats[reason] += 1
        self.validation_stats["invalid"] += 1
        if self.strict_mode:
            raise ValidationError(msg)
        logger.warning(f"{msg} in record: {record}")
        return False

    @staticmethod
    def _validate_amount(amount) -> bool:
        """Amount must be a finite, non-negative Decimal."""
        if not isinstance(amount, Decimal):
            return False
        if not amount.is_finite():
            return False
        return amount >= 0

    @staticmethod
    def _find_untraceable_field(record: TransactionRecord, text: str):
        """
        Return the name of the first field whose value cannot be found in the text.

        Amounts are compared against the comma-stripped message; merchant
        "Unknown" and empty strings are defaults and always pass.
        """
        lower_text = text.lower()

        for name, value in (
            ("account_number", record.account_number),
            ("upi_id", record.upi_id),
        ):
            if value and value.lower() not in lower_text:
                return name

        if record.merchant_name != UNKNOWN_MERCHANT and record.merchant_name.lower() not in lower_text:
            return "merchant_name"

        if record.transaction_mode != TransactionMode.OTHER and record.transaction_mode.value not in text:
            return "transaction_mode"

        if record.amount != 0:
            compact = text.replace(',', '')
            digits = format(record.amount.normalize(), 'f')
            if digits.split('.')[0] not in compact:
                return "amount"

        return None

    def get_stats(self) -> dict:
        """Get validation statistics."""
        return self.validation_stats.copy()

    def reset_stats(self):
        """Reset validation statistics."""
        for key in self.validation_stats:
            self.validation_stats[key] = 0


def validate_record(record: TransactionRecord, text: str, strict_mode: bool = False) -> bool:
    """
    Convenience function to validate one record.

    Args:
        record: Extracted record
        text: Source message
        strict_mode: If True, raise exceptions on invalid data

    Returns:
        True if the record is valid
    """
    validator = TransactionValidator(strict_mode=strict_mode)
    return validator.validate_record(record, text)

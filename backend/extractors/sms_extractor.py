"""
SMS Extractor Module
Parses a financial SMS into a structured transaction record using an ordered
list of independent regex field extractors.
"""

import re
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

from .sms_rules import (
    TransactionDirection,
    TransactionMode,
    UNKNOWN_MERCHANT,
    detect_direction,
    detect_transaction_mode,
    format_amount_display,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransactionRecord:
    """A single transaction extracted from one SMS."""

    is_debit: bool = False
    amount: Decimal = Decimal("0")
    account_number: str = ""
    merchant_name: str = UNKNOWN_MERCHANT
    transaction_mode: TransactionMode = TransactionMode.OTHER
    upi_id: str = ""

    @property
    def direction(self) -> TransactionDirection:
        return TransactionDirection.DEBIT if self.is_debit else TransactionDirection.CREDIT

    @property
    def amount_display(self) -> str:
        return format_amount_display(self.amount, self.direction)

    def to_dict(self) -> dict:
        """Convert record to the wire dictionary used by storage."""
        return {
            "isDebit": self.is_debit,
            "amount": float(self.amount),
            "accountNumber": self.account_number,
            "merchantName": self.merchant_name,
            "transactionMode": self.transaction_mode.value,
            "upiId": self.upi_id,
        }

    def __repr__(self) -> str:
        return (
            f"TransactionRecord({self.direction.value}, amount={self.amount_display}, "
            f"mode={self.transaction_mode.value}, merchant={self.merchant_name})"
        )


class FieldExtractor:
    """
    Base class for a single-field extractor.

    Subclasses return the typed field value from try_match(), or None when
    the message carries no such field. Conversion errors propagate.
    """

    field_name: str = ""
    # Fields that must already be extracted for this extractor to run
    requires: tuple[str, ...] = ()

    def try_match(self, text: str) -> Optional[Any]:
        raise NotImplementedError


class PatternFieldExtractor(FieldExtractor):
    """Field extractor backed by the first match of a compiled regex."""

    pattern: re.Pattern
    group: int = 1

    def try_match(self, text: str) -> Optional[Any]:
        match = self.pattern.search(text)
        if not match:
            return None
        return self.convert(match.group(self.group))

    def convert(self, raw: str) -> Optional[Any]:
        return raw


class DirectionExtractor(FieldExtractor):
    field_name = "is_debit"

    def try_match(self, text: str) -> Optional[bool]:
        return detect_direction(text) == TransactionDirection.DEBIT


class AmountExtractor(PatternFieldExtractor):
    """
    Currency marker (Rs / INR / ₹, any case) followed by a comma-grouped number.

    The marker is not word-bounded, so "Yours 50" also matches. Only the first
    amount in the message is used.
    """

    field_name = "amount"
    pattern = re.compile(r'(?:RS|INR|₹)[.\s]*([\d,]+(?:\.\d{1,2})?)', re.IGNORECASE)

    def convert(self, raw: str) -> Decimal:
        # A comma-only capture raises InvalidOperation, which aborts extraction
        return Decimal(raw.replace(',', ''))


class AccountNumberExtractor(PatternFieldExtractor):
    field_name = "account_number"
    pattern = re.compile(
        r'(?:a/c|acct|account)\s*(?:no|number|#)?\s*[.:]*\s*(X+\d*|\d+)',
        re.IGNORECASE
    )


class UpiIdExtractor(PatternFieldExtractor):
    field_name = "upi_id"
    pattern = re.compile(r'[\w.-]+@[\w.-]+')
    group = 0


class TransactionModeExtractor(FieldExtractor):
    field_name = "transaction_mode"

    def try_match(self, text: str) -> Optional[TransactionMode]:
        return detect_transaction_mode(text)


class MerchantNameExtractor(PatternFieldExtractor):
    """Counterparty phrase between "to"/"from" and "via"/"through"/"using"/"by"."""

    field_name = "merchant_name"
    requires = ("upi_id",)
    pattern = re.compile(r'(?:to|from)\s+([\w\s]+)\s+(?:via|through|using|by)', re.IGNORECASE)

    def convert(self, raw: str) -> str:
        return raw.strip()


DEFAULT_FIELD_EXTRACTORS = (
    DirectionExtractor(),
    AmountExtractor(),
    AccountNumberExtractor(),
    UpiIdExtractor(),
    TransactionModeExtractor(),
    MerchantNameExtractor(),
)


class SmsTransactionExtractor:
    """
    Extracts a TransactionRecord from a financial SMS.

    Runs the field extractors in order; a missing field keeps its default,
    while any exception abandons the whole message.
    """

    def __init__(self, field_extractors: Optional[tuple[FieldExtractor, ...]] = None):
        """Initialize extractor with the default field extractor sequence."""
        self.field_extractors = tuple(field_extractors or DEFAULT_FIELD_EXTRACTORS)
        self.stats = {
            "messages_seen": 0,
            "records_extracted": 0,
            "parse_failures": 0
        }

    def extract(self, text: str) -> Optional[TransactionRecord]:
        """
        Extract a transaction record from message text.

        Args:
            text: Message already judged financial by the classifier

        Returns:
            TransactionRecord, or None if extraction failed
        """
        self.stats["messages_seen"] += 1

        if not isinstance(text, str):
            logger.error("Invalid input: text must be a string")
            return None

        try:
            fields = self._collect_fields(text)
            record = self._build_record(fields)
        except Exception as e:
            self.stats["parse_failures"] += 1
            logger.error(f"Extraction aborted for message '{text[:50]}': {e}", exc_info=True)
            return None

        self.stats["records_extracted"] += 1
        logger.debug(f"Extracted: {record}")
        return record

    def _collect_fields(self, text: str) -> dict[str, Any]:
        fields: dict[str, Any] = {}

        for extractor in self.field_extractors:
            if extractor.field_name in fields:
                continue  # first match wins

            if any(name not in fields for name in extractor.requires):
                logger.debug(f"Skipping {extractor.field_name}: needs {', '.join(extractor.requires)}")
                continue

            value = extractor.try_match(text)
            if value is None:
                logger.debug(f"No match for {extractor.field_name}")
                continue

            fields[extractor.field_name] = value

        return fields

    @staticmethod
    def _build_record(fields: dict[str, Any]) -> TransactionRecord:
        """
        Merge extracted fields into a record.

        Merchant falls back to the raw UPI id when the to/from phrase is absent,
        and is "Unknown" when there is no UPI id at all.
        """
        upi_id = fields.get("upi_id")
        if upi_id:
            fields["merchant_name"] = fields.get("merchant_name", upi_id)
        else:
            fields["merchant_name"] = UNKNOWN_MERCHANT

        return TransactionRecord(**fields)

    def get_stats(self) -> dict:
        """Get extraction statistics."""
        return self.stats.copy()


def extract_transaction(text: str) -> Optional[TransactionRecord]:
    """
    Convenience function to extract a transaction from one message.

    Args:
        text: Message text

    Returns:
        TransactionRecord or None
    """
    extractor = SmsTransactionExtractor()
    return extractor.extract(text)

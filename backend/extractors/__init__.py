"""
Extractors Module - SMS classification and transaction parsing.
"""

from .sms_extractor import (
    TransactionRecord,
    FieldExtractor,
    SmsTransactionExtractor,
    extract_transaction
)

from .sms_classifier import (
    SmsClassifier,
    is_financial
)

from .sms_rules import (
    TransactionDirection,
    TransactionMode,
    format_amount_display
)

__all__ = [
    'TransactionRecord',
    'FieldExtractor',
    'SmsTransactionExtractor',
    'extract_transaction',
    'SmsClassifier',
    'is_financial',
    'TransactionDirection',
    'TransactionMode',
    'format_amount_display',
]

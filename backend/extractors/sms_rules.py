"""
SMS Rules Module
Defines transaction direction/mode enums and the keyword tables used to
classify bank SMS messages.
"""

from decimal import Decimal
from enum import Enum
import logging

logger = logging.getLogger(__name__)


class TransactionDirection(Enum):
    """Direction of money movement, also the storage bucket name."""
    DEBIT = "debit"
    CREDIT = "credit"


class TransactionMode(Enum):
    """Payment channel named in the message."""
    UPI = "UPI"
    NEFT = "NEFT"
    IMPS = "IMPS"
    OTHER = "OTHER"


# Any of these (case-insensitive) marks a message as financial
FINANCIAL_KEYWORDS = (
    "debited",
    "credited",
    "spent",
    "received",
    "payment",
    "transferred",
    "transaction",
    "UPI",
    "NEFT",
    "IMPS",
    "withdrawn",
    "deposited",
    "balance",
)

# Any of these (case-insensitive) makes a message a debit, otherwise credit
DEBIT_KEYWORDS = ("debited", "spent", "paid")

# Checked case-sensitively, in priority order
MODE_PRIORITY = (
    TransactionMode.UPI,
    TransactionMode.NEFT,
    TransactionMode.IMPS,
)

UNKNOWN_MERCHANT = "Unknown"


def detect_direction(text: str) -> TransactionDirection:
    """
    Decide whether a message describes a debit or a credit.

    Not cross-checked against the classifier keywords: a message that is
    financial only because it mentions "balance" comes out as a credit.

    Args:
        text: Raw message text

    Returns:
        TransactionDirection.DEBIT if a debit keyword is present, else CREDIT
    """
    lower_text = text.lower()
    if any(keyword in lower_text for keyword in DEBIT_KEYWORDS):
        return TransactionDirection.DEBIT
    return TransactionDirection.CREDIT


def detect_transaction_mode(text: str) -> TransactionMode:
    """Return the highest-priority channel token present in the text."""
    for mode in MODE_PRIORITY:
        if mode.value in text:
            return mode
    return TransactionMode.OTHER


def format_amount_display(amount: Decimal, direction: TransactionDirection) -> str:
    """
    Format amount for display with explicit sign.

    Credits: +1250.50
    Debits:  -500.00

    Args:
        amount: Unsigned amount
        direction: Transaction direction

    Returns:
        Formatted string with explicit sign
    """
    amount = abs(Decimal(amount))
    if direction == TransactionDirection.DEBIT:
        return f"-{amount:.2f}"
    return f"+{amount:.2f}"

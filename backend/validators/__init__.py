"""
Validators Module - Transaction record validation.
"""

from .record_validator import (
    TransactionValidator,
    validate_record,
    ValidationError
)

__all__ = [
    'TransactionValidator',
    'validate_record',
    'ValidationError',
]

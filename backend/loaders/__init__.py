"""
Loaders Module - SMS inbox export loading.
"""

from .sms_loader import (
    load_messages,
    load_multiple_files,
    SmsLoadError
)

__all__ = [
    'load_messages',
    'load_multiple_files',
    'SmsLoadError',
]

"""
Storage Module - Direction-bucketed transaction stores.
"""

from .transaction_store import (
    StoredTransaction,
    TransactionStore,
    InMemoryTransactionStore,
    JsonFileTransactionStore,
    TransactionStoreError,
    make_transaction_key,
    open_store
)

__all__ = [
    'StoredTransaction',
    'TransactionStore',
    'InMemoryTransactionStore',
    'JsonFileTransactionStore',
    'TransactionStoreError',
    'make_transaction_key',
    'open_store',
]

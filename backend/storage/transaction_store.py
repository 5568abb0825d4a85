"""
Transaction Store Module
Storage collaborators for extracted transactions, bucketed by direction.
"""

import json
import logging
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Callable, Optional, Union

from extractors.sms_extractor import TransactionRecord
from extractors.sms_rules import TransactionDirection, TransactionMode

logger = logging.getLogger(__name__)


class TransactionStoreError(Exception):
    """Custom exception for storage failures."""
    pass


@dataclass(frozen=True)
class StoredTransaction:
    """A record as held by storage: the six fields plus key and capture time."""

    key: str
    timestamp: int
    direction: TransactionDirection
    account_number: str
    merchant_name: str
    amount: Decimal
    transaction_mode: TransactionMode
    upi_id: str

    @property
    def is_debit(self) -> bool:
        return self.direction == TransactionDirection.DEBIT

    def to_dict(self) -> dict:
        return {
            "accountNumber": self.account_number,
            "amount": float(self.amount),
            "merchantName": self.merchant_name,
            "timestamp": self.timestamp,
            "transactionMode": self.transaction_mode.value,
            "upiId": self.upi_id,
        }

    def to_document(self) -> dict:
        """Persisted form; the amount is written as a string so it reloads exactly."""
        document = self.to_dict()
        document["amount"] = str(self.amount)
        return document

    @classmethod
    def from_dict(cls, direction: TransactionDirection, key: str, data: dict) -> "StoredTransaction":
        return cls(
            key=key,
            timestamp=int(data["timestamp"]),
            direction=direction,
            account_number=data.get("accountNumber", ""),
            merchant_name=data.get("merchantName", ""),
            amount=Decimal(str(data.get("amount", 0))),
            transaction_mode=TransactionMode(data.get("transactionMode", "OTHER")),
            upi_id=data.get("upiId", ""),
        )


def current_millis() -> int:
    """Capture timestamp in epoch milliseconds."""
    return int(time.time() * 1000)


def make_transaction_key(direction: TransactionDirection, timestamp: int) -> str:
    """Build the storage key, e.g. "debit_1700000000000"."""
    return f"{direction.value}_{timestamp}"


def _coerce_direction(direction: Union[TransactionDirection, str]) -> TransactionDirection:
    if isinstance(direction, TransactionDirection):
        return direction
    try:
        return TransactionDirection(str(direction).lower())
    except ValueError:
        raise ValueError(f"Unknown direction: {direction!r}. Use 'debit' or 'credit'") from None


class TransactionStore(ABC):
    """
    Storage collaborator interface.

    Writes are serialized with a lock; the caller supplies key and timestamp
    through the injected clock.
    """

    def __init__(self, clock: Callable[[], int] = current_millis):
        self.clock = clock
        self._lock = threading.Lock()
        self._buckets: dict[TransactionDirection, dict[str, StoredTransaction]] = {
            TransactionDirection.DEBIT: {},
            TransactionDirection.CREDIT: {},
        }

    def record(
        self,
        direction: Union[TransactionDirection, str],
        account_number: str,
        merchant_name: str,
        amount: Decimal,
        transaction_mode: TransactionMode,
        upi_id: str
    ) -> StoredTransaction:
        """
        Store one transaction in the bucket for its direction.

        Returns:
            The stored value, including its key and capture timestamp
        """
        direction = _coerce_direction(direction)
        timestamp = self.clock()

        with self._lock:
            bucket = self._buckets[direction]
            key = make_transaction_key(direction, timestamp)
            suffix = 1
            while key in bucket:
                key = f"{make_transaction_key(direction, timestamp)}_{suffix}"
                suffix += 1

            stored = StoredTransaction(
                key=key,
                timestamp=timestamp,
                direction=direction,
                account_number=account_number,
                merchant_name=merchant_name,
                amount=Decimal(str(amount)),
                transaction_mode=TransactionMode(transaction_mode),
                upi_id=upi_id,
            )
            bucket[key] = stored
            try:
                self._persist()
            except TransactionStoreError:
                del bucket[key]
                raise

        logger.info(f"Stored {direction.value} transaction {key}: {float(stored.amount):.2f}")
        return stored

    def record_transaction(self, record: TransactionRecord) -> StoredTransaction:
        """Store an extracted record under its own direction."""
        return self.record(
            record.direction,
            record.account_number,
            record.merchant_name,
            record.amount,
            record.transaction_mode,
            record.upi_id,
        )

    def get_transactions(self, direction: Union[TransactionDirection, str]) -> list[StoredTransaction]:
        """Return stored transactions for one direction, oldest first."""
        direction = _coerce_direction(direction)
        with self._lock:
            items = list(self._buckets[direction].values())
        return sorted(items, key=lambda t: (t.timestamp, t.key))

    def all_transactions(self) -> list[StoredTransaction]:
        items = (
            self.get_transactions(TransactionDirection.DEBIT)
            + self.get_transactions(TransactionDirection.CREDIT)
        )
        return sorted(items, key=lambda t: (t.timestamp, t.key))

    def count(self) -> int:
        with self._lock:
            return sum(len(bucket) for bucket in self._buckets.values())

    def to_dict(self) -> dict:
        """Nested {direction: {key: fields}} view of the store."""
        with self._lock:
            return {
                direction.value: {key: txn.to_dict() for key, txn in bucket.items()}
                for direction, bucket in self._buckets.items()
            }

    def clear(self):
        with self._lock:
            for bucket in self._buckets.values():
                bucket.clear()
            self._persist()

    @abstractmethod
    def _persist(self):
        """Flush state after a write. Called with the lock held."""


class InMemoryTransactionStore(TransactionStore):
    """Process-local store; nothing survives the process."""

    def _persist(self):
        pass


class JsonFileTransactionStore(TransactionStore):
    """
    Store persisted as one JSON document:
    {"debit": {key: {...}}, "credit": {key: {...}}}
    """

    def __init__(self, path: Union[str, Path], clock: Callable[[], int] = current_millis):
        super().__init__(clock=clock)
        self.path = Path(path)
        self._load()

    def _load(self):
        if not self.path.exists():
            logger.info(f"No store file at {self.path}, starting empty")
            return

        try:
            data = json.loads(self.path.read_text(encoding='utf-8') or "{}")
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Cannot read store file {self.path}: {e}")
            raise TransactionStoreError(f"Cannot read store file: {self.path}") from e

        if not isinstance(data, dict):
            raise TransactionStoreError(f"Malformed store file {self.path}: top level must be an object")

        try:
            for direction in TransactionDirection:
                bucket = data.get(direction.value, {})
                if not isinstance(bucket, dict):
                    raise TransactionStoreError(
                        f"Malformed store file {self.path}: '{direction.value}' must be an object"
                    )
                for key, fields in bucket.items():
                    self._buckets[direction][key] = StoredTransaction.from_dict(direction, key, fields)
        except (KeyError, ValueError, TypeError, ArithmeticError) as e:
            raise TransactionStoreError(f"Malformed store file {self.path}: {e}") from e

        logger.info(f"Loaded {self.count()} transactions from {self.path}")

    def _persist(self):
        data = {
            direction.value: {key: txn.to_document() for key, txn in bucket.items()}
            for direction, bucket in self._buckets.items()
        }
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            tmp_path.write_text(json.dumps(data, indent=2), encoding='utf-8')
            tmp_path.replace(self.path)
        except OSError as e:
            logger.error(f"Cannot write store file {self.path}: {e}")
            raise TransactionStoreError(f"Cannot write store file: {self.path}") from e


def open_store(path: Optional[Union[str, Path]] = None, clock: Callable[[], int] = current_millis) -> TransactionStore:
    """
    Open a JSON-backed store at path, or an in-memory store if path is None.
    """
    if path is None:
        return InMemoryTransactionStore(clock=clock)
    return JsonFileTransactionStore(path, clock=clock)

"""
SMS Transaction Extractor - Main Pipeline
Orchestrates classification, extraction, validation and storage of SMS messages.
"""

import argparse
import logging
import sys
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Optional

from config import config
from extractors.sms_classifier import SmsClassifier
from extractors.sms_extractor import SmsTransactionExtractor, TransactionRecord
from extractors.sms_rules import TransactionDirection, TransactionMode
from storage.transaction_store import StoredTransaction, TransactionStore, open_store
from validators.record_validator import TransactionValidator

logger = logging.getLogger(__name__)


STATUS_STORED = "stored"
STATUS_NOT_FINANCIAL = "not_financial"
STATUS_FAILED = "failed"
STATUS_INVALID = "invalid"


@dataclass
class MessageResult:
    """Outcome of processing one message."""

    status: str
    record: Optional[TransactionRecord] = None
    stored: Optional[StoredTransaction] = None

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "transaction": self.record.to_dict() if self.record else None,
            "key": self.stored.key if self.stored else None,
        }


class SmsPipeline:
    """
    Routes each message: classify, extract, validate, then hand off to the store.

    The store is injected; the pipeline never reaches for a global one.
    """

    def __init__(
        self,
        store: TransactionStore,
        classifier: Optional[SmsClassifier] = None,
        extractor: Optional[SmsTransactionExtractor] = None,
        validator: Optional[TransactionValidator] = None
    ):
        self.store = store
        self.classifier = classifier or SmsClassifier()
        self.extractor = extractor or SmsTransactionExtractor()
        self.validator = validator or TransactionValidator(strict_mode=False)
        self.stats = {
            "received": 0,
            STATUS_STORED: 0,
            STATUS_NOT_FINANCIAL: 0,
            STATUS_FAILED: 0,
            STATUS_INVALID: 0
        }

    def process_message(self, text: str) -> MessageResult:
        """
        Process one inbound message.

        Args:
            text: Raw SMS body

        Returns:
            MessageResult describing what happened to the message
        """
        self.stats["received"] += 1

        if not self.classifier.is_financial(text):
            return self._finish(MessageResult(STATUS_NOT_FINANCIAL))

        record = self.extractor.extract(text)
        if record is None:
            logger.warning(f"Could not extract transaction, message dropped: {text[:50]}")
            return self._finish(MessageResult(STATUS_FAILED))

        if not self.validator.validate_record(record, text):
            return self._finish(MessageResult(STATUS_INVALID, record=record))

        stored = self.store.record_transaction(record)
        return self._finish(MessageResult(STATUS_STORED, record=record, stored=stored))

    def process_messages(self, messages: list[str]) -> list[MessageResult]:
        """Process a batch of messages in order."""
        logger.info(f"Processing {len(messages)} messages")
        results = [self.process_message(text) for text in messages]
        self._print_summary()
        return results

    def _finish(self, result: MessageResult) -> MessageResult:
        self.stats[result.status] += 1
        return result

    def get_stats(self) -> dict:
        return self.stats.copy()

    def _print_summary(self):
        logger.info("=" * 60)
        logger.info("PROCESSING SUMMARY")
        logger.info(f"Messages received:        {self.stats['received']}")
        logger.info(f"Stored transactions:      {self.stats[STATUS_STORED]}")
        logger.info(f"Not financial:            {self.stats[STATUS_NOT_FINANCIAL]}")
        logger.info(f"Extraction failures:      {self.stats[STATUS_FAILED]}")
        logger.info(f"Rejected by validation:   {self.stats[STATUS_INVALID]}")
        logger.info("=" * 60)


class TransactionFilter:
    """Filters stored transactions by mode, text and date range."""

    @staticmethod
    def filter_by_mode(
        transactions: list[StoredTransaction],
        mode: TransactionMode
    ) -> list[StoredTransaction]:
        return [txn for txn in transactions if txn.transaction_mode == mode]

    @staticmethod
    def filter_by_keyword(transactions: list[StoredTransaction], keyword: str) -> list[StoredTransaction]:
        """
        Filter transactions whose merchant or UPI id contains keyword (case-insensitive).
        """
        if not keyword:
            return transactions

        keyword_lower = keyword.lower()
        filtered = [
            txn for txn in transactions
            if keyword_lower in txn.merchant_name.lower() or keyword_lower in txn.upi_id.lower()
        ]

        logger.info(f"Keyword filter '{keyword}': {len(filtered)}/{len(transactions)} transactions matched")
        return filtered

    @staticmethod
    def filter_by_date_range(
        transactions: list[StoredTransaction],
        start_date: str,
        end_date: str
    ) -> list[StoredTransaction]:
        """
        Keep transactions captured between start_date and end_date (YYYY-MM-DD, inclusive).

        Raises:
            ValueError: If a date is not in YYYY-MM-DD format
        """
        start = datetime.strptime(start_date, "%Y-%m-%d").date()
        end = datetime.strptime(end_date, "%Y-%m-%d").date()

        return [
            txn for txn in transactions
            if start <= datetime.fromtimestamp(txn.timestamp / 1000).date() <= end
        ]


class TransactionGrouper:
    """Groups and totals stored transactions."""

    @staticmethod
    def group_by_day(transactions: list[StoredTransaction]) -> dict[str, list[StoredTransaction]]:
        grouped = defaultdict(list)
        for txn in transactions:
            day = datetime.fromtimestamp(txn.timestamp / 1000).strftime("%Y-%m-%d")
            grouped[day].append(txn)
        return dict(grouped)

    @staticmethod
    def group_by_mode(transactions: list[StoredTransaction]) -> dict[str, list[StoredTransaction]]:
        grouped = defaultdict(list)
        for txn in transactions:
            grouped[txn.transaction_mode.value].append(txn)
        return dict(grouped)

    @staticmethod
    def summarize(store: TransactionStore) -> dict:
        """
        Count and total transactions per direction and per mode.

        Returns:
            {"debit": {"count", "total", "by_mode": {mode: total}}, "credit": {...}, "net": ...}
        """
        summary = {}
        for direction in TransactionDirection:
            transactions = store.get_transactions(direction)
            by_mode = {
                mode: sum((txn.amount for txn in txns), Decimal("0"))
                for mode, txns in TransactionGrouper.group_by_mode(transactions).items()
            }
            summary[direction.value] = {
                "count": len(transactions),
                "total": sum((txn.amount for txn in transactions), Decimal("0")),
                "by_mode": by_mode,
            }

        summary["net"] = summary["credit"]["total"] - summary["debit"]["total"]
        return summary


def main(argv: Optional[list[str]] = None) -> int:
    """Command-line entry point: process SMS export files."""
    parser = argparse.ArgumentParser(description="Extract bank transactions from SMS messages")
    parser.add_argument("files", nargs="+", help="SMS export files (.txt, .json, .csv)")
    parser.add_argument("--store", default=config.STORE_PATH, help="JSON store file to append to")
    parser.add_argument("--report", default=None, help="Write a PDF report to this path")
    parser.add_argument("--log-level", default=config.LOG_LEVEL, help="Logging level")
    args = parser.parse_args(argv)

    from logging_config import setup_logging
    setup_logging(log_level=args.log_level, log_file=config.LOG_FILE)

    from loaders.sms_loader import SmsLoadError, load_multiple_files
    from storage.transaction_store import TransactionStoreError

    try:
        messages = load_multiple_files(args.files)
        store = open_store(args.store)
    except (SmsLoadError, TransactionStoreError) as e:
        logger.error(f"Invalid input: {e}")
        print(f"\n❌ Input Error: {e}")
        return 1

    from validators.record_validator import ValidationError

    pipeline = SmsPipeline(store, validator=TransactionValidator(strict_mode=config.STRICT_MODE))
    try:
        pipeline.process_messages(messages)
    except ValidationError as e:
        logger.error(f"Strict validation failed: {e}")
        print(f"\n❌ Validation Error: {e}")
        return 1
    except TransactionStoreError as e:
        logger.error(f"Storage failed: {e}")
        print(f"\n❌ Storage Error: {e}")
        return 1

    summary = TransactionGrouper.summarize(store)
    print(f"\n✅ Processed {len(messages)} messages")
    print(f"Debits:  {summary['debit']['count']} totalling {summary['debit']['total']:.2f}")
    print(f"Credits: {summary['credit']['count']} totalling {summary['credit']['total']:.2f}")

    if args.report:
        from output.writer import generate_pdf_report
        try:
            Path(args.report).parent.mkdir(parents=True, exist_ok=True)
            generate_pdf_report(args.report, store.all_transactions())
        except Exception as e:
            logger.error(f"PDF report generation failed: {e}", exc_info=True)
            print(f"\n❌ Error: {e}")
            return 1
        print(f"Report generated: {args.report}")

    return 0


if __name__ == "__main__":
    sys.exit(main())

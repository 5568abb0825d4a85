"""
SMS Loader Module
Reads batches of SMS message bodies from inbox exports (.txt, .json, .csv).
"""

import csv
import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = ('.txt', '.json', '.csv')

# Field names that hold the message body in JSON/CSV exports
BODY_FIELDS = ('body', 'message', 'text')


class SmsLoadError(Exception):
    """Custom exception for SMS loading errors."""
    pass


def load_messages(file_path: str) -> list[str]:
    """
    Load message bodies from an SMS export file.

    Formats:
    - .txt: one message per non-empty line
    - .json: list of strings, or list of objects with a body/message/text field
    - .csv: header row with a body/message/text column

    Args:
        file_path: Path to the export file

    Returns:
        List of message bodies, in file order

    Raises:
        SmsLoadError: If the file cannot be found, read or parsed
    """
    path = Path(file_path)
    if not path.exists():
        logger.error(f"SMS file not found: {file_path}")
        raise SmsLoadError(f"SMS file not found: {file_path}")

    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        logger.error(f"Unsupported SMS file type: {file_path}")
        raise SmsLoadError(
            f"Unsupported file type '{suffix}'. Allowed types: {', '.join(SUPPORTED_SUFFIXES)}"
        )

    try:
        content = path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Cannot read SMS file {file_path}: {e}", exc_info=True)
        raise SmsLoadError(f"Cannot read SMS file {file_path}: {e}") from e

    if suffix == '.txt':
        messages = _parse_text(content)
    elif suffix == '.json':
        messages = _parse_json(content, file_path)
    else:
        messages = _parse_csv(content, file_path)

    logger.info(f"Loaded {len(messages)} messages from {file_path}")
    return messages


def _parse_text(content: str) -> list[str]:
    return [line.strip() for line in content.splitlines() if line.strip()]


def _body_of(item, file_path: str):
    if isinstance(item, str):
        return item
    if isinstance(item, dict):
        for field in BODY_FIELDS:
            if isinstance(item.get(field), str):
                return item[field]
    raise SmsLoadError(f"Entry without a message body in {file_path}: {item!r}")


def _parse_json(content: str, file_path: str) -> list[str]:
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in {file_path}: {e}")
        raise SmsLoadError(f"Invalid JSON in {file_path}: {e}") from e

    if isinstance(data, dict) and isinstance(data.get('messages'), list):
        data = data['messages']

    if not isinstance(data, list):
        raise SmsLoadError(f"Expected a list of messages in {file_path}")

    return [body.strip() for body in (_body_of(item, file_path) for item in data) if body.strip()]


def _parse_csv(content: str, file_path: str) -> list[str]:
    reader = csv.DictReader(content.splitlines())
    columns = [name.strip().lower() for name in (reader.fieldnames or [])]

    column = next((field for field in BODY_FIELDS if field in columns), None)
    if column is None:
        raise SmsLoadError(
            f"No message column in {file_path}. Expected one of: {', '.join(BODY_FIELDS)}"
        )
    original_name = reader.fieldnames[columns.index(column)]

    messages = []
    for row in reader:
        body = (row.get(original_name) or '').strip()
        if body:
            messages.append(body)
    return messages


def load_multiple_files(file_paths: list[str]) -> list[str]:
    """
    Load and combine messages from several export files.

    Files that fail to load are logged and skipped.

    Raises:
        SmsLoadError: If no file could be loaded
    """
    if not file_paths:
        logger.error("No SMS files provided")
        raise SmsLoadError("No SMS files provided")

    all_messages = []
    failed_files = []

    for idx, file_path in enumerate(file_paths, 1):
        try:
            logger.info(f"Processing SMS file {idx}/{len(file_paths)}: {file_path}")
            all_messages.extend(load_messages(file_path))
        except SmsLoadError as e:
            logger.error(f"Failed to load {file_path}: {e}")
            failed_files.append(file_path)

    if len(failed_files) == len(file_paths):
        raise SmsLoadError(f"Failed to load any SMS files. All {len(file_paths)} files failed.")

    if failed_files:
        logger.warning(
            f"Loaded {len(file_paths) - len(failed_files)}/{len(file_paths)} files. "
            f"Failed: {', '.join(failed_files)}"
        )

    return all_messages

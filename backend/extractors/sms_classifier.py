"""
SMS Classifier Module
Decides whether an incoming text message is about money movement.
"""

import logging
from typing import Optional

from .sms_rules import FINANCIAL_KEYWORDS

logger = logging.getLogger(__name__)


class SmsClassifier:
    """
    Keyword-based financial message classifier.

    Recall-oriented: any keyword hit is enough. The extractor degrades to
    defaults on non-transaction messages, so a spurious positive is cheaper
    than a dropped transaction.
    """

    def __init__(self, keywords: tuple[str, ...] = FINANCIAL_KEYWORDS):
        self.keywords = tuple(keyword.lower() for keyword in keywords)

    def matched_keyword(self, text: str) -> Optional[str]:
        """Return the first keyword found in the text, or None."""
        if not text or not isinstance(text, str):
            return None

        lower_text = text.lower()
        for keyword in self.keywords:
            if keyword in lower_text:
                return keyword
        return None

    def is_financial(self, text: str) -> bool:
        """
        Check whether a message looks like a financial transaction SMS.

        Args:
            text: Message text (any length, empty allowed)

        Returns:
            True if any financial keyword occurs in any letter case
        """
        keyword = self.matched_keyword(text)
        if keyword is None:
            logger.debug("No financial keyword found, message skipped")
            return False

        logger.debug(f"Financial keyword '{keyword}' found")
        return True


_default_classifier = SmsClassifier()


def is_financial(text: str) -> bool:
    """
    Convenience function using the default keyword set.

    Args:
        text: Message text

    Returns:
        True if the message is financial
    """
    return _default_classifier.is_financial(text)

import pytest

from extractors.sms_classifier import SmsClassifier, is_financial
from extractors.sms_rules import FINANCIAL_KEYWORDS


NON_FINANCIAL = [
    "",
    "Your OTP is 482913. Do not share it with anyone.",
    "Meeting moved to 5pm, see you there",
    "Happy birthday! Have a great day",
    "Your parcel is out for delivery",
]


@pytest.mark.parametrize("text", NON_FINANCIAL)
def test_text_without_keywords_is_not_financial(text):
    assert is_financial(text) is False


@pytest.mark.parametrize("keyword", FINANCIAL_KEYWORDS)
@pytest.mark.parametrize("transform", [str.lower, str.upper, str.title])
def test_keyword_in_any_case_is_financial(keyword, transform):
    text = f"Dear customer, {transform(keyword)} noted on your side"
    assert is_financial(text) is True


def test_keyword_inside_longer_word_still_matches():
    assert is_financial("Prepayment reminder") is True


def test_non_string_input_is_not_financial():
    assert is_financial(None) is False
    assert is_financial(12345) is False


def test_matched_keyword_reports_first_keyword_in_table_order():
    classifier = SmsClassifier()
    assert classifier.matched_keyword("Rs 50 credited, balance Rs 900") == "credited"
    assert classifier.matched_keyword("Bal low, no balance left") == "balance"
    assert classifier.matched_keyword("nothing here") is None


def test_custom_keyword_set():
    classifier = SmsClassifier(keywords=("Refund",))
    assert classifier.is_financial("REFUND initiated") is True
    assert classifier.is_financial("Rs 500 debited") is False

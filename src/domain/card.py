"""Card metadata helpers

Only the brand and the last four digits of a card ever leave the request.
"""

import re
from enum import Enum


class CardBrand(str, Enum):
    VISA = "Visa"
    MASTERCARD = "Mastercard"
    AMEX = "Amex"
    DISCOVER = "Discover"
    UNKNOWN = "Unknown"


_BRAND_PATTERNS = (
    (CardBrand.VISA, re.compile(r"^4")),
    (CardBrand.MASTERCARD, re.compile(r"^5[1-5]")),
    (CardBrand.AMEX, re.compile(r"^3[47]")),
    (CardBrand.DISCOVER, re.compile(r"^6(?:011|5)")),
)


def detect_card_brand(card_number: str) -> CardBrand:
    """Derive the card brand from the leading digits"""
    for brand, pattern in _BRAND_PATTERNS:
        if pattern.match(card_number):
            return brand
    return CardBrand.UNKNOWN


def last_four(card_number: str) -> str:
    return card_number[-4:]


def normalize_card_number(card_number: str) -> str:
    """Strip the spaces and dashes payers commonly type"""
    return re.sub(r"[\s-]", "", card_number or "")

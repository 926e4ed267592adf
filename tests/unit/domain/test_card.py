"""Unit tests for card metadata helpers"""

import pytest

from src.domain.card import CardBrand, detect_card_brand, last_four, normalize_card_number


class TestDetectCardBrand:

    @pytest.mark.parametrize(
        "number,brand",
        [
            ("4242424242424242", CardBrand.VISA),
            ("5105105105105100", CardBrand.MASTERCARD),
            ("5555555555554444", CardBrand.MASTERCARD),
            ("378282246310005", CardBrand.AMEX),
            ("341111111111111", CardBrand.AMEX),
            ("6011111111111117", CardBrand.DISCOVER),
            ("6500000000000002", CardBrand.DISCOVER),
            ("5600000000000000", CardBrand.UNKNOWN),
            ("3530111333300000", CardBrand.UNKNOWN),
        ],
    )
    def test_brand_from_leading_digits(self, number, brand):
        assert detect_card_brand(number) == brand


class TestCardNumberHelpers:

    def test_normalize_strips_spaces_and_dashes(self):
        assert normalize_card_number("4242 4242-4242 4242") == "4242424242424242"

    def test_normalize_handles_none(self):
        assert normalize_card_number(None) == ""

    def test_last_four(self):
        assert last_four("4242424242421234") == "1234"

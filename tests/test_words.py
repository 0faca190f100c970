import pytest

from storefront.utils.words import int_to_words, split_amount, to_words


def test_zero():
    assert to_words(0) == "Zero Rupees"


def test_round_hundred_has_no_paise_clause():
    assert to_words(100.00) == "One Hundred Rupees"


def test_lakh_without_remainder():
    assert to_words(100000) == "One Lakh Rupees"


def test_crore_with_paise():
    assert to_words("12345678.50") == (
        "One Crore Twenty Three Lakh Forty Five Thousand Six Hundred "
        "Seventy Eight Rupees and Fifty Paise"
    )


@pytest.mark.parametrize(
    "n, words",
    [
        (7, "Seven"),
        (13, "Thirteen"),
        (40, "Forty"),
        (99, "Ninety Nine"),
        (101, "One Hundred One"),
        (1000, "One Thousand"),
        (10_00_007, "Ten Lakh Seven"),
        (1_000_000_000, "One Hundred Crore"),
    ],
)
def test_int_to_words(n, words):
    assert int_to_words(n) == words


def test_paise_rounding_carries_into_rupees():
    assert split_amount("9.999") == (10, 0)
    assert to_words("9.999") == "Ten Rupees"
    assert to_words("296.5") == "Two Hundred Ninety Six Rupees and Fifty Paise"


def test_no_stray_whitespace():
    text = to_words(20000001.05)
    assert text == text.strip()
    assert "  " not in text

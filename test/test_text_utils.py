from datetime import date

import pytest

from delivery_reconciler.text_utils import (
    clean_client_name,
    contains_term,
    extract_date_from_text,
    is_sentinel_name,
    strip_dates,
)


@pytest.mark.parametrize(
    "raw, cleaned",
    [
        ("12- Acme Store 3", "Acme Store"),
        ("1. Beta   Cafe", "Beta Cafe"),
        ("• سبوتشو أركان -", "سبوتشو أركان"),
        ("٣ كافيه النور", "كافيه النور"),
        ("  ", ""),
        ("Store-2", "Store-2"),
        ("Acme Store 3.", "Acme Store"),
    ],
)
def test_clean_client_name(raw, cleaned):
    assert clean_client_name(raw) == cleaned


def test_contains_term_matches_whole_words():
    assert contains_term("Total: 40", ["total"])
    assert not contains_term("Totally Fresh", ["total"])
    assert contains_term("الاجمالي 40", ["الاجمالي"])


def test_sentinel_names():
    assert is_sentinel_name("Total")
    assert is_sentinel_name("إجمالي")
    assert not is_sentinel_name("Acme")


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Delivery 5/3/2025", date(2025, 3, 5)),
        ("plan 05-03-2025", date(2025, 3, 5)),
        ("2025-03-05 report", date(2025, 3, 5)),
        ("5 مارس 2025", date(2025, 3, 5)),
        ("5 March 2025", date(2025, 3, 5)),
        ("Mar 5 2025", date(2025, 3, 5)),
        ("٥/٣/٢٠٢٥", date(2025, 3, 5)),
        ("31/02/2025", None),
        ("Sept 5 2025", date(2025, 9, 5)),
        ("5 May 2025", date(2025, 5, 5)),
        ("Omar\t5\t1200", None),
        ("Mayar 5 2025", None),
        ("no date here", None),
        ("", None),
    ],
)
def test_extract_date_from_text(text, expected):
    assert extract_date_from_text(text) == expected


def test_strip_dates_blanks_only_the_date():
    assert strip_dates("Acme, 10, 5, due 5/3/2025") == "Acme, 10, 5, due  "
    assert strip_dates("Acme\t10\t٥/٣/٢٠٢٥\t2") == "Acme\t10\t \t2"
    assert strip_dates("Omar\t5\t1200") == "Omar\t5\t1200"

"""
Unit tests for amount parsing and derived ledger totals.
"""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from trackpay.app.domain.ledger.amounts import parse_amount
from trackpay.app.domain.ledger.clock import as_utc
from trackpay.app.domain.ledger.totals import purchase_pending, summarize_purchases, summarize_customers


@pytest.mark.parametrize("raw, expected", [
    (40, 40.0),
    ("40", 40.0),
    (" 12.5 ", 12.5),
    ("19.999", 20.0),
    (0, 0.0),
    (-5, -5.0),
    (None, None),
    ("", None),
    ("abc", None),
    ("nan", None),
    ("inf", None),
    (True, None),
])
def test_parse_amount(raw, expected):
    assert parse_amount(raw) == expected


def _purchase(amount, paid):
    return SimpleNamespace(amount=amount, paid=paid)


def test_purchase_pending():
    assert purchase_pending(_purchase(100, 40)) == 60
    assert purchase_pending(_purchase(0.3, 0.1)) == 0.2


def test_summarize_purchases():
    totals = summarize_purchases([_purchase(100, 40), _purchase(50.5, 0.5)])
    assert totals.total_amount == 150.5
    assert totals.total_paid == 40.5
    assert totals.pending == 110


def test_summarize_purchases_empty():
    assert summarize_purchases([]) == (0, 0, 0)


def test_summarize_customers():
    customers = [
        SimpleNamespace(purchases=[_purchase(100, 40)]),
        SimpleNamespace(purchases=[]),
        SimpleNamespace(purchases=[_purchase(20, 20), _purchase(30, 0)]),
    ]
    totals = summarize_customers(customers)
    assert totals.total_amount == 150
    assert totals.pending == 90


def test_as_utc():
    ist = timezone(timedelta(hours=5, minutes=30))
    converted = as_utc(datetime(2024, 5, 1, 10, 0, tzinfo=ist))
    assert converted.tzinfo == timezone.utc
    assert converted.hour == 4 and converted.minute == 30

    assert as_utc(datetime(2024, 5, 1, 10, 0)) == datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)
    assert as_utc(None) is None

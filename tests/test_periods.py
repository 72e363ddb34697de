"""Tests for year and interval record selection."""

import datetime as dt

from lmnp_core.models import AccountingPeriod, Amortization, Expense, Revenue
from lmnp_core.periods import (
    get_amortizations_for_year,
    get_expenses_for_year,
    get_expenses_in_period,
    get_revenues_for_year,
    get_revenues_in_period,
    in_interval,
)


def _revenue(rid: str, date: str, property_id: str = "p1") -> Revenue:
    return Revenue(id=rid, property_id=property_id, amount=100, date=date)


def _expense(eid: str, date: str, deductible: bool = True) -> Expense:
    return Expense(id=eid, property_id="p1", amount=50, date=date, deductible=deductible)


class TestYearFilters:
    """Test suite for calendar-year selection."""

    def test_revenues_by_year(self):
        revenues = [
            _revenue("a", "2022-12-31"),
            _revenue("b", "2023-01-01"),
            _revenue("c", "2023-12-31"),
            _revenue("d", "2024-01-01"),
            _revenue("e", "garbage"),
        ]

        selected = get_revenues_for_year(2023, revenues)

        assert [r.id for r in selected] == ["b", "c"]

    def test_property_allowlist(self):
        revenues = [_revenue("a", "2023-05-01", "p1"), _revenue("b", "2023-05-01", "p2")]

        assert [r.id for r in get_revenues_for_year(2023, revenues, ["p2"])] == ["b"]

    def test_empty_allowlist_means_no_filter(self):
        revenues = [_revenue("a", "2023-05-01", "p1"), _revenue("b", "2023-05-01", "p2")]

        assert len(get_revenues_for_year(2023, revenues, [])) == 2
        assert len(get_revenues_for_year(2023, revenues, None)) == 2

    def test_expenses_deductible_only_by_default(self):
        expenses = [_expense("a", "2023-02-01"), _expense("b", "2023-02-01", deductible=False)]

        assert [e.id for e in get_expenses_for_year(2023, expenses)] == ["a"]
        assert len(get_expenses_for_year(2023, expenses, deductible_only=False)) == 2

    def test_amortizations_for_year(self, sofa: Amortization):
        """Active assets with a positive allowance bought by year end."""
        later = sofa.model_copy(update={"id": "later", "purchase_date": dt.date(2024, 1, 1)})
        done = sofa.model_copy(update={"id": "done", "status": "completed"})
        free = sofa.model_copy(update={"id": "free", "annual_amortization": 0.0})
        undated = sofa.model_copy(update={"id": "undated", "purchase_date": None})

        selected = get_amortizations_for_year(2023, [sofa, later, done, free, undated])

        assert [a.id for a in selected] == ["amo-1"]

    def test_amortizations_property_filter(self, sofa: Amortization):
        assert get_amortizations_for_year(2023, [sofa], ["property-2"]) == []
        assert get_amortizations_for_year(2023, [sofa], ["property-1"]) == [sofa]


class TestIntervalFilters:
    """Test suite for arbitrary-period selection."""

    def test_bounds_are_inclusive(self):
        start, end = dt.date(2023, 7, 1), dt.date(2023, 12, 31)

        assert in_interval(start, start, end)
        assert in_interval(end, start, end)
        assert not in_interval(dt.date(2023, 6, 30), start, end)
        assert not in_interval(None, start, end)

    def test_revenues_and_expenses_in_period(self):
        period = AccountingPeriod(start_date="2023-07-01", end_date="2023-09-30")
        revenues = [_revenue("a", "2023-06-30"), _revenue("b", "2023-07-01")]
        expenses = [_expense("c", "2023-09-30"), _expense("d", "2023-08-01", deductible=False)]

        assert [r.id for r in get_revenues_in_period(revenues, period)] == ["b"]
        assert [e.id for e in get_expenses_in_period(expenses, period)] == ["c"]
        assert len(get_expenses_in_period(expenses, period, deductible_only=False)) == 2

"""Record selection by calendar year or by arbitrary interval.

Year filters back the declaration totals; interval filters back the
accounting statements and ledger. An optional property allowlist narrows
the records to a declaration's perimeter; None or an empty list means
"every property".
"""

import datetime as dt
from collections.abc import Iterable, Sequence
from typing import Optional

from lmnp_core.models import AccountingPeriod, Amortization, Expense, Revenue
from lmnp_core.numeric import to_number


def in_year(day: Optional[dt.date], year: int) -> bool:
    return day is not None and day.year == year


def in_interval(day: Optional[dt.date], start: dt.date, end: dt.date) -> bool:
    """True when ``start <= day <= end``; a missing date is never inside."""
    return day is not None and start <= day <= end


def _matches_property(property_id: Optional[str], property_ids: Optional[Sequence[str]]) -> bool:
    if not property_ids:
        return True
    return property_id in property_ids


def get_revenues_for_year(
    year: int,
    revenues: Iterable[Revenue],
    property_ids: Optional[Sequence[str]] = None,
) -> list[Revenue]:
    return [
        revenue
        for revenue in revenues
        if in_year(revenue.date, year) and _matches_property(revenue.property_id, property_ids)
    ]


def get_expenses_for_year(
    year: int,
    expenses: Iterable[Expense],
    property_ids: Optional[Sequence[str]] = None,
    *,
    deductible_only: bool = True,
) -> list[Expense]:
    """Expenses dated in ``year``; only deductible ones unless told otherwise."""
    return [
        expense
        for expense in expenses
        if in_year(expense.date, year)
        and _matches_property(expense.property_id, property_ids)
        and (expense.deductible or not deductible_only)
    ]


def get_amortizations_for_year(
    year: int,
    amortizations: Iterable[Amortization],
    property_ids: Optional[Sequence[str]] = None,
) -> list[Amortization]:
    """Active assets bought on or before the end of ``year`` with a positive allowance."""
    year_end = dt.date(year, 12, 31)
    return [
        asset
        for asset in amortizations
        if asset.is_active
        and asset.purchase_date is not None
        and asset.purchase_date <= year_end
        and _matches_property(asset.property_id, property_ids)
        and to_number(asset.annual_amortization) > 0
    ]


def get_revenues_in_period(revenues: Iterable[Revenue], period: AccountingPeriod) -> list[Revenue]:
    return [revenue for revenue in revenues if period.contains(revenue.date)]


def get_expenses_in_period(
    expenses: Iterable[Expense],
    period: AccountingPeriod,
    *,
    deductible_only: bool = True,
) -> list[Expense]:
    return [
        expense
        for expense in expenses
        if period.contains(expense.date) and (expense.deductible or not deductible_only)
    ]


__all__ = [
    "in_year",
    "in_interval",
    "get_revenues_for_year",
    "get_expenses_for_year",
    "get_amortizations_for_year",
    "get_revenues_in_period",
    "get_expenses_in_period",
]

"""Day-based prorata of annual depreciation allowances.

The share of an asset's ``annual_amortization`` that belongs to a period is
``min(1, covered_days / days_in_year)``, where the covered days run from the
later of purchase date and period start to the period end, both inclusive,
and the year is the calendar year containing the period end (366 days in
leap years).
"""

import calendar
import datetime as dt

from lmnp_core.models import AccountingPeriod, Amortization
from lmnp_core.numeric import to_number


def period_duration_in_days(start: dt.date, end: dt.date) -> int:
    """Inclusive day count between two dates, never less than 1."""
    return max(1, (end - start).days + 1)


def days_in_year(year: int) -> int:
    return 366 if calendar.isleap(year) else 365


def compute_amortization_for_period(
    asset: Amortization,
    period_start: dt.date,
    period_end: dt.date,
) -> float:
    """Depreciation of ``asset`` attributable to ``[period_start, period_end]``.

    Returns 0.0 for inactive assets, assets without a purchase date and
    assets bought after the period. The result is not rounded.
    """
    purchase_date = asset.purchase_date
    if not asset.is_active or purchase_date is None or purchase_date > period_end:
        return 0.0

    effective_start = max(purchase_date, period_start)
    covered_days = period_duration_in_days(effective_start, period_end)
    prorata = min(1.0, covered_days / days_in_year(period_end.year))
    return prorata * to_number(asset.annual_amortization)


def amortization_for_accounting_period(asset: Amortization, period: AccountingPeriod) -> float:
    return compute_amortization_for_period(asset, period.start_date, period.end_date)


__all__ = [
    "period_duration_in_days",
    "days_in_year",
    "compute_amortization_for_period",
    "amortization_for_accounting_period",
]

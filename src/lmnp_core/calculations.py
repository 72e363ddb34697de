"""Declaration totals and declaration context.

Totals are computed for a calendar year over the raw user collections:
revenues of the year, deductible expenses of the year, and the full annual
allowance of every active asset bought on or before the year end. The
result is the plain difference; the LMNP non-deficit cap on depreciation is
applied by the form mapping, not here.
"""

from collections.abc import Sequence
from typing import Optional

import structlog

from lmnp_core.models import (
    Amortization,
    Declaration,
    DeclarationContext,
    DeclarationTotals,
    Expense,
    Property,
    Revenue,
)
from lmnp_core.numeric import round_two, sum_rounded, to_number
from lmnp_core.periods import (
    get_amortizations_for_year,
    get_expenses_for_year,
    get_revenues_for_year,
)

logger = structlog.get_logger()


def calculate_declaration_totals(
    year: int,
    revenues: Sequence[Revenue],
    expenses: Sequence[Expense],
    amortizations: Sequence[Amortization] = (),
    property_ids: Optional[Sequence[str]] = None,
) -> DeclarationTotals:
    """Aggregate one year of records into declaration totals.

    Args:
        year: Calendar year covered by the declaration.
        revenues: All revenues of the user, unfiltered.
        expenses: All expenses of the user; only deductible ones count.
        amortizations: All depreciable assets of the user.
        property_ids: Optional allowlist restricting every collection to
            the declaration's properties. None or empty means no filter.

    Returns:
        DeclarationTotals with every field rounded to cents and
        ``net_result == total_revenue - total_expenses - total_amortizations``.
    """
    year_revenues = get_revenues_for_year(year, revenues, property_ids)
    year_expenses = get_expenses_for_year(year, expenses, property_ids)
    year_amortizations = get_amortizations_for_year(year, amortizations, property_ids)

    total_revenue = sum_rounded(to_number(revenue.amount) for revenue in year_revenues)
    total_expenses = sum_rounded(to_number(expense.amount) for expense in year_expenses)
    total_amortizations = sum_rounded(
        to_number(asset.annual_amortization) for asset in year_amortizations
    )
    net_result = round_two(total_revenue - total_expenses - total_amortizations)

    logger.debug(
        "declaration_totals_calculated",
        year=year,
        revenues=len(year_revenues),
        expenses=len(year_expenses),
        amortizations=len(year_amortizations),
        net_result=net_result,
    )

    return DeclarationTotals(
        total_revenue=total_revenue,
        total_expenses=total_expenses,
        total_amortizations=total_amortizations,
        net_result=net_result,
    )


def build_declaration_context(
    declaration: Declaration,
    revenues: Sequence[Revenue],
    expenses: Sequence[Expense],
    properties: Sequence[Property],
    amortizations: Sequence[Amortization],
) -> DeclarationContext:
    """Scope the raw collections to one declaration and compute its totals.

    Properties are kept only when listed in ``declaration.properties``; the
    other collections are restricted to the declaration year and, when the
    declaration lists properties, to those properties.
    """
    property_ids = declaration.properties
    return DeclarationContext(
        declaration=declaration,
        totals=calculate_declaration_totals(
            declaration.year, revenues, expenses, amortizations, property_ids
        ),
        revenues=get_revenues_for_year(declaration.year, revenues, property_ids),
        expenses=get_expenses_for_year(declaration.year, expenses, property_ids),
        properties=[prop for prop in properties if prop.id in property_ids],
        amortizations=get_amortizations_for_year(declaration.year, amortizations, property_ids),
    )


__all__ = [
    "calculate_declaration_totals",
    "build_declaration_context",
]

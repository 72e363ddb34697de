"""Income statement and balance sheet for an accounting period."""

from collections.abc import Sequence

import structlog

from lmnp_core.models import (
    AccountingPeriod,
    Amortization,
    BalanceSheet,
    Expense,
    IncomeStatement,
    Revenue,
    StatementLine,
)
from lmnp_core.numeric import round_two, sum_rounded, to_number
from lmnp_core.periods import get_expenses_in_period, get_revenues_in_period
from lmnp_core.proration import amortization_for_accounting_period

logger = structlog.get_logger()

AMORTIZATION_GROUP = "amortissements"
BALANCE_ADJUSTMENT_LABEL = "Ajustement d'équilibre"
BALANCE_TOLERANCE = 0.01
# Lines whose amount rounds to zero are left out of the sheet.
LINE_VISIBILITY_THRESHOLD = 0.005


def _add_to_group(groups: dict[str, float], key: str, amount: float) -> None:
    groups[key] = round_two(groups.get(key, 0.0) + amount)


def _to_lines(groups: dict[str, float]) -> list[StatementLine]:
    return [StatementLine(label=label, amount=amount) for label, amount in groups.items()]


def build_income_statement(
    revenues: Sequence[Revenue],
    expenses: Sequence[Expense],
    amortizations: Sequence[Amortization],
    period: AccountingPeriod,
) -> IncomeStatement:
    """Group the period's revenues by type and expenses by category.

    Deductible expenses only. Prorated depreciation of every asset is summed
    into a single ``amortissements`` expense line. Groups keep the order in
    which they were first met.
    """
    revenue_groups: dict[str, float] = {}
    expense_groups: dict[str, float] = {}

    for revenue in get_revenues_in_period(revenues, period):
        _add_to_group(revenue_groups, revenue.type_key, to_number(revenue.amount))

    for expense in get_expenses_in_period(expenses, period):
        _add_to_group(expense_groups, expense.category_key, to_number(expense.amount))

    for asset in amortizations:
        amortized = round_two(amortization_for_accounting_period(asset, period))
        if amortized <= 0:
            continue
        _add_to_group(expense_groups, AMORTIZATION_GROUP, amortized)

    revenue_lines = _to_lines(revenue_groups)
    expense_lines = _to_lines(expense_groups)
    total_revenues = sum_rounded(line.amount for line in revenue_lines)
    total_expenses = sum_rounded(line.amount for line in expense_lines)

    return IncomeStatement(
        revenues=revenue_lines,
        expenses=expense_lines,
        total_revenues=total_revenues,
        total_expenses=total_expenses,
        net_result=round_two(total_revenues - total_expenses),
    )


def _visible(lines: list[StatementLine]) -> list[StatementLine]:
    return [line for line in lines if abs(line.amount) > LINE_VISIBILITY_THRESHOLD]


def balance_sides(
    assets: Sequence[StatementLine],
    liabilities: Sequence[StatementLine],
) -> BalanceSheet:
    """Total both sides and insert an adjustment line on the short side.

    When the gap reaches one cent, a line of ``abs(gap)`` labelled
    "Ajustement d'équilibre" goes to the liabilities if the assets are
    larger, to the assets otherwise. Totals and gap are then recomputed.
    """
    balanced_assets = list(assets)
    balanced_liabilities = list(liabilities)

    gap = round_two(
        sum_rounded(line.amount for line in balanced_assets)
        - sum_rounded(line.amount for line in balanced_liabilities)
    )
    if abs(gap) >= BALANCE_TOLERANCE:
        adjustment = StatementLine(label=BALANCE_ADJUSTMENT_LABEL, amount=round_two(abs(gap)))
        if gap > 0:
            balanced_liabilities.append(adjustment)
        else:
            balanced_assets.append(adjustment)
        logger.debug("balance_adjustment_inserted", gap=gap)

    total_assets = sum_rounded(line.amount for line in balanced_assets)
    total_liabilities = sum_rounded(line.amount for line in balanced_liabilities)
    final_gap = round_two(total_assets - total_liabilities)

    return BalanceSheet(
        assets=balanced_assets,
        liabilities=balanced_liabilities,
        total_assets=total_assets,
        total_liabilities=total_liabilities,
        is_balanced=abs(final_gap) < BALANCE_TOLERANCE,
        balance_gap=final_gap,
    )


def build_balance_sheet(
    amortizations: Sequence[Amortization],
    net_result: float,
    period: AccountingPeriod,
) -> BalanceSheet:
    """Simplified bilan derived from the assets and the period result.

    Gross assets count every asset bought by the period end, whatever its
    status; depreciation is the prorated allowance of the period. Treasury
    is taken to be the period result.
    """
    gross_assets = sum_rounded(
        to_number(asset.purchase_amount)
        for asset in amortizations
        if asset.purchase_date is not None and asset.purchase_date <= period.end_date
    )
    accumulated_amortization = sum_rounded(
        round_two(amortization_for_accounting_period(asset, period)) for asset in amortizations
    )

    net_assets = round_two(gross_assets - accumulated_amortization)
    treasury = round_two(net_result)

    assets = _visible(
        [
            StatementLine(label="Immobilisations nettes", amount=net_assets),
            StatementLine(label="Trésorerie et équivalents", amount=treasury),
        ]
    )
    liabilities = _visible(
        [
            StatementLine(label="Capitaux propres", amount=net_assets),
            StatementLine(label="Résultat de l'exercice", amount=treasury),
        ]
    )
    return balance_sides(assets, liabilities)


__all__ = [
    "AMORTIZATION_GROUP",
    "BALANCE_ADJUSTMENT_LABEL",
    "BALANCE_TOLERANCE",
    "build_income_statement",
    "balance_sides",
    "build_balance_sheet",
]

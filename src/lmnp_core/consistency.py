"""Advisory cross-checks between the balance sheet and the income statement."""

from lmnp_core.models import BalanceSheet, CheckStatus, ConsistencyCheck, IncomeStatement
from lmnp_core.numeric import round_two

RESULT_TOLERANCE = 0.01


def check_balance(balance_sheet: BalanceSheet) -> ConsistencyCheck:
    if balance_sheet.is_balanced:
        return ConsistencyCheck(
            message="Bilan équilibré : actif et passif concordent",
            status=CheckStatus.OK,
            gap=balance_sheet.balance_gap,
        )
    return ConsistencyCheck(
        message=f"Écart détecté entre actif et passif ({balance_sheet.balance_gap:.2f} €)",
        status=CheckStatus.WARNING,
        gap=balance_sheet.balance_gap,
    )


def check_result_alignment(income_statement: IncomeStatement) -> ConsistencyCheck:
    """The stated net result must equal revenues minus expenses."""
    gap = round_two(
        abs(
            income_statement.net_result
            - (income_statement.total_revenues - income_statement.total_expenses)
        )
    )
    if gap < RESULT_TOLERANCE:
        return ConsistencyCheck(
            message="Total produits - charges aligné sur le résultat net",
            status=CheckStatus.OK,
            gap=gap,
        )
    return ConsistencyCheck(
        message=f"Écart calculé sur le résultat ({gap:.2f} €)",
        status=CheckStatus.WARNING,
        gap=gap,
    )


def run_consistency_checks(
    balance_sheet: BalanceSheet,
    income_statement: IncomeStatement,
) -> list[ConsistencyCheck]:
    """Balance check first, then result alignment. Never raises."""
    return [check_balance(balance_sheet), check_result_alignment(income_statement)]


__all__ = [
    "check_balance",
    "check_result_alignment",
    "run_consistency_checks",
]

"""Accounting report generation for an arbitrary period.

This is the only entry point of the statement pipeline that performs I/O: it
fetches the user's collections, then delegates to the pure builders.
"""

import structlog

from lmnp_core.consistency import run_consistency_checks
from lmnp_core.exceptions import InvalidPeriodError
from lmnp_core.ledger import build_ledger
from lmnp_core.models import AccountingPeriod, AccountingReportResult
from lmnp_core.repositories import Repositories
from lmnp_core.statements import build_balance_sheet, build_income_statement

logger = structlog.get_logger()


def generate_accounting_reports(
    user_id: str,
    period: AccountingPeriod,
    repositories: Repositories,
) -> AccountingReportResult:
    """Build the balance sheet, income statement, ledger and checks for a period.

    Args:
        user_id: Owner of the records.
        period: Reporting interval, inclusive at both ends.
        repositories: Source of the user's revenues, expenses and assets.

    Returns:
        AccountingReportResult with advisory consistency checks.

    Raises:
        InvalidPeriodError: If the period starts after it ends.
    """
    if not period.is_ordered:
        raise InvalidPeriodError(
            start_date=period.start_date.isoformat(),
            end_date=period.end_date.isoformat(),
        )

    try:
        revenues = repositories.revenues.get_by_user_id(user_id)
        expenses = repositories.expenses.get_by_user_id(user_id)
        amortizations = repositories.amortizations.get_by_user_id(user_id)

        income_statement = build_income_statement(revenues, expenses, amortizations, period)
        balance_sheet = build_balance_sheet(
            amortizations, income_statement.net_result, period
        )
        ledger = build_ledger(revenues, expenses, amortizations, period)
        checks = run_consistency_checks(balance_sheet, income_statement)
    except Exception as e:
        logger.error(
            "accounting_reports_failed",
            user_id=user_id,
            start_date=period.start_date.isoformat(),
            end_date=period.end_date.isoformat(),
            error=str(e),
        )
        raise

    result = AccountingReportResult(
        period=period,
        balance_sheet=balance_sheet,
        income_statement=income_statement,
        ledger=ledger,
        checks=checks,
    )
    logger.info(
        "accounting_reports_generated",
        user_id=user_id,
        start_date=period.start_date.isoformat(),
        end_date=period.end_date.isoformat(),
        net_result=income_statement.net_result,
        ledger_accounts=len(ledger),
        warnings=result.has_warnings,
    )
    return result


__all__ = ["generate_accounting_reports"]

"""General ledger (grand livre) built from revenues, expenses and depreciation.

Postings follow a reduced chart of accounts:

    706          Produits locatifs               credit, one per revenue
    6xx-{cat}    Charges - {cat}                 debit, one per deductible expense
    681          Dotations aux amortissements    debit, one per depreciating asset
    28           Amortissements cumulés          matching credit, ref suffixed -cumul
"""

from collections.abc import Sequence

import structlog

from lmnp_core.models import (
    AccountingPeriod,
    Amortization,
    Expense,
    LedgerAccount,
    LedgerEntry,
    Revenue,
)
from lmnp_core.numeric import round_two, to_number
from lmnp_core.periods import get_expenses_in_period, get_revenues_in_period
from lmnp_core.proration import amortization_for_accounting_period

logger = structlog.get_logger()

REVENUE_ACCOUNT = ("706", "Produits locatifs")
AMORTIZATION_EXPENSE_ACCOUNT = ("681", "Dotations aux amortissements")
ACCUMULATED_AMORTIZATION_ACCOUNT = ("28", "Amortissements cumulés")


def expense_account(category: str) -> tuple[str, str]:
    return f"6xx-{category}", f"Charges - {category}"


class _LedgerBook:
    """Accumulates entries per account, keeping first-seen account order."""

    def __init__(self) -> None:
        self._accounts: dict[str, LedgerAccount] = {}

    def post(self, account: tuple[str, str], entry: LedgerEntry) -> None:
        code, label = account
        existing = self._accounts.get(code)
        if existing is None:
            existing = LedgerAccount(account=code, label=label)
            self._accounts[code] = existing
        existing.entries.append(entry)
        existing.total_debit = round_two(existing.total_debit + entry.debit)
        existing.total_credit = round_two(existing.total_credit + entry.credit)

    def accounts(self) -> list[LedgerAccount]:
        for account in self._accounts.values():
            account.entries.sort(key=lambda entry: entry.date)
        return list(self._accounts.values())


def build_ledger(
    revenues: Sequence[Revenue],
    expenses: Sequence[Expense],
    amortizations: Sequence[Amortization],
    period: AccountingPeriod,
) -> list[LedgerAccount]:
    """Post the period's movements and return one LedgerAccount per account code.

    Entries are sorted chronologically within each account; accounts come
    in the order they were first posted to.
    """
    book = _LedgerBook()

    for revenue in get_revenues_in_period(revenues, period):
        book.post(
            REVENUE_ACCOUNT,
            LedgerEntry(
                date=revenue.date,
                description=revenue.description,
                debit=0.0,
                credit=round_two(to_number(revenue.amount)),
                reference=revenue.id,
            ),
        )

    for expense in get_expenses_in_period(expenses, period):
        book.post(
            expense_account(expense.category_key),
            LedgerEntry(
                date=expense.date,
                description=expense.description,
                debit=round_two(to_number(expense.amount)),
                credit=0.0,
                reference=expense.id,
            ),
        )

    for asset in amortizations:
        amount = round_two(amortization_for_accounting_period(asset, period))
        if amount <= 0:
            continue
        book.post(
            AMORTIZATION_EXPENSE_ACCOUNT,
            LedgerEntry(
                date=period.end_date,
                description=f"Amortissement {asset.item_name}",
                debit=amount,
                credit=0.0,
                reference=asset.id,
            ),
        )
        book.post(
            ACCUMULATED_AMORTIZATION_ACCOUNT,
            LedgerEntry(
                date=period.end_date,
                description=f"Cumul amort. {asset.item_name}",
                debit=0.0,
                credit=amount,
                reference=f"{asset.id}-cumul",
            ),
        )

    accounts = book.accounts()
    logger.debug("ledger_built", accounts=len(accounts))
    return accounts


__all__ = [
    "REVENUE_ACCOUNT",
    "AMORTIZATION_EXPENSE_ACCOUNT",
    "ACCUMULATED_AMORTIZATION_ACCOUNT",
    "expense_account",
    "build_ledger",
]

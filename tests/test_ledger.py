"""Tests for the general ledger builder."""

import datetime as dt

from lmnp_core.ledger import build_ledger, expense_account
from lmnp_core.models import AccountingPeriod, Expense, Revenue


class TestBuildLedger:
    """Test suite for build_ledger."""

    def test_accounts_in_first_posting_order(self, revenues, expenses, sofa, year_2023):
        ledger = build_ledger(revenues, expenses, [sofa], year_2023)

        assert [(a.account, a.label) for a in ledger] == [
            ("706", "Produits locatifs"),
            ("6xx-maintenance", "Charges - maintenance"),
            ("681", "Dotations aux amortissements"),
            ("28", "Amortissements cumulés"),
        ]

    def test_revenue_credits(self, revenues, year_2023):
        (account,) = build_ledger(revenues, [], [], year_2023)
        (entry,) = account.entries

        assert entry.credit == 1000
        assert entry.debit == 0
        assert entry.reference == "rev-1"
        assert entry.description == "Loyer mars"
        assert account.total_credit == 1000

    def test_amortization_entries_paired(self, sofa):
        period = AccountingPeriod(start_date="2023-07-01", end_date="2023-12-31")

        dotation, cumul = build_ledger([], [], [sofa], period)

        assert dotation.entries[0].debit == 60.49
        assert dotation.entries[0].date == dt.date(2023, 12, 31)
        assert dotation.entries[0].description == "Amortissement Canapé"
        assert dotation.entries[0].reference == "amo-1"
        assert cumul.entries[0].credit == 60.49
        assert cumul.entries[0].description == "Cumul amort. Canapé"
        assert cumul.entries[0].reference == "amo-1-cumul"
        assert dotation.total_debit == cumul.total_credit

    def test_entries_sorted_by_date(self, year_2023):
        revenues = [
            Revenue(id="late", amount=10, date="2023-11-01"),
            Revenue(id="early", amount=20, date="2023-02-01"),
            Revenue(id="mid", amount=30, date="2023-06-01"),
        ]

        (account,) = build_ledger(revenues, [], [], year_2023)

        assert [e.reference for e in account.entries] == ["early", "mid", "late"]
        assert account.total_credit == 60

    def test_only_deductible_expenses_in_period(self, year_2023):
        expenses = [
            Expense(id="a", amount=12.345, date="2023-03-01", category="insurance"),
            Expense(id="b", amount=99, date="2023-03-01", category="insurance", deductible=False),
            Expense(id="c", amount=5, date="2022-03-01", category="insurance"),
        ]

        (account,) = build_ledger([], expenses, [], year_2023)

        assert account.account == "6xx-insurance"
        assert [e.reference for e in account.entries] == ["a"]
        assert account.entries[0].debit == 12.35
        assert account.total_debit == 12.35

    def test_inactive_asset_not_posted(self, sofa, year_2023):
        disposed = sofa.model_copy(update={"status": "disposed"})

        assert build_ledger([], [], [disposed], year_2023) == []

    def test_expense_account(self):
        assert expense_account("taxes") == ("6xx-taxes", "Charges - taxes")
